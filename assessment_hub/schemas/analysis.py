from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field

from assessment_hub.core.schemas import CamelModel, RecordModel, UtcDatetime


class AnalysisDocument(CamelModel):
    """Structured AI summary of an assessment's responses."""
    model_config = ConfigDict(extra="allow")

    summary: str
    patterns: List[str] = Field(default_factory=list)
    development_areas: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    trends: List[str] = Field(default_factory=list)
    risk_areas: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)


class AnalysisCreate(CamelModel):
    """Pre-computed analysis. `analysis` may be a JSON string or an object."""
    assessment_id: int
    analysis: Union[str, Dict[str, Any]]


class AnalysisResultInsert(CamelModel):
    assessment_id: int
    analysis: str


class AnalysisResult(RecordModel):
    id: int
    assessment_id: int
    analysis: str
    generated_at: UtcDatetime


class GeneratedAnalysis(CamelModel):
    id: int
    assessment_id: int
    results: AnalysisDocument
    generated_at: UtcDatetime


class ChartRecommendation(CamelModel):
    model_config = ConfigDict(extra="allow")

    chart_type: str
    title: str
    description: Optional[str] = None
    data_fields: List[str] = Field(default_factory=list)
    config: Dict[str, Any] = Field(default_factory=dict)


class VisualizationRecommendations(CamelModel):
    recommendations: List[ChartRecommendation] = Field(default_factory=list)


class FeedbackTextRequest(CamelModel):
    aspect: str = Field(..., min_length=1, max_length=200)


class FeedbackText(CamelModel):
    aspect: str
    text: str
