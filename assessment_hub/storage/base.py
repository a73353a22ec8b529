"""
Record store contract.

Every backend returns immutable record models and signals absence with
``None`` (or ``False`` for boolean operations); the store never raises
domain errors. Referential checks (does the assessment exist, is the
caller its creator) belong to the routers.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from assessment_hub.schemas.analysis import AnalysisResult, AnalysisResultInsert
from assessment_hub.schemas.assessment import Assessment, AssessmentInsert
from assessment_hub.schemas.auth import User, UserInsert
from assessment_hub.schemas.department import Department
from assessment_hub.schemas.response import AssessmentResponse, ResponseInsert

DEFAULT_DEPARTMENTS = (
    "Recursos Humanos",
    "Tecnologia",
    "Marketing",
    "Vendas",
    "Financeiro",
    "Operações",
)


class Storage(ABC):
    backend_name = "abstract"

    # --- Users ---
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: UserInsert) -> User:
        """Store a new user. Username uniqueness is the caller's responsibility."""

    # --- Assessments ---
    @abstractmethod
    def create_assessment(self, data: AssessmentInsert) -> Assessment: ...

    @abstractmethod
    def get_assessment(self, assessment_id: int) -> Optional[Assessment]: ...

    @abstractmethod
    def get_assessments_by_user(self, user_id: int) -> List[Assessment]: ...

    @abstractmethod
    def get_assessments_by_type(self, type_id: int) -> List[Assessment]: ...

    @abstractmethod
    def update_assessment(self, assessment_id: int, changes: Dict[str, Any]) -> Optional[Assessment]:
        """Shallow-merge ``changes`` into the record. No validation happens here."""

    @abstractmethod
    def delete_assessment(self, assessment_id: int) -> bool:
        """
        Remove the assessment and its department/participant/AI-option links.
        Responses and analysis results that reference it are kept.
        """

    # --- Departments ---
    @abstractmethod
    def get_departments(self) -> List[Department]: ...

    @abstractmethod
    def get_department(self, department_id: int) -> Optional[Department]: ...

    @abstractmethod
    def get_departments_by_assessment(self, assessment_id: int) -> List[Department]: ...

    @abstractmethod
    def add_department_to_assessment(self, assessment_id: int, department_id: int) -> bool: ...

    @abstractmethod
    def remove_department_from_assessment(self, assessment_id: int, department_id: int) -> bool: ...

    # --- Participants ---
    @abstractmethod
    def get_assessment_participants(self, assessment_id: int) -> List[User]: ...

    @abstractmethod
    def add_participant_to_assessment(self, assessment_id: int, user_id: int) -> bool: ...

    @abstractmethod
    def remove_participant_from_assessment(self, assessment_id: int, user_id: int) -> bool: ...

    # --- AI options ---
    @abstractmethod
    def get_ai_options_by_assessment(self, assessment_id: int) -> List[str]: ...

    @abstractmethod
    def add_ai_option_to_assessment(self, assessment_id: int, option_id: str) -> bool: ...

    @abstractmethod
    def remove_ai_option_from_assessment(self, assessment_id: int, option_id: str) -> bool: ...

    # --- Responses ---
    @abstractmethod
    def create_response(self, data: ResponseInsert) -> AssessmentResponse: ...

    @abstractmethod
    def get_responses_by_assessment(self, assessment_id: int) -> List[AssessmentResponse]: ...

    @abstractmethod
    def get_responses_by_user(self, user_id: int) -> List[AssessmentResponse]: ...

    # --- Analysis results ---
    @abstractmethod
    def create_analysis_result(self, data: AnalysisResultInsert) -> AnalysisResult: ...

    @abstractmethod
    def get_analysis_result(self, result_id: int) -> Optional[AnalysisResult]: ...

    @abstractmethod
    def get_analysis_results_by_assessment(self, assessment_id: int) -> List[AnalysisResult]: ...

    def healthcheck(self) -> bool:
        return True
