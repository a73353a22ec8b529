# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, department, assessment, response, analysis_result

# Explicit class exports for cleaner imports
from .user import User
from .department import Department
from .assessment import Assessment, AssessmentDepartment, AssessmentParticipant, AssessmentAiOption
from .response import AssessmentResponse
from .analysis_result import AnalysisResult

__all__ = [
    "User",
    "Department",
    "Assessment",
    "AssessmentDepartment",
    "AssessmentParticipant",
    "AssessmentAiOption",
    "AssessmentResponse",
    "AnalysisResult",
]
