"""
In-process record store.

Records live in per-entity dicts keyed by id. Many-to-many links are kept
as adjacency maps (assessment id -> set of child ids), so membership checks
and listings never parse composite keys.
"""
import itertools
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from assessment_hub.schemas.analysis import AnalysisResult, AnalysisResultInsert
from assessment_hub.schemas.assessment import Assessment, AssessmentInsert
from assessment_hub.schemas.auth import User, UserInsert
from assessment_hub.schemas.department import Department
from assessment_hub.schemas.response import AssessmentResponse, ResponseInsert
from assessment_hub.storage.base import DEFAULT_DEPARTMENTS, Storage


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage(Storage):
    backend_name = "memory"

    def __init__(self, departments: Iterable[str] = DEFAULT_DEPARTMENTS):
        self._users: Dict[int, User] = {}
        self._assessments: Dict[int, Assessment] = {}
        self._departments: Dict[int, Department] = {}
        self._responses: Dict[int, AssessmentResponse] = {}
        self._analysis_results: Dict[int, AnalysisResult] = {}

        self._assessment_departments: Dict[int, Set[int]] = {}
        self._assessment_participants: Dict[int, Set[int]] = {}
        self._assessment_ai_options: Dict[int, Set[str]] = {}

        # Ids are never reused, even after deletes
        self._user_ids = itertools.count(1)
        self._assessment_ids = itertools.count(1)
        self._department_ids = itertools.count(1)
        self._response_ids = itertools.count(1)
        self._analysis_result_ids = itertools.count(1)

        for name in departments:
            department_id = next(self._department_ids)
            self._departments[department_id] = Department(id=department_id, name=name)

    # --- link helpers ---
    @staticmethod
    def _link(links: Dict[int, Set[Any]], parent_id: int, child_id: Any) -> bool:
        links.setdefault(parent_id, set()).add(child_id)
        return True

    @staticmethod
    def _unlink(links: Dict[int, Set[Any]], parent_id: int, child_id: Any) -> bool:
        members = links.get(parent_id)
        if not members or child_id not in members:
            return False
        members.discard(child_id)
        if not members:
            del links[parent_id]
        return True

    @staticmethod
    def _members(links: Dict[int, Set[Any]], parent_id: int) -> List[Any]:
        return sorted(links.get(parent_id, ()))

    # --- Users ---
    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, data: UserInsert) -> User:
        user_id = next(self._user_ids)
        user = User(
            id=user_id,
            username=data.username,
            password=data.password,
            name=data.name or None,
            role=data.role or None,
            created_at=_now(),
        )
        self._users[user_id] = user
        return user

    # --- Assessments ---
    def create_assessment(self, data: AssessmentInsert) -> Assessment:
        assessment_id = next(self._assessment_ids)
        assessment = Assessment(
            id=assessment_id,
            name=data.name,
            type_id=data.type_id,
            start_date=data.start_date,
            end_date=data.end_date,
            created_by=data.created_by,
            created_at=_now(),
            ai_prompt=data.ai_prompt or None,
        )
        self._assessments[assessment_id] = assessment
        return assessment

    def get_assessment(self, assessment_id: int) -> Optional[Assessment]:
        return self._assessments.get(assessment_id)

    def get_assessments_by_user(self, user_id: int) -> List[Assessment]:
        return [a for a in self._assessments.values() if a.created_by == user_id]

    def get_assessments_by_type(self, type_id: int) -> List[Assessment]:
        return [a for a in self._assessments.values() if a.type_id == type_id]

    def update_assessment(self, assessment_id: int, changes: Dict[str, Any]) -> Optional[Assessment]:
        assessment = self._assessments.get(assessment_id)
        if assessment is None:
            return None
        updated = assessment.model_copy(update={
            key: value for key, value in changes.items()
            if key in Assessment.model_fields and key != "id"
        })
        self._assessments[assessment_id] = updated
        return updated

    def delete_assessment(self, assessment_id: int) -> bool:
        if self._assessments.pop(assessment_id, None) is None:
            return False
        self._assessment_departments.pop(assessment_id, None)
        self._assessment_participants.pop(assessment_id, None)
        self._assessment_ai_options.pop(assessment_id, None)
        return True

    # --- Departments ---
    def get_departments(self) -> List[Department]:
        return list(self._departments.values())

    def get_department(self, department_id: int) -> Optional[Department]:
        return self._departments.get(department_id)

    def get_departments_by_assessment(self, assessment_id: int) -> List[Department]:
        ids = self._members(self._assessment_departments, assessment_id)
        return [self._departments[i] for i in ids if i in self._departments]

    def add_department_to_assessment(self, assessment_id: int, department_id: int) -> bool:
        return self._link(self._assessment_departments, assessment_id, department_id)

    def remove_department_from_assessment(self, assessment_id: int, department_id: int) -> bool:
        return self._unlink(self._assessment_departments, assessment_id, department_id)

    # --- Participants ---
    def get_assessment_participants(self, assessment_id: int) -> List[User]:
        ids = self._members(self._assessment_participants, assessment_id)
        return [self._users[i] for i in ids if i in self._users]

    def add_participant_to_assessment(self, assessment_id: int, user_id: int) -> bool:
        return self._link(self._assessment_participants, assessment_id, user_id)

    def remove_participant_from_assessment(self, assessment_id: int, user_id: int) -> bool:
        return self._unlink(self._assessment_participants, assessment_id, user_id)

    # --- AI options ---
    def get_ai_options_by_assessment(self, assessment_id: int) -> List[str]:
        return self._members(self._assessment_ai_options, assessment_id)

    def add_ai_option_to_assessment(self, assessment_id: int, option_id: str) -> bool:
        return self._link(self._assessment_ai_options, assessment_id, option_id)

    def remove_ai_option_from_assessment(self, assessment_id: int, option_id: str) -> bool:
        return self._unlink(self._assessment_ai_options, assessment_id, option_id)

    # --- Responses ---
    def create_response(self, data: ResponseInsert) -> AssessmentResponse:
        response_id = next(self._response_ids)
        response = AssessmentResponse(
            id=response_id,
            assessment_id=data.assessment_id,
            user_id=data.user_id,
            data=data.data,
            submitted_at=_now(),
        )
        self._responses[response_id] = response
        return response

    def get_responses_by_assessment(self, assessment_id: int) -> List[AssessmentResponse]:
        return [r for r in self._responses.values() if r.assessment_id == assessment_id]

    def get_responses_by_user(self, user_id: int) -> List[AssessmentResponse]:
        return [r for r in self._responses.values() if r.user_id == user_id]

    # --- Analysis results ---
    def create_analysis_result(self, data: AnalysisResultInsert) -> AnalysisResult:
        result_id = next(self._analysis_result_ids)
        result = AnalysisResult(
            id=result_id,
            assessment_id=data.assessment_id,
            analysis=data.analysis,
            generated_at=_now(),
        )
        self._analysis_results[result_id] = result
        return result

    def get_analysis_result(self, result_id: int) -> Optional[AnalysisResult]:
        return self._analysis_results.get(result_id)

    def get_analysis_results_by_assessment(self, assessment_id: int) -> List[AnalysisResult]:
        return [r for r in self._analysis_results.values() if r.assessment_id == assessment_id]
