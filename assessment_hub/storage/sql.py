"""
SQLAlchemy-backed record store.

Behaves exactly like ``MemStorage`` (same return types, same absence
semantics) but keeps records in a relational database so they survive a
restart. Each operation runs in its own short-lived session.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from assessment_hub import models
from assessment_hub.schemas.analysis import AnalysisResult, AnalysisResultInsert
from assessment_hub.schemas.assessment import Assessment, AssessmentInsert
from assessment_hub.schemas.auth import User, UserInsert
from assessment_hub.schemas.department import Department
from assessment_hub.schemas.response import AssessmentResponse, ResponseInsert
from assessment_hub.storage.base import DEFAULT_DEPARTMENTS, Storage

logger = logging.getLogger(__name__)

_LINK_TABLES = (
    models.AssessmentDepartment,
    models.AssessmentParticipant,
    models.AssessmentAiOption,
)


class SqlStorage(Storage):
    backend_name = "sql"

    def __init__(self, session_factory: sessionmaker, departments=DEFAULT_DEPARTMENTS):
        self._session_factory = session_factory
        self._seed_departments(departments)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _seed_departments(self, names):
        with self._session() as db:
            if db.query(models.Department).count() > 0:
                return
            for name in names:
                db.add(models.Department(name=name))
            db.commit()
            logger.info(f"Seeded {len(names)} departments")

    def _insert(self, db: Session, row):
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    def _link(self, model: Type, assessment_id: int, column: str, child_id: Any) -> bool:
        with self._session() as db:
            exists = db.query(model).filter(
                model.assessment_id == assessment_id,
                getattr(model, column) == child_id,
            ).first()
            if exists:
                return True
            db.add(model(assessment_id=assessment_id, **{column: child_id}))
            try:
                db.commit()
            except IntegrityError:
                # Another request inserted the same pair first
                db.rollback()
            return True

    def _unlink(self, model: Type, assessment_id: int, column: str, child_id: Any) -> bool:
        with self._session() as db:
            deleted = db.query(model).filter(
                model.assessment_id == assessment_id,
                getattr(model, column) == child_id,
            ).delete(synchronize_session=False)
            db.commit()
            return deleted > 0

    # --- Users ---
    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            row = db.get(models.User, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.username == username).order_by(models.User.id).first()
            return User.model_validate(row) if row else None

    def create_user(self, data: UserInsert) -> User:
        with self._session() as db:
            row = self._insert(db, models.User(
                username=data.username,
                password=data.password,
                name=data.name or None,
                role=data.role or None,
            ))
            return User.model_validate(row)

    # --- Assessments ---
    def create_assessment(self, data: AssessmentInsert) -> Assessment:
        with self._session() as db:
            row = self._insert(db, models.Assessment(
                name=data.name,
                type_id=data.type_id,
                start_date=data.start_date,
                end_date=data.end_date,
                created_by=data.created_by,
                ai_prompt=data.ai_prompt or None,
            ))
            return Assessment.model_validate(row)

    def get_assessment(self, assessment_id: int) -> Optional[Assessment]:
        with self._session() as db:
            row = db.get(models.Assessment, assessment_id)
            return Assessment.model_validate(row) if row else None

    def get_assessments_by_user(self, user_id: int) -> List[Assessment]:
        with self._session() as db:
            rows = db.query(models.Assessment).filter(
                models.Assessment.created_by == user_id
            ).order_by(models.Assessment.id).all()
            return [Assessment.model_validate(r) for r in rows]

    def get_assessments_by_type(self, type_id: int) -> List[Assessment]:
        with self._session() as db:
            rows = db.query(models.Assessment).filter(
                models.Assessment.type_id == type_id
            ).order_by(models.Assessment.id).all()
            return [Assessment.model_validate(r) for r in rows]

    def update_assessment(self, assessment_id: int, changes: Dict[str, Any]) -> Optional[Assessment]:
        with self._session() as db:
            row = db.get(models.Assessment, assessment_id)
            if row is None:
                return None
            for key, value in changes.items():
                if key in Assessment.model_fields and key != "id":
                    setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return Assessment.model_validate(row)

    def delete_assessment(self, assessment_id: int) -> bool:
        with self._session() as db:
            row = db.get(models.Assessment, assessment_id)
            if row is None:
                return False
            for link in _LINK_TABLES:
                db.query(link).filter(link.assessment_id == assessment_id).delete(synchronize_session=False)
            db.delete(row)
            db.commit()
            return True

    # --- Departments ---
    def get_departments(self) -> List[Department]:
        with self._session() as db:
            rows = db.query(models.Department).order_by(models.Department.id).all()
            return [Department.model_validate(r) for r in rows]

    def get_department(self, department_id: int) -> Optional[Department]:
        with self._session() as db:
            row = db.get(models.Department, department_id)
            return Department.model_validate(row) if row else None

    def get_departments_by_assessment(self, assessment_id: int) -> List[Department]:
        # Inner join drops links whose department no longer exists
        stmt = (
            select(models.Department)
            .join(models.AssessmentDepartment, models.AssessmentDepartment.department_id == models.Department.id)
            .where(models.AssessmentDepartment.assessment_id == assessment_id)
            .order_by(models.Department.id)
        )
        with self._session() as db:
            return [Department.model_validate(r) for r in db.scalars(stmt).all()]

    def add_department_to_assessment(self, assessment_id: int, department_id: int) -> bool:
        return self._link(models.AssessmentDepartment, assessment_id, "department_id", department_id)

    def remove_department_from_assessment(self, assessment_id: int, department_id: int) -> bool:
        return self._unlink(models.AssessmentDepartment, assessment_id, "department_id", department_id)

    # --- Participants ---
    def get_assessment_participants(self, assessment_id: int) -> List[User]:
        stmt = (
            select(models.User)
            .join(models.AssessmentParticipant, models.AssessmentParticipant.user_id == models.User.id)
            .where(models.AssessmentParticipant.assessment_id == assessment_id)
            .order_by(models.User.id)
        )
        with self._session() as db:
            return [User.model_validate(r) for r in db.scalars(stmt).all()]

    def add_participant_to_assessment(self, assessment_id: int, user_id: int) -> bool:
        return self._link(models.AssessmentParticipant, assessment_id, "user_id", user_id)

    def remove_participant_from_assessment(self, assessment_id: int, user_id: int) -> bool:
        return self._unlink(models.AssessmentParticipant, assessment_id, "user_id", user_id)

    # --- AI options ---
    def get_ai_options_by_assessment(self, assessment_id: int) -> List[str]:
        with self._session() as db:
            rows = db.query(models.AssessmentAiOption.option_id).filter(
                models.AssessmentAiOption.assessment_id == assessment_id
            ).order_by(models.AssessmentAiOption.option_id).all()
            return [r.option_id for r in rows]

    def add_ai_option_to_assessment(self, assessment_id: int, option_id: str) -> bool:
        return self._link(models.AssessmentAiOption, assessment_id, "option_id", option_id)

    def remove_ai_option_from_assessment(self, assessment_id: int, option_id: str) -> bool:
        return self._unlink(models.AssessmentAiOption, assessment_id, "option_id", option_id)

    # --- Responses ---
    def create_response(self, data: ResponseInsert) -> AssessmentResponse:
        with self._session() as db:
            row = self._insert(db, models.AssessmentResponse(
                assessment_id=data.assessment_id,
                user_id=data.user_id,
                data=data.data,
            ))
            return AssessmentResponse.model_validate(row)

    def get_responses_by_assessment(self, assessment_id: int) -> List[AssessmentResponse]:
        with self._session() as db:
            rows = db.query(models.AssessmentResponse).filter(
                models.AssessmentResponse.assessment_id == assessment_id
            ).order_by(models.AssessmentResponse.id).all()
            return [AssessmentResponse.model_validate(r) for r in rows]

    def get_responses_by_user(self, user_id: int) -> List[AssessmentResponse]:
        with self._session() as db:
            rows = db.query(models.AssessmentResponse).filter(
                models.AssessmentResponse.user_id == user_id
            ).order_by(models.AssessmentResponse.id).all()
            return [AssessmentResponse.model_validate(r) for r in rows]

    # --- Analysis results ---
    def create_analysis_result(self, data: AnalysisResultInsert) -> AnalysisResult:
        with self._session() as db:
            row = self._insert(db, models.AnalysisResult(
                assessment_id=data.assessment_id,
                analysis=data.analysis,
            ))
            return AnalysisResult.model_validate(row)

    def get_analysis_result(self, result_id: int) -> Optional[AnalysisResult]:
        with self._session() as db:
            row = db.get(models.AnalysisResult, result_id)
            return AnalysisResult.model_validate(row) if row else None

    def get_analysis_results_by_assessment(self, assessment_id: int) -> List[AnalysisResult]:
        with self._session() as db:
            rows = db.query(models.AnalysisResult).filter(
                models.AnalysisResult.assessment_id == assessment_id
            ).order_by(models.AnalysisResult.id).all()
            return [AnalysisResult.model_validate(r) for r in rows]

    def healthcheck(self) -> bool:
        try:
            with self._session() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Storage healthcheck failed: {e}")
            return False
