"""
Authentication and ownership dependencies for FastAPI endpoints.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from assessment_hub.core.config import settings
from assessment_hub.core.exceptions import AccessDeniedError, AuthenticationError, NotFoundError
from assessment_hub.dependencies import get_storage
from assessment_hub.schemas.assessment import Assessment
from assessment_hub.schemas.auth import TokenData, User
from assessment_hub.services import auth as auth_service
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
) -> User:
    """
    Resolves the caller from the bearer header, falling back to the session cookie.
    """
    token = bearer_token or request.cookies.get(settings.session_cookie_name)
    if not token:
        raise AuthenticationError()

    payload = auth_service.decode_access_token(token)
    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise AuthenticationError("Could not validate credentials")

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise AuthenticationError("Session expired")

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise AuthenticationError("Invalid token type")

    try:
        token_data = TokenData(user_id=int(payload.get("sub")), username=payload.get("username"))
    except (TypeError, ValueError):
        logger.warning("Authentication failed: Missing subject in token")
        raise AuthenticationError("Could not validate credentials")

    user = storage.get_user(token_data.user_id)
    if user is None:
        logger.warning(f"Authentication failed: User {token_data.user_id} not found")
        raise AuthenticationError("User not found")
    return user


def get_assessment_or_404(assessment_id: int, storage: Storage) -> Assessment:
    assessment = storage.get_assessment(assessment_id)
    if assessment is None:
        raise NotFoundError("Assessment not found")
    return assessment


def get_owned_assessment(
    assessment_id: int,
    storage: Storage,
    user: User,
    action: str = "modify",
) -> Assessment:
    """
    Fetches an assessment and enforces that ``user`` created it.
    Missing assessments are 404, someone else's are 403.
    """
    assessment = get_assessment_or_404(assessment_id, storage)
    if assessment.created_by != user.id:
        logger.warning(f"User {user.id} denied '{action}' on assessment {assessment_id}")
        raise AccessDeniedError(f"Not authorized to {action} this assessment")
    return assessment
