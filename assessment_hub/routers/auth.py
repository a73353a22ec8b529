import logging

from fastapi import APIRouter, Depends, Response, status

from assessment_hub.core.config import settings
from assessment_hub.core.exceptions import AuthenticationError, ValidationFailedError
from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_current_user
from assessment_hub.schemas.auth import LoginRequest, RegisterRequest, User, UserInsert, UserPublic
from assessment_hub.services import auth as auth_service
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _start_session(response: Response, user: User) -> None:
    token = auth_service.create_access_token(data={"sub": user.id, "username": user.username})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def _public(user: User) -> UserPublic:
    return UserPublic.model_validate(user.model_dump())


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, storage: Storage = Depends(get_storage)):
    # The store does not enforce unique usernames, so check here
    if storage.get_user_by_username(data.username):
        raise ValidationFailedError("Username already exists")

    user = storage.create_user(UserInsert(
        username=data.username,
        password=auth_service.get_password_hash(data.password),
        name=data.name,
        role=data.role.value,
    ))
    logger.info(f"Registered user {user.id} ({user.username})")
    _start_session(response, user)
    return _public(user)


@router.post("/login", response_model=UserPublic)
def login(data: LoginRequest, response: Response, storage: Storage = Depends(get_storage)):
    user = storage.get_user_by_username(data.username)
    if not user or not auth_service.verify_password(data.password, user.password):
        logger.info(f"Failed login for '{data.username}'")
        raise AuthenticationError("Incorrect username or password")

    _start_session(response, user)
    return _public(user)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Successfully logged out"}


@router.get("/user", response_model=UserPublic)
def get_me(current_user: User = Depends(get_current_user)):
    return _public(current_user)
