import enum
from typing import Optional

from pydantic import Field

from assessment_hub.core.schemas import CamelModel, RecordModel, UtcDatetime


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class UserInsert(CamelModel):
    """Store input. `password` is already hashed."""
    username: str
    password: str
    name: Optional[str] = None
    role: Optional[str] = None


class User(RecordModel):
    id: int
    username: str
    password: str
    name: Optional[str] = None
    role: Optional[str] = None
    created_at: UtcDatetime


class UserPublic(RecordModel):
    """User as exposed over the API (no credential hash)."""
    id: int
    username: str
    name: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[UtcDatetime] = None


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(None, max_length=120)
    role: UserRole = UserRole.USER


class LoginRequest(CamelModel):
    username: str
    password: str


class TokenData(CamelModel):
    user_id: Optional[int] = None
    username: Optional[str] = None
