import uuid
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blogcore.models import UserRole

T = TypeVar("T")


# --- User ---

class UserBase(BaseModel):
    email: EmailStr = Field(max_length=255)
    first_name: str = Field(min_length=1, max_length=150)
    last_name: str = Field(min_length=1, max_length=150)


class UserCreate(UserBase):
    password: str = Field(min_length=6, max_length=128)
    role: UserRole | None = None


class UserUpdate(BaseModel):
    email: EmailStr | None = Field(None, max_length=255)
    first_name: str | None = Field(None, min_length=1, max_length=150)
    last_name: str | None = Field(None, min_length=1, max_length=150)
    password: str | None = Field(None, min_length=6, max_length=128)
    role: UserRole | None = None


class UserResponse(UserBase):
    id: uuid.UUID
    role: UserRole
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserResponse):
    posts: list["PostSummary"] = []


# --- Post ---

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    published: bool = False


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1)
    published: bool | None = None


class PostFilter(BaseModel):
    """Conjunctive listing filter; ``None`` fields do not constrain."""

    published: bool | None = None
    author_id: uuid.UUID | None = None
    search_term: str | None = None


class PostSummary(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    published: bool
    author_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class PostResponse(PostSummary):
    author: UserResponse | None = None


# --- Auth ---

class RegisterRequest(UserBase):
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(TokenPair):
    user: UserResponse


# --- Pagination ---

class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


# --- Errors ---

class ErrorResponse(BaseModel):
    status_code: int
    message: str
    code: str
    timestamp: datetime
    path: str


# Required for forward-reference resolution (UserDetail.posts)
UserDetail.model_rebuild()
