from fastapi import APIRouter

from blogcore.config import settings
from blogcore.dependencies import CurrentUser, DbSession
from blogcore.schemas import AuthResponse, LoginRequest, RegisterRequest
from blogcore.services import auth_service

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(data: RegisterRequest, db: DbSession):
    return await auth_service.register(db, data)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: DbSession):
    return await auth_service.login(db, data.email, data.password)


@router.post("/refresh", response_model=AuthResponse)
async def refresh(current_user: CurrentUser, db: DbSession):
    """Issue a fresh credential pair for the bearer's identity (access or refresh token)."""
    return await auth_service.refresh(db, current_user.id)
