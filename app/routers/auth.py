from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastapi_limiter.depends import RateLimiter

from app.config import settings
from app.core.security import create_access_token
from app.dependencies.auth import get_current_user
from app.dependencies.database import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserResponse
from app.services import user_service

router = APIRouter()

# Brute-force guard on the credential endpoints
rate_limit = [Depends(RateLimiter(times=10, seconds=60))] if settings.RATE_LIMIT_ENABLED else []

@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse, dependencies=rate_limit)
async def signup(payload: SignupRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.register_user(db, payload)
    return {"success": True, "token": create_access_token(user.id), "user": user}

@router.post("/login", response_model=AuthResponse, dependencies=rate_limit)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, payload.email, payload.password)
    return {"success": True, "token": create_access_token(user.id), "user": user}

@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": current_user}
