from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import get_auth_service
from app.middleware.auth import get_bearer_token
from app.models.user import AuthSession, UserProfile
from app.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    display_name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


class RegisterResponse(BaseModel):
    profile: UserProfile


class MessageResponse(BaseModel):
    success: bool
    message: str


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create an account and its profile with default preferences"""
    profile = await service.sign_up(request.email, request.password, request.display_name)
    return {"profile": profile}


@router.post("/login", response_model=AuthSession)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.sign_in(request.email, request.password)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    await service.sign_out(token)
    return {"success": True, "message": "Signed out"}


@router.post("/password-reset", response_model=MessageResponse)
async def password_reset(
    request: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Send a password reset email"""
    await service.reset_password(request.email)
    return {"success": True, "message": "Password reset email sent"}
