from fastapi import APIRouter, Depends, Request
from app.config import settings
from app.core.dependencies import get_current_user_id, get_current_token
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase, get_auth_client
from app.modules.auth.schemas import (
    LoginRequest, SignupRequest, TokenResponse, SignupResponse, ConfirmRequest, ConfirmResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_flow_service(
    supabase: Client = Depends(get_supabase),
    auth_client: Client = Depends(get_auth_client)
) -> AuthService:
    return AuthService(supabase, auth_client)


@router.post("/signup", response_model=SignupResponse, status_code=201)
@limiter.limit(lambda: settings.auth_rate_limit)
async def signup(
    request: Request,
    signup_data: SignupRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Register a new user; a confirmation mail is sent by Supabase"""
    return service.signup(signup_data)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(lambda: settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/confirm", response_model=ConfirmResponse)
async def confirm_email(
    confirm_data: ConfirmRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Confirm an email address with the token_hash from the mailed link"""
    return service.confirm_email(confirm_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_flow_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"success": True, "message": "ログアウトしました"}


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Get current authenticated user and their profile"""
    profile_service = ProfileService(supabase)
    profile_service.ensure_profile(current_user)
    profile = profile_service.get_profile(current_user["id"])
    return {**current_user, "profile": profile.model_dump(mode="json")}
