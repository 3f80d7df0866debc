"""
Core dependencies for route protection and ownership checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config.content_config import MESSAGES
from app.database.supabase_client import get_supabase, fetch_one
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our own 401 message instead of FastAPI's default
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MESSAGES["unauthenticated"]
        )
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Current user when a valid token is sent, otherwise None (public pages)"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def require_user(user_data: Optional[dict]) -> dict:
    """401 unless a user was resolved; lets handlers validate the body before checking auth"""
    if not user_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MESSAGES["unauthenticated"]
        )
    return user_data


def get_project_or_404(project_id: str, supabase: Client, columns: str = "id, user_id") -> Dict[str, Any]:
    """Fetch a project row or raise 404"""
    try:
        project = fetch_one(supabase, "projects", project_id, columns)
    except Exception as e:
        logger.error(f"Failed to fetch project {project_id}: {e}")
        project = None
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MESSAGES["project_not_found"]
        )
    return project


def check_project_owner(
    project_id: str,
    user_data: dict,
    supabase: Client,
    forbidden_detail: str = MESSAGES["forbidden_edit"]
) -> Dict[str, Any]:
    """Allow only the project's owner; returns the project row"""
    project = get_project_or_404(project_id, supabase)
    if project.get("user_id") != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=forbidden_detail
        )
    return project
