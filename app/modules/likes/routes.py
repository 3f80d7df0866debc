from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_optional_user
from app.database.supabase_client import get_supabase
from app.modules.likes.schemas import LikeStatusResponse
from app.modules.likes.service import LikeService
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/projects", tags=["likes"])


def get_like_service(supabase: Client = Depends(get_supabase)) -> LikeService:
    return LikeService(supabase)


@router.get("/{project_id}/like", response_model=LikeStatusResponse)
async def get_like_status(
    project_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: LikeService = Depends(get_like_service)
):
    """Whether the caller likes the project, plus its like count"""
    return service.get_status(project_id, current_user["id"] if current_user else None)


@router.post("/{project_id}/like", response_model=LikeStatusResponse)
async def like_project(
    project_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service)
):
    """Like a project (idempotent)"""
    return service.like(project_id, current_user["id"])


@router.delete("/{project_id}/like", response_model=LikeStatusResponse)
async def unlike_project(
    project_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service)
):
    """Remove a like (idempotent)"""
    return service.unlike(project_id, current_user["id"])
