from fastapi import APIRouter, Depends, HTTPException
from app.config.content_config import MESSAGES
from app.core.dependencies import get_optional_user, require_user, get_project_or_404
from app.database.supabase_client import get_supabase
from app.modules.comments.schemas import CommentCreate, CommentResponse
from app.modules.comments.service import CommentService, validate_comment
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(tags=["comments"])


def get_comment_service(supabase: Client = Depends(get_supabase)) -> CommentService:
    return CommentService(supabase)


@router.post("/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    comment_data: CommentCreate,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service)
):
    """Post a comment (at most 100 characters)"""
    project_id, content = validate_comment(comment_data)
    user_data = require_user(current_user)
    return service.create_comment(project_id, content, user_data["id"])


@router.delete("/comments", status_code=200)
async def delete_comment_by_query(
    id: Optional[str] = None,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service)
):
    """Delete a comment given as ?id= (author only)"""
    if not id:
        raise HTTPException(status_code=400, detail=MESSAGES["id_required"])
    user_data = require_user(current_user)
    service.delete_comment(id, user_data["id"])
    return {"success": True}


@router.delete("/comments/{comment_id}", status_code=200)
async def delete_comment(
    comment_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service)
):
    """Delete a comment (author only)"""
    user_data = require_user(current_user)
    service.delete_comment(comment_id, user_data["id"])
    return {"success": True}


@router.get("/projects/{project_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    project_id: str,
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    """Comments on a project, newest first"""
    get_project_or_404(project_id, supabase, "id")
    return service.list_comments(project_id)
