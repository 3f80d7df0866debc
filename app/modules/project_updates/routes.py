from fastapi import APIRouter, Depends, HTTPException
from app.config.content_config import MESSAGES
from app.core.dependencies import get_optional_user, require_user, get_project_or_404
from app.database.supabase_client import get_supabase
from app.modules.project_updates.schemas import ProjectUpdateCreate, ProjectUpdateResponse
from app.modules.project_updates.service import ProjectUpdateService, validate_project_update
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(tags=["project-updates"])


def get_project_update_service(supabase: Client = Depends(get_supabase)) -> ProjectUpdateService:
    return ProjectUpdateService(supabase)


@router.post("/project-updates", response_model=ProjectUpdateResponse, status_code=201)
async def create_project_update(
    update_data: ProjectUpdateCreate,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ProjectUpdateService = Depends(get_project_update_service)
):
    """Add an update log entry (at most 50 characters, project owner only)"""
    project_id, content = validate_project_update(update_data)
    user_data = require_user(current_user)
    return service.create_update(project_id, content, user_data)


@router.delete("/project-updates", status_code=200)
async def delete_project_update_by_query(
    id: Optional[str] = None,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ProjectUpdateService = Depends(get_project_update_service)
):
    """Delete an update log entry given as ?id= (project owner only)"""
    if not id:
        raise HTTPException(status_code=400, detail=MESSAGES["id_required"])
    user_data = require_user(current_user)
    service.delete_update(id, user_data["id"])
    return {"success": True}


@router.delete("/project-updates/{update_id}", status_code=200)
async def delete_project_update(
    update_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ProjectUpdateService = Depends(get_project_update_service)
):
    """Delete an update log entry (project owner only)"""
    user_data = require_user(current_user)
    service.delete_update(update_id, user_data["id"])
    return {"success": True}


@router.get("/projects/{project_id}/updates", response_model=List[ProjectUpdateResponse])
async def list_project_updates(
    project_id: str,
    service: ProjectUpdateService = Depends(get_project_update_service),
    supabase: Client = Depends(get_supabase)
):
    """Update log of a project, newest first"""
    get_project_or_404(project_id, supabase, "id")
    return service.list_updates(project_id)
