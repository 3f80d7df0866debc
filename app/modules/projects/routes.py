from fastapi import APIRouter, Depends, File, Query, UploadFile
from app.config.content_config import CATEGORIES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MESSAGES
from app.core.dependencies import get_current_user_id, get_optional_user, check_project_owner
from app.core.image_storage import read_image_upload
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectDetailResponse
)
from app.modules.projects.service import ProjectService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/projects", tags=["projects"])
users_router = APIRouter(prefix="/users", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """Publish a project ("種をまく")"""
    return service.create_project(project_data, current_user)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    service: ProjectService = Depends(get_project_service)
):
    """List projects newest first, filtered by category and/or keyword"""
    return service.list_projects(category=category, search=search, limit=limit, offset=offset)


@router.get("/home", response_model=List[ProjectResponse])
async def list_latest_projects(
    service: ProjectService = Depends(get_project_service)
):
    """Latest projects for the top page"""
    return service.list_latest()


@router.get("/categories", response_model=List[str])
async def list_used_categories(
    service: ProjectService = Depends(get_project_service)
):
    """Categories that at least one project uses"""
    return service.list_categories()


@router.get("/category-options", response_model=List[str])
async def list_category_options():
    """Categories a project can choose from"""
    return CATEGORIES


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ProjectService = Depends(get_project_service)
):
    """Project detail with like state, comments and update log"""
    return service.get_project_detail(project_id, current_user)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    """Edit a project (owner only)"""
    check_project_owner(project_id, current_user, supabase)
    return service.update_project(project_id, project_data)


@router.delete("/{project_id}", status_code=200)
async def delete_project(
    project_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete a project (owner only)"""
    check_project_owner(project_id, current_user, supabase, MESSAGES["forbidden_delete"])
    project = service.get_project(project_id)
    service.delete_project(project_id, project.image_url)
    return {"success": True}


@router.post("/{project_id}/image", response_model=ProjectResponse)
async def upload_project_image(
    project_id: str,
    file: UploadFile = File(...),
    current_user: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    """Upload a screenshot/thumbnail (owner only)"""
    check_project_owner(project_id, current_user, supabase)
    content, extension, content_type = await read_image_upload(file)
    return service.upload_project_image(project_id, content, extension, content_type)


@users_router.get("/{user_id}/projects", response_model=List[ProjectResponse])
async def list_user_projects(
    user_id: str,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    service: ProjectService = Depends(get_project_service)
):
    """Projects published by a user"""
    return service.list_projects(user_id=user_id, limit=limit, offset=offset)
