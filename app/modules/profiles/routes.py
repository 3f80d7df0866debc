from fastapi import APIRouter, Depends, File, UploadFile
from app.core.dependencies import get_current_user_id
from app.core.image_storage import read_image_upload
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, PublicProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile, creating it from auth metadata if it is missing"""
    service.ensure_profile(current_user)
    return service.get_profile(current_user["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Update display name / avatar URL"""
    service.ensure_profile(current_user)
    return service.update_profile(current_user["id"], profile_data)


@router.post("/me/avatar", response_model=ProfileResponse)
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Upload an avatar image (PNG, JPEG, GIF, WebP)"""
    content, extension, content_type = await read_image_upload(file)
    service.ensure_profile(current_user)
    return service.upload_avatar(current_user["id"], content, extension, content_type)


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_profile(
    user_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    """Public profile (no email)"""
    return service.get_profile(user_id)
