from supabase import Client
from app.config.content_config import MESSAGES
from app.core.image_storage import get_image_storage
from app.database.supabase_client import fetch_one
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from fastapi import HTTPException
import logging
import uuid

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            profile = fetch_one(self.supabase, "profiles", user_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not profile:
            raise HTTPException(status_code=404, detail=MESSAGES["profile_not_found"])
        return ProfileResponse(**profile)

    def upsert_profile(
        self,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> ProfileResponse:
        """Create or refresh the profile row for an auth user"""
        row: Dict[str, Any] = {"id": user_id, "email": email, "full_name": full_name}
        if avatar_url is not None:
            row["avatar_url"] = avatar_url
        try:
            result = self.supabase.table("profiles")\
                .upsert(row, on_conflict="id")\
                .execute()
        except Exception as e:
            logger.error(f"Profile upsert failed for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["profile_create_failed"])
        if not result.data:
            raise HTTPException(status_code=500, detail=MESSAGES["profile_create_failed"])
        return ProfileResponse(**result.data[0])

    def ensure_profile(self, user_data: dict) -> None:
        """Create the profile from auth metadata when it is missing"""
        try:
            existing = fetch_one(self.supabase, "profiles", user_data["id"], "id")
        except Exception as e:
            logger.error(f"Profile lookup failed for {user_data['id']}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["profile_create_failed"])
        if existing:
            return
        metadata = user_data.get("user_metadata") or {}
        try:
            self.supabase.table("profiles").insert({
                "id": user_data["id"],
                "email": user_data.get("email"),
                "full_name": metadata.get("full_name"),
                "avatar_url": metadata.get("avatar_url"),
            }).execute()
            logger.info("Created missing profile for %s", user_data["id"])
        except Exception as e:
            logger.error(f"Profile creation error: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["profile_create_failed"])

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the caller's own profile"""
        update_data = {}
        if profile_data.full_name is not None:
            full_name = profile_data.full_name.strip()
            if not full_name:
                raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
            update_data["full_name"] = full_name
        if profile_data.avatar_url is not None:
            update_data["avatar_url"] = profile_data.avatar_url.strip() or None

        if not update_data:
            return self.get_profile(user_id)

        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Profile update failed for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["profile_update_failed"])

        if not result.data:
            raise HTTPException(status_code=404, detail=MESSAGES["profile_not_found"])
        return ProfileResponse(**result.data[0])

    def upload_avatar(self, user_id: str, content: bytes, extension: str, content_type: str) -> ProfileResponse:
        """Store a new avatar image and point the profile at it"""
        current = self.get_profile(user_id)
        storage = get_image_storage(self.supabase)
        key = f"avatars/{user_id}/{uuid.uuid4().hex}{extension}"
        try:
            avatar_url = storage.upload_file(content, key, content_type)
        except Exception as e:
            logger.error(f"Avatar upload failed for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["image_upload_failed"])
        profile = self.update_profile(user_id, ProfileUpdate(avatar_url=avatar_url))
        if current.avatar_url:
            storage.delete_by_url(current.avatar_url)
        return profile
