from supabase import Client
from app.config.content_config import MESSAGES
from app.core.dependencies import get_project_or_404
from app.modules.likes.schemas import LikeStatusResponse
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _is_unique_violation(error: Exception) -> bool:
    text = str(error).lower()
    return "23505" in text or "duplicate key" in text


class LikeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def is_liked(self, project_id: str, user_id: str) -> bool:
        result = self.supabase.table("likes")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("project_id", project_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def get_status(self, project_id: str, user_id: Optional[str] = None) -> LikeStatusResponse:
        """Like state of a project for the caller (liked is False when anonymous)"""
        project = get_project_or_404(project_id, self.supabase, "id, likes_count")
        try:
            liked = self.is_liked(project_id, user_id) if user_id else False
        except Exception as e:
            logger.error(f"Error reading like state for {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["request_failed"])
        return LikeStatusResponse(
            project_id=project_id,
            liked=liked,
            likes_count=project.get("likes_count") or 0
        )

    def like(self, project_id: str, user_id: str) -> LikeStatusResponse:
        """Add the (user, project) like row if absent, then resync the counter"""
        get_project_or_404(project_id, self.supabase, "id")
        try:
            if not self.is_liked(project_id, user_id):
                try:
                    self.supabase.table("likes")\
                        .insert({"user_id": user_id, "project_id": project_id})\
                        .execute()
                except Exception as e:
                    # a concurrent request inserted the same pair first
                    if not _is_unique_violation(e):
                        raise
            count = self.refresh_likes_count(project_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to update like on {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["like_failed"])
        return LikeStatusResponse(project_id=project_id, liked=True, likes_count=count)

    def unlike(self, project_id: str, user_id: str) -> LikeStatusResponse:
        """Remove the (user, project) like row if present, then resync the counter"""
        get_project_or_404(project_id, self.supabase, "id")
        try:
            self.supabase.table("likes")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("project_id", project_id)\
                .execute()
            count = self.refresh_likes_count(project_id)
        except Exception as e:
            logger.error(f"Failed to update like on {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["like_failed"])
        return LikeStatusResponse(project_id=project_id, liked=False, likes_count=count)

    def refresh_likes_count(self, project_id: str) -> int:
        """Set projects.likes_count to the number of like rows and return it"""
        result = self.supabase.table("likes")\
            .select("id", count="exact")\
            .eq("project_id", project_id)\
            .execute()
        count = result.count if result.count is not None else len(result.data or [])
        self.supabase.table("projects")\
            .update({"likes_count": count})\
            .eq("id", project_id)\
            .execute()
        return count
