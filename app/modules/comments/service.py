from supabase import Client
from app.config.content_config import COMMENT_MAX_LENGTH, MESSAGES, PROFILE_EMBED
from app.core.dependencies import get_project_or_404
from app.database.supabase_client import fetch_one
from app.modules.comments.schemas import CommentCreate, CommentResponse
from typing import List, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

COMMENT_COLUMNS = f"*, {PROFILE_EMBED}"


def validate_comment(comment_data: CommentCreate) -> Tuple[str, str]:
    """Return (project_id, trimmed content) or raise 400"""
    content = (comment_data.content or "").strip()
    if not comment_data.project_id or not content:
        raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
    if len(content) > COMMENT_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=MESSAGES["comment_too_long"])
    return comment_data.project_id, content


class CommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_comment(self, project_id: str, content: str, user_id: str) -> CommentResponse:
        """Add a comment to a project"""
        get_project_or_404(project_id, self.supabase, "id")
        try:
            result = self.supabase.table("comments").insert({
                "project_id": project_id,
                "user_id": user_id,
                "content": content
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail=MESSAGES["comment_create_failed"])

            comment = fetch_one(self.supabase, "comments", result.data[0]["id"], COMMENT_COLUMNS)
            return CommentResponse(**(comment or result.data[0]))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error inserting comment: {e}")
            raise HTTPException(status_code=500, detail=f"{MESSAGES['comment_create_failed']}: {e}")

    def list_comments(self, project_id: str) -> List[CommentResponse]:
        """Comments for a project, newest first"""
        try:
            result = self.supabase.table("comments")\
                .select(COMMENT_COLUMNS)\
                .eq("project_id", project_id)\
                .order("created_at", desc=True)\
                .execute()
            return [CommentResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing comments for {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["request_failed"])

    def delete_comment(self, comment_id: str, user_id: str) -> bool:
        """Delete a comment; only its author may do so"""
        try:
            comment = fetch_one(self.supabase, "comments", comment_id, "user_id")
        except Exception as e:
            logger.error(f"Error fetching comment {comment_id}: {e}")
            comment = None

        if not comment:
            raise HTTPException(status_code=404, detail=MESSAGES["comment_not_found"])

        if comment.get("user_id") != user_id:
            raise HTTPException(status_code=403, detail=MESSAGES["forbidden_delete"])

        try:
            self.supabase.table("comments")\
                .delete()\
                .eq("id", comment_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting comment: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["comment_delete_failed"])
