from supabase import Client
from app.config.content_config import MESSAGES, PROJECT_UPDATE_MAX_LENGTH
from app.core.dependencies import check_project_owner
from app.database.supabase_client import fetch_one
from app.modules.project_updates.schemas import ProjectUpdateCreate, ProjectUpdateResponse
from typing import List, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def validate_project_update(update_data: ProjectUpdateCreate) -> Tuple[str, str]:
    """Return (project_id, trimmed content) or raise 400"""
    content = (update_data.content or "").strip()
    if not update_data.project_id or not content:
        raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
    if len(content) > PROJECT_UPDATE_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=MESSAGES["update_too_long"])
    return update_data.project_id, content


class ProjectUpdateService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_update(self, project_id: str, content: str, user_data: dict) -> ProjectUpdateResponse:
        """Append an entry to a project's update log (project owner only)"""
        check_project_owner(project_id, user_data, self.supabase, MESSAGES["update_forbidden_add"])
        try:
            result = self.supabase.table("project_updates").insert({
                "project_id": project_id,
                "content": content
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail=MESSAGES["update_create_failed"])

            return ProjectUpdateResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error inserting project update: {e}")
            raise HTTPException(status_code=500, detail=f"{MESSAGES['update_create_failed']}: {e}")

    def list_updates(self, project_id: str) -> List[ProjectUpdateResponse]:
        """Update log for a project, newest first"""
        try:
            result = self.supabase.table("project_updates")\
                .select("*")\
                .eq("project_id", project_id)\
                .order("created_at", desc=True)\
                .execute()
            return [ProjectUpdateResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing project updates for {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["request_failed"])

    def delete_update(self, update_id: str, user_id: str) -> bool:
        """Delete an update log entry; only the parent project's owner may do so"""
        try:
            update = fetch_one(self.supabase, "project_updates", update_id, "project_id")
        except Exception as e:
            logger.error(f"Error fetching project update {update_id}: {e}")
            update = None

        if not update:
            raise HTTPException(status_code=404, detail=MESSAGES["update_not_found"])

        try:
            project = fetch_one(self.supabase, "projects", update["project_id"], "user_id")
        except Exception as e:
            logger.error(f"Error fetching project {update['project_id']}: {e}")
            project = None

        if not project or project.get("user_id") != user_id:
            raise HTTPException(status_code=403, detail=MESSAGES["forbidden_delete"])

        try:
            self.supabase.table("project_updates")\
                .delete()\
                .eq("id", update_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting project update: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["update_delete_failed"])
