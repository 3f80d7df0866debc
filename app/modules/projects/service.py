from supabase import Client
from app.config.content_config import (
    CATEGORIES, HOME_PROJECT_LIMIT, MESSAGES, PROFILE_EMBED,
    PROJECT_TAG_MAX_COUNT, PROJECT_TITLE_MAX_LENGTH,
)
from app.core.image_storage import get_image_storage
from app.database.supabase_client import fetch_one
from app.modules.comments.service import CommentService
from app.modules.likes.service import LikeService
from app.modules.profiles.service import ProfileService
from app.modules.project_updates.service import ProjectUpdateService
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectDetailResponse
)
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union
from fastapi import HTTPException
import logging
import re
import uuid

logger = logging.getLogger(__name__)

PROJECT_COLUMNS = f"*, {PROFILE_EMBED}"

# Characters with meaning inside a PostgREST or=(...) filter
_SEARCH_RESERVED = re.compile(r"[,()%*\\\"]")


def _is_http_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


def normalize_tags(tags: Optional[Union[List[str], str]]) -> List[str]:
    """Accept a list or a comma separated string; trim, drop empties, keep first occurrence"""
    if tags is None:
        return []
    raw = tags.split(",") if isinstance(tags, str) else tags
    cleaned = _dedupe(tag.strip() for tag in raw if tag and tag.strip())
    if len(cleaned) > PROJECT_TAG_MAX_COUNT:
        raise HTTPException(status_code=400, detail=MESSAGES["project_too_many_tags"])
    return cleaned


def normalize_categories(categories: Optional[List[str]], category: Optional[str] = None) -> List[str]:
    values = list(categories or [])
    if category:
        values.append(category)
    cleaned = _dedupe(c.strip() for c in values if c and c.strip())
    if any(c not in CATEGORIES for c in cleaned):
        raise HTTPException(status_code=400, detail=MESSAGES["project_invalid_category"])
    return cleaned


def sanitize_search(term: Optional[str]) -> str:
    return _SEARCH_RESERVED.sub(" ", term or "").strip()


def _validate_title(title: str) -> str:
    if len(title) > PROJECT_TITLE_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=MESSAGES["project_title_too_long"])
    return title


def _validate_url(url: str) -> str:
    if not _is_http_url(url):
        raise HTTPException(status_code=400, detail=MESSAGES["project_invalid_url"])
    return url


def _validate_image_url(image_url: Optional[str]) -> Optional[str]:
    image_url = (image_url or "").strip()
    if not image_url:
        return None
    if not _is_http_url(image_url):
        raise HTTPException(status_code=400, detail=MESSAGES["project_invalid_image_url"])
    return image_url


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_project(self, project_data: ProjectCreate, user_data: dict) -> ProjectResponse:
        """Publish a new project owned by the caller"""
        title = (project_data.title or "").strip()
        description = (project_data.description or "").strip()
        url = (project_data.url or "").strip()
        if not title or not description or not url:
            raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])

        row = {
            "user_id": user_data["id"],
            "title": _validate_title(title),
            "description": description,
            "url": _validate_url(url),
            "image_url": _validate_image_url(project_data.image_url),
            "categories": normalize_categories(project_data.categories, project_data.category),
            "tags": normalize_tags(project_data.tags),
            "likes_count": 0,
        }

        # Comments and projects reference profiles, so the owner row must exist first
        ProfileService(self.supabase).ensure_profile(user_data)

        try:
            result = self.supabase.table("projects").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=MESSAGES["project_create_failed"])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error inserting project: {e}")
            raise HTTPException(status_code=500, detail=f"{MESSAGES['project_create_failed']}: {e}")

        project_id = result.data[0]["id"]
        logger.info("Project %s published by %s", project_id, user_data["id"])
        return self.get_project(project_id)

    def get_project(self, project_id: str) -> ProjectResponse:
        """Get project by ID with the owner profile"""
        try:
            project = fetch_one(self.supabase, "projects", project_id, PROJECT_COLUMNS)
        except Exception as e:
            # e.g. 22P02 for an id that is not a uuid
            logger.error(f"Error fetching project {project_id}: {e}")
            project = None
        if not project:
            raise HTTPException(status_code=404, detail=MESSAGES["project_not_found"])
        return ProjectResponse(**project)

    def get_project_detail(self, project_id: str, user_data: Optional[dict] = None) -> ProjectDetailResponse:
        """Project page: project, like state for the caller, comments and update log"""
        project = self.get_project(project_id)
        is_liked = False
        if user_data:
            try:
                is_liked = LikeService(self.supabase).is_liked(project_id, user_data["id"])
            except Exception as e:
                logger.warning(f"Could not read like state for {project_id}: {e}")
        return ProjectDetailResponse(
            **project.model_dump(),
            is_liked=is_liked,
            is_owner=bool(user_data) and user_data["id"] == project.user_id,
            comments=CommentService(self.supabase).list_comments(project_id),
            updates=ProjectUpdateService(self.supabase).list_updates(project_id),
        )

    def list_projects(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[ProjectResponse]:
        """List projects newest first, optionally filtered by category, keyword or owner"""
        try:
            query = self.supabase.table("projects").select(PROJECT_COLUMNS)
            if category:
                query = query.contains("categories", [category])
            term = sanitize_search(search)
            if term:
                query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")
            if user_id:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing projects: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["request_failed"])

    def list_latest(self) -> List[ProjectResponse]:
        """Home feed"""
        return self.list_projects(limit=HOME_PROJECT_LIMIT)

    def list_categories(self) -> List[str]:
        """Distinct categories in use, sorted"""
        try:
            result = self.supabase.table("projects").select("categories").execute()
        except Exception as e:
            logger.error(f"Error listing categories: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["request_failed"])
        used = {c for row in result.data or [] for c in (row.get("categories") or []) if c}
        return sorted(used)

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        """Partial update; fields left out are unchanged"""
        update_data: Dict[str, Any] = {}
        if project_data.title is not None:
            title = project_data.title.strip()
            if not title:
                raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
            update_data["title"] = _validate_title(title)
        if project_data.description is not None:
            description = project_data.description.strip()
            if not description:
                raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
            update_data["description"] = description
        if project_data.url is not None:
            url = project_data.url.strip()
            if not url:
                raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
            update_data["url"] = _validate_url(url)
        previous_image_url = None
        if project_data.image_url is not None:
            update_data["image_url"] = _validate_image_url(project_data.image_url)
            previous_image_url = self.get_project(project_id).image_url
        if project_data.categories is not None:
            update_data["categories"] = normalize_categories(project_data.categories)
        if project_data.tags is not None:
            update_data["tags"] = normalize_tags(project_data.tags)

        if not update_data:
            return self.get_project(project_id)

        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("projects")\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["project_update_failed"])

        if not result.data:
            raise HTTPException(status_code=404, detail=MESSAGES["project_not_found"])
        if previous_image_url and previous_image_url != update_data["image_url"]:
            get_image_storage(self.supabase).delete_by_url(previous_image_url)
        return self.get_project(project_id)

    def delete_project(self, project_id: str, image_url: Optional[str] = None) -> bool:
        """Delete project, its child rows and its stored image"""
        try:
            result = self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["project_delete_failed"])

        # Child rows cascade in the database; this clears any left behind
        for child_table in ("likes", "comments", "project_updates"):
            try:
                self.supabase.table(child_table)\
                    .delete()\
                    .eq("project_id", project_id)\
                    .execute()
            except Exception as e:
                logger.warning(f"Could not clean up {child_table} for deleted project {project_id}: {e}")

        if image_url:
            get_image_storage(self.supabase).delete_by_url(image_url)
        logger.info("Project %s deleted", project_id)
        return len(result.data or []) > 0

    def upload_project_image(self, project_id: str, content: bytes, extension: str, content_type: str) -> ProjectResponse:
        """Store a screenshot in object storage and set it as the project image"""
        self.get_project(project_id)
        storage = get_image_storage(self.supabase)
        key = f"projects/{project_id}/{uuid.uuid4().hex}{extension}"
        try:
            image_url = storage.upload_file(content, key, content_type)
        except Exception as e:
            logger.error(f"Image upload failed for project {project_id}: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["image_upload_failed"])

        # update_project removes the image being replaced
        return self.update_project(project_id, ProjectUpdate(image_url=image_url))
