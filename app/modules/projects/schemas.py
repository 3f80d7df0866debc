from pydantic import BaseModel, field_validator
from typing import Optional, List, Union
from datetime import datetime
from app.modules.profiles.schemas import ProfileSummary
from app.modules.comments.schemas import CommentResponse
from app.modules.project_updates.schemas import ProjectUpdateResponse


class ProjectCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None  # single-select form field, merged into categories
    categories: Optional[List[str]] = None
    tags: Optional[Union[List[str], str]] = None  # list or "React, TypeScript"


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[Union[List[str], str]] = None


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    categories: List[str] = []
    tags: List[str] = []
    likes_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    profiles: Optional[ProfileSummary] = None

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return value or []

    @field_validator("likes_count", mode="before")
    @classmethod
    def _null_to_zero(cls, value):
        return value or 0

    class Config:
        from_attributes = True


class ProjectDetailResponse(ProjectResponse):
    is_liked: bool = False
    is_owner: bool = False
    comments: List[CommentResponse] = []
    updates: List[ProjectUpdateResponse] = []
