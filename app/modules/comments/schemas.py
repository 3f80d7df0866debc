from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.modules.profiles.schemas import ProfileSummary


class CommentCreate(BaseModel):
    project_id: Optional[str] = None
    content: Optional[str] = None


class CommentResponse(BaseModel):
    id: str
    project_id: str
    user_id: str
    content: str
    created_at: datetime
    profiles: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True
