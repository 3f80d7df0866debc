from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProjectUpdateCreate(BaseModel):
    project_id: Optional[str] = None
    content: Optional[str] = None


class ProjectUpdateResponse(BaseModel):
    id: str
    project_id: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True
