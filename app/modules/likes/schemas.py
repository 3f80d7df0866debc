from pydantic import BaseModel


class LikeStatusResponse(BaseModel):
    project_id: str
    liked: bool
    likes_count: int
