from pydantic import BaseModel
from typing import Optional


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class ContactResponse(BaseModel):
    success: bool
    message: str
    note: Optional[str] = None
