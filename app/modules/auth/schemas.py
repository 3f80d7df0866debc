from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    agreed_to_terms: bool = False


class SignupResponse(BaseModel):
    user_id: str
    email: str
    confirmation_required: bool
    message: str


class ConfirmRequest(BaseModel):
    token_hash: Optional[str] = None
    type: str = "email"


class ConfirmResponse(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None
    confirmed: bool = True
    message: str


class AuthErrorMessage(BaseModel):
    title: str
    message: str
    suggestion: str
