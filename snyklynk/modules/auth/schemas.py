from pydantic import BaseModel, EmailStr
from typing import Optional


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class SignInResponse(TokenResponse):
    redirect_to: str  # /profile/escort, /profile/taxi or /prereg


class ResendConfirmationRequest(BaseModel):
    email: EmailStr


class MessageResponse(BaseModel):
    message: str
