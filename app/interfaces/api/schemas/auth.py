"""Authentication related schemas."""

from pydantic import BaseModel

from .user import UserRead


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegisterResponse(Token):
    user: UserRead


class MessageResponse(BaseModel):
    message: str
