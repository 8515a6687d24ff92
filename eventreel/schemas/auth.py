"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=2, max_length=32)
    password: str = Field(min_length=6, max_length=32)


class LoginRequest(BaseModel):
    login: str = Field(min_length=2, max_length=32)
    password: str = Field(min_length=6, max_length=32)


class TokenResponse(BaseModel):
    token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=6, max_length=32)


class MessageResponse(BaseModel):
    message: str
