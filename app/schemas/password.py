"""Schemas for the shared password."""
from typing import Optional

from pydantic import BaseModel


class PasswordVerifyRequest(BaseModel):
    password: Optional[str] = None


class PasswordVerifyResponse(BaseModel):
    valid: bool


class PasswordUpdateRequest(BaseModel):
    """Both fields are optional so a missing one comes back as a message, not a 422."""
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class PasswordUpdateResponse(BaseModel):
    success: bool
    message: str
