"""Pydantic schemas for registration, login and profile flows."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    email: str = ""


class LoginRequest(BaseModel):
    code: str = ""


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    code: str
    name: str = ""
    last_name: str = ""
    image_url: str = ""
    created_at: datetime
    updated_at: datetime


class RegisterResponse(BaseModel):
    message: str
    dev_code: Optional[str] = Field(default=None, description="Only present when email delivery is not configured")
    dev_note: Optional[str] = None


class UserEnvelope(BaseModel):
    message: str
    user: UserOut
