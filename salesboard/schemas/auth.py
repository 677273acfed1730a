"""Authentication schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request body."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response."""

    success: bool
    message: str
    username: str = Field(default="")


class AdminResponse(BaseModel):
    """Currently logged-in admin."""

    id: int
    username: str
    last_active_at: Optional[datetime]

    model_config = {"from_attributes": True}
