"""Pydantic schemas for API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    """Schema for user info response."""
    id: int
    github_login: str
    github_user_id: int
    email_address: Optional[str]
    admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PrincipalResponse(BaseModel):
    """Schema for the authenticated caller."""
    user: UserResponse
    trust: str


class HealthResponse(BaseModel):
    """Schema for health check response."""
    status: str = "ok"
