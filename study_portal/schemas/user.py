from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import Field

from study_portal.models.enums import UserRole
from study_portal.schemas.common import CamelModel


class UserBrief(CamelModel):
    """Minimal user info embedded in other payloads"""
    id: UUID
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None


class PreferencesResponse(CamelModel):
    theme: str
    study_goal_minutes: int
    notifications: bool
    email_notifications: bool
    default_view: str
    auto_save: bool
    pomodoro_focus: int
    pomodoro_break: int
    pomodoro_long_break: int


class PreferencesUpdate(CamelModel):
    theme: Optional[str] = Field(None, pattern="^(light|dark|system)$")
    study_goal_minutes: Optional[int] = Field(None, ge=1, le=1440)
    notifications: Optional[bool] = None
    email_notifications: Optional[bool] = None
    default_view: Optional[str] = Field(None, pattern="^(grid|list)$")
    auto_save: Optional[bool] = None
    pomodoro_focus: Optional[int] = Field(None, ge=1, le=180)
    pomodoro_break: Optional[int] = Field(None, ge=1, le=60)
    pomodoro_long_break: Optional[int] = Field(None, ge=1, le=120)


class UserResponse(CamelModel):
    """User profile; never carries the password hash"""
    id: UUID
    email: str
    name: str
    role: UserRole
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    preferences: Optional[PreferencesResponse] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = None
    avatar: Optional[str] = Field(None, max_length=500)
