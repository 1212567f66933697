from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class AppRole(str, Enum):
    USER = "USER"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"


class OnboardingStep(str, Enum):
    PASSWORD_CHANGED = "password_changed"
    PROFILE_COMPLETED = "profile_completed"
    NOTIFICATIONS_CONFIGURED = "notifications_configured"
    COMPLETED = "completed"


class UserProfileDetails(BaseModel):
    """Student details shown to a mentor reviewing a request."""

    name: str
    email: str
    phone: str | None = None
    college: str | None = None
    course: str | None = None
    year_of_study: str | None = None
    skills: list[str] | None = None
    bio: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: UUID
    email: str
    name: str
    role: AppRole
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    college: str | None = None
    course: str | None = None
    year_of_study: str | None = None
    skills: list[str] | None = None
    bio: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    notification_preferences: dict | None = None
    onboarding_progress: dict | None = None
    onboarding_completed: bool = False
    created_at: datetime | None = None


class UserProfileUpdate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str | None = None
    bio: str | None = None
    linkedin_url: HttpUrl | None = None
    portfolio_url: HttpUrl | None = None
    college: str | None = None
    course: str | None = None
    year_of_study: str | None = None
    skills: list[str] | None = None


class NotificationPreferencesUpdate(BaseModel):
    email_notifications: bool


class UserActionResponse(BaseModel):
    success: bool
    message: str
