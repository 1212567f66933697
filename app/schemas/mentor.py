from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class MentorCreate(BaseModel):
    name: str = Field(..., min_length=3)
    designation: str = Field(..., min_length=3)
    expertise: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    profile_picture_url: HttpUrl | None = None
    linkedin_url: HttpUrl | None = None
    email: EmailStr
    password: str = Field(..., min_length=6)


class MentorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    designation: str | None = None
    expertise: str | None = None
    description: str | None = None
    profile_picture_url: str | None = None
    linkedin_url: str | None = None
    email: str
    created_at: datetime | None = None


class MentorListResponse(BaseModel):
    mentors: list[MentorResponse]
    total: int
