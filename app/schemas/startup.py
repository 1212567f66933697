from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StartupCreate(BaseModel):
    name: str = Field(..., min_length=1)
    logo_url: str = ""
    description: str = Field(..., min_length=1)
    badge_text: str | None = None
    website_url: str | None = None
    funnel_source: str = ""
    session: str = ""
    month_year_of_incubation: str = ""
    status: str = Field(..., min_length=1)
    legal_status: str = ""
    rknec_email_id: str = ""
    email_id: str = ""
    mobile_number: str = ""


class StartupUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    logo_url: str | None = None
    description: str | None = Field(None, min_length=1)
    badge_text: str | None = None
    website_url: str | None = None
    funnel_source: str | None = None
    session: str | None = None
    month_year_of_incubation: str | None = None
    status: str | None = Field(None, min_length=1)
    legal_status: str | None = None
    rknec_email_id: str | None = None
    email_id: str | None = None
    mobile_number: str | None = None


class StartupResponse(StartupCreate):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StartupListResponse(BaseModel):
    startups: list[StartupResponse]
    total: int


class ImportedStartup(StartupCreate):
    """Stricter shape every imported row must satisfy before it is stored."""

    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    badge_text: str = Field(..., min_length=2)
    rknec_email_id: EmailStr
    email_id: EmailStr
    mobile_number: str = Field(..., min_length=10, max_length=15)


class StartupImportRequest(BaseModel):
    rows: list[dict[str, str]] = Field(..., min_length=1)


class StartupImportError(BaseModel):
    row: dict[str, str]
    error: str


class StartupImportResponse(BaseModel):
    success: bool
    message: str
    imported_count: int
    errors: list[StartupImportError] = []
