from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class CampusStatus(str, Enum):
    CAMPUS = "campus"
    OFF_CAMPUS = "off-campus"


class ApplicationAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class Domain(str, Enum):
    HEALTH_TECH = "HealthTech"
    ED_TECH = "EdTech"
    FIN_TECH = "FinTech"
    AGRI_TECH = "AgriTech"
    FOOD_TECH = "FoodTech"
    E_COMMERCE = "E-commerce"
    SAAS = "SaaS"
    IOT = "IoT"
    AI_ML = "AI/ML"
    CLEAN_TECH = "CleanTech"


class Sector(str, Enum):
    TECHNOLOGY = "Technology"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    FINANCIAL_SERVICES = "Financial Services"
    MANUFACTURING = "Manufacturing"
    RETAIL = "Retail"
    AGRICULTURE = "Agriculture"
    FOOD_AND_BEVERAGE = "Food & Beverage"
    REAL_ESTATE = "Real Estate"
    CONSULTING = "Consulting"


SUBMISSION_TABLES = {
    CampusStatus.CAMPUS: "contact_submissions",
    CampusStatus.OFF_CAMPUS: "off_campus_applications",
}


class SubmissionCreate(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = ""
    nature_of_inquiry: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    company_email: EmailStr
    founder_names: str = Field(..., min_length=1)
    founder_bio: str = Field(..., min_length=1)
    portfolio_url: str = ""
    team_info: str = ""
    startup_idea: str = Field(..., min_length=1)
    problem_solving: str = ""
    uniqueness: str = Field(..., min_length=1)
    domain: Domain
    sector: Sector
    campus_status: CampusStatus = CampusStatus.CAMPUS

    @field_validator("campus_status", mode="before")
    @classmethod
    def _default_to_campus(cls, value):
        # Anything other than an explicit off-campus marker is treated as campus.
        return (
            CampusStatus.OFF_CAMPUS
            if value == CampusStatus.OFF_CAMPUS.value
            else CampusStatus.CAMPUS
        )


class SubmissionCreatedResponse(BaseModel):
    message: str
    id: str


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    nature_of_inquiry: str | None = None
    company_name: str | None = None
    company_email: str | None = None
    founder_names: str | None = None
    founder_bio: str | None = None
    portfolio_url: str | None = None
    team_info: str | None = None
    startup_idea: str | None = None
    problem_solving: str | None = None
    uniqueness: str | None = None
    domain: str | None = None
    sector: str | None = None
    campus_status: CampusStatus | None = None
    status: SubmissionStatus
    submitted_at: datetime | None = None
    processed_by_admin_at: datetime | None = None
    temporary_user_id: str | None = None


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]
    total: int


class ApplicationDecision(BaseModel):
    action: ApplicationAction


class EmailPreview(BaseModel):
    to: str
    subject: str
    body: str


class ProcessApplicationResponse(BaseModel):
    status: str
    message: str
    email: EmailPreview | None = None
    temporary_user_id: str | None = None
    temporary_password: str | None = None
