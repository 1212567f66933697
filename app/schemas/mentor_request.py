from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserProfileDetails


class MentorRequestStatus(str, Enum):
    PENDING = "pending"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    MENTOR_APPROVED = "mentor_approved"
    MENTOR_REJECTED = "mentor_rejected"


class DecisionAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class Actor(str, Enum):
    ADMIN = "admin"
    MENTOR = "mentor"


class ActionOutcome(str, Enum):
    OK = "OK"
    INVALID = "INVALID"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    ERROR = "ERROR"


class ActionResult(BaseModel):
    success: bool
    message: str
    request_id: str | None = None
    outcome: ActionOutcome = Field(ActionOutcome.OK, exclude=True)

    @classmethod
    def ok(cls, message: str, request_id: str | None = None) -> "ActionResult":
        return cls(success=True, message=message, request_id=request_id)

    @classmethod
    def fail(cls, outcome: ActionOutcome, message: str) -> "ActionResult":
        return cls(success=False, message=message, outcome=outcome)


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------


class MentorRequestCreate(BaseModel):
    mentor_id: str = Field(..., min_length=1)
    request_message: str = Field(..., min_length=10, max_length=2000)


class MentorDecision(BaseModel):
    action: DecisionAction
    notes: str | None = Field(None, max_length=2000)


class TokenDecision(MentorDecision):
    token: str = Field(..., min_length=1)


class MentorRequestResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    user_email: str = ""
    user_name: str = "Unknown User"
    mentor_id: str = ""
    mentor_email: str = ""
    mentor_name: str = "Unknown Mentor"
    status: MentorRequestStatus = MentorRequestStatus.PENDING
    request_message: str = ""
    admin_notes: str | None = None
    mentor_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    admin_processed_at: datetime | None = None
    mentor_processed_at: datetime | None = None
    admin_processed_by: UUID | None = None


class MentorRequestListResponse(BaseModel):
    requests: list[MentorRequestResponse]
    total: int


class MentorRequestDetailResponse(BaseModel):
    request: MentorRequestResponse
    user_details: UserProfileDetails


class TokenRequestResponse(BaseModel):
    request: MentorRequestResponse
    action: DecisionAction | None = None
