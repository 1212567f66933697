from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.mentor_request import DecisionAction


class EmailToken(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    request_id: str
    mentor_email: str
    action: DecisionAction | None = None
    created_at: datetime
    expires_at: datetime
    used: bool = False


class TokenVerification(BaseModel):
    valid: bool
    token: EmailToken | None = None
    error: str | None = None


class CleanupResponse(BaseModel):
    message: str
    count: int
