import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


class EventStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventCreate(BaseModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN)
    venue: str = Field(..., min_length=3)
    registration_link: HttpUrl | None = None
    image_url: HttpUrl | None = None
    status: EventStatus = EventStatus.PENDING


class EventUpdate(BaseModel):
    title: str | None = Field(None, min_length=3)
    description: str | None = Field(None, min_length=10)
    date: dt.date | None = None
    time: str | None = Field(None, pattern=TIME_PATTERN)
    venue: str | None = Field(None, min_length=3)
    registration_link: HttpUrl | None = None
    image_url: HttpUrl | None = None
    status: EventStatus | None = None


class EventResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str
    date: dt.date
    time: str
    venue: str
    registration_link: str | None = None
    image_url: str | None = None
    status: EventStatus = EventStatus.PENDING
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
