import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import AdminUser, Database
from app.core.errors import log_store_error
from app.schemas.event import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventStatus,
    EventUpdate,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
async def get_events(
    db: Database,
    status_filter: EventStatus | None = Query(None, alias="status"),
):
    """Program events, latest date first."""
    try:
        query = db.table("events").select("*")
        if status_filter:
            query = query.eq("status", status_filter.value)

        result = query.order("date", desc=True).execute()
    except Exception as e:
        log_store_error(log, "Error fetching events", "events", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    events = [EventResponse(**row) for row in result.data or []]
    return EventListResponse(events=events, total=len(events))


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(body: EventCreate, admin: AdminUser, db: Database):
    now = datetime.now(timezone.utc).isoformat()
    data = body.model_dump(mode="json")
    data.update({"created_at": now, "updated_at": now})

    try:
        result = db.table("events").insert(data).execute()
    except Exception as e:
        log_store_error(log, "Error creating event", "events", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create event.",
        )

    log.info("Event %s created", result.data[0]["id"])
    return EventResponse(**result.data[0])


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID, body: EventUpdate, admin: AdminUser, db: Database
):
    """Edit an event; also used to approve or reject it."""
    update_data = body.model_dump(mode="json", exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update.",
        )
    update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = (
            db.table("events").update(update_data).eq("id", str(event_id)).execute()
        )
    except Exception as e:
        log_store_error(log, "Error updating event", "events", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update event.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found."
        )

    return EventResponse(**result.data[0])


@router.delete("/{event_id}", status_code=status.HTTP_200_OK)
async def delete_event(event_id: UUID, admin: AdminUser, db: Database):
    try:
        result = db.table("events").delete().eq("id", str(event_id)).execute()
    except Exception as e:
        log_store_error(log, "Error deleting event", "events", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete event.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found."
        )

    return {"message": "Event deleted"}
