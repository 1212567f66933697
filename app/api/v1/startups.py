import logging
from datetime import datetime, timezone
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from app.core.deps import AdminUser, Database
from app.core.errors import log_store_error
from app.schemas.startup import (
    ImportedStartup,
    StartupCreate,
    StartupImportError,
    StartupImportRequest,
    StartupImportResponse,
    StartupListResponse,
    StartupResponse,
    StartupUpdate,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/startups", tags=["startups"])


@router.get("", response_model=StartupListResponse)
async def get_startups(db: Database):
    """Incubated startups, newest first."""
    try:
        result = (
            db.table("startups").select("*").order("created_at", desc=True).execute()
        )
    except Exception as e:
        log_store_error(log, "Error fetching startups", "startups", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    startups = [StartupResponse(**row) for row in result.data or []]
    return StartupListResponse(startups=startups, total=len(startups))


@router.post("", response_model=StartupResponse, status_code=status.HTTP_201_CREATED)
async def create_startup(body: StartupCreate, admin: AdminUser, db: Database):
    now = datetime.now(timezone.utc).isoformat()
    data = body.model_dump()
    data.update({"created_at": now, "updated_at": now})

    try:
        result = db.table("startups").insert(data).execute()
    except Exception as e:
        log_store_error(log, "Error creating startup", "startups", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add startup.",
        )

    return StartupResponse(**result.data[0])


IMPORT_DEFAULTS = {
    "funnel_source": "Direct Application",
    "session": "2024-25",
    "month_year_of_incubation": "January 2024",
    "rknec_email_id": "contact@rknec.edu",
    "mobile_number": "9876543210",
}


def _startup_from_row(row: dict[str, str]) -> dict:
    """Map one row of the incubation sheet onto the startup fields."""
    name = row.get("Startup Name") or "Unknown Startup"
    category = row.get("Business Category & Industry") or "General"
    description = (
        f"Startup: {row.get('Startup Name')}. "
        f"Founded by: {row.get('Founder Details')}. "
        f"Incubation Stage: {row.get('Incubation Stage')}. "
        f"Legal Type: {row.get('Legal Registration Type')}. "
        f"Funding: {row.get('Funding Support')}. "
        f"Recognition: {row.get('Recognition')}. "
        f"Category: {row.get('Business Category & Industry')}. "
        f"Contact: {row.get('Contact Information')}."
    )
    return {
        **IMPORT_DEFAULTS,
        "name": name,
        "badge_text": category,
        "description": description,
        "logo_url": f"https://placehold.co/300x150/1A1A1A/FFFFFF.png?text={quote(name[:3])}",
        "website_url": "",
        "status": row.get("Incubation Stage") or "Active",
        "legal_status": row.get("Legal Registration Type") or "Not Registered",
        "email_id": row.get("Contact Information") or "contact@startup.com",
    }


@router.post("/import", response_model=StartupImportResponse)
async def import_startups(body: StartupImportRequest, admin: AdminUser, db: Database):
    """Bulk-create startups from sheet rows. Bad rows are reported, not fatal."""
    imported = 0
    errors: list[StartupImportError] = []

    for row in body.rows:
        try:
            startup = ImportedStartup(**_startup_from_row(row))
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            errors.append(StartupImportError(row=row, error=f"Validation failed: {reasons}"))
            continue

        now = datetime.now(timezone.utc).isoformat()
        data = startup.model_dump(mode="json")
        data.update({"created_at": now, "updated_at": now})
        try:
            db.table("startups").insert(data).execute()
        except Exception as e:
            log_store_error(log, "Error importing startup row", "startups", e)
            errors.append(StartupImportError(row=row, error=str(e)))
            continue
        imported += 1

    log.info("Startup import: %d imported, %d failed", imported, len(errors))
    if errors:
        return StartupImportResponse(
            success=False,
            message=f"Import completed with {imported} successful imports and {len(errors)} errors.",
            imported_count=imported,
            errors=errors,
        )
    return StartupImportResponse(
        success=True,
        message=f"Successfully imported {imported} startups.",
        imported_count=imported,
    )


@router.patch("/{startup_id}", response_model=StartupResponse)
async def update_startup(
    startup_id: UUID, body: StartupUpdate, admin: AdminUser, db: Database
):
    update_data = body.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update.",
        )
    update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = (
            db.table("startups")
            .update(update_data)
            .eq("id", str(startup_id))
            .execute()
        )
    except Exception as e:
        log_store_error(log, "Error updating startup", "startups", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update startup.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Startup not found."
        )

    return StartupResponse(**result.data[0])


@router.delete("/{startup_id}", status_code=status.HTTP_200_OK)
async def delete_startup(startup_id: UUID, admin: AdminUser, db: Database):
    try:
        result = db.table("startups").delete().eq("id", str(startup_id)).execute()
    except Exception as e:
        log_store_error(log, "Error deleting startup", "startups", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete startup.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Startup not found."
        )

    return {"message": "Startup deleted"}
