from fastapi import APIRouter

from app.api.v1 import (
    events,
    maintenance,
    mentor_portal,
    mentor_requests,
    mentors,
    notifications,
    startups,
    submissions,
    users,
)

router = APIRouter(prefix="/api/v1")

router.include_router(submissions.router)
router.include_router(mentors.router)
router.include_router(mentor_requests.router)
router.include_router(mentor_portal.router)
router.include_router(notifications.router)
router.include_router(startups.router)
router.include_router(events.router)
router.include_router(users.router)
router.include_router(maintenance.router)
