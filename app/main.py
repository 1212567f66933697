import logging

from fastapi import FastAPI

from app.api.v1 import router as api_router
from app.core.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=settings.LOG_LEVEL.upper(),
)
log = logging.getLogger(__name__)

app = FastAPI(
    title="Incubator Program API",
    description="Applications, mentor requests and notifications for the incubator program.",
    version="0.1.0",
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Incubator Program API"}
