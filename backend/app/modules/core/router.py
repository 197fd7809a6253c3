import logging

from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError

from app.db import GetRecordStore

router = APIRouter(prefix="/api", tags=["health"])
logger = logging.getLogger("core.health")


@router.get("/health")
async def api_health() -> dict:
    logger.debug("health check ok")
    return {"status": "ok"}


@router.get("/health/db")
def api_health_db(request: Request) -> dict:
    try:
        GetRecordStore(request).Ping()
    except (RuntimeError, SQLAlchemyError):
        logger.exception("db check failed")
        return {"status": "error", "detail": "database unavailable"}
    logger.debug("db check ok")
    return {"status": "ok"}
