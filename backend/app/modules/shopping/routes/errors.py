import logging

from fastapi import HTTPException, status

from app.core.errors import RecordAccessError, RecordNotFoundError, StoreFailureError

logger = logging.getLogger("shopping")


def HandleDbError(exc: StoreFailureError) -> None:
    logger.exception("shopping database error")
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def HandleShoppingError(exc: ValueError) -> None:
    detail = str(exc)
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail) from exc
    if isinstance(exc, RecordAccessError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc
