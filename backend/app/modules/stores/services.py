import logging

from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, RecordValidationError, WrapStoreErrors
from app.modules.auth.deps import NowUtc, UserContext
from app.modules.stores.models import Store

logger = logging.getLogger("stores")

_NULLABLE_FIELDS = ("Address", "Phone", "Website")


def _NormalizeName(value: str | None) -> str:
    return " ".join((value or "").strip().split())


def ListStores(db: Session, is_active: bool | None = None) -> list[Store]:
    with WrapStoreErrors(db, "fetch stores"):
        query = db.query(Store)
        if is_active is not None:
            query = query.filter(Store.IsActive == is_active)
        return query.order_by(Store.Name.asc(), Store.Id.asc()).all()


def GetStore(db: Session, store_id: int) -> Store:
    with WrapStoreErrors(db, "fetch store"):
        record = db.query(Store).filter(Store.Id == store_id).first()
    if not record:
        raise RecordNotFoundError("Store not found")
    return record


def CreateStore(db: Session, user: UserContext, payload: dict) -> Store:
    name = _NormalizeName(payload.get("Name"))
    if not name:
        raise RecordValidationError("Name is required")
    now = NowUtc()
    record = Store(
        Name=name,
        Address=payload.get("Address"),
        Phone=payload.get("Phone"),
        Website=payload.get("Website"),
        IsActive=True,
        CreatedAt=now,
        UpdatedAt=now,
        CreatedBy=user.Id,
        UpdatedBy=user.Id,
    )
    with WrapStoreErrors(db, "create store"):
        db.add(record)
        db.commit()
        db.refresh(record)
    logger.info("store %s created by %s", record.Id, user.Id)
    return record


def UpdateStore(db: Session, user: UserContext, store_id: int, payload: dict) -> Store:
    record = GetStore(db, store_id)
    if payload.get("Name") is not None:
        name = _NormalizeName(payload["Name"])
        if not name:
            raise RecordValidationError("Name is required")
        record.Name = name
    for field in _NULLABLE_FIELDS:
        if field in payload:
            setattr(record, field, payload[field])
    if payload.get("IsActive") is not None:
        record.IsActive = bool(payload["IsActive"])
    record.UpdatedBy = user.Id
    record.UpdatedAt = NowUtc()
    with WrapStoreErrors(db, "update store"):
        db.add(record)
        db.commit()
        db.refresh(record)
    return record
