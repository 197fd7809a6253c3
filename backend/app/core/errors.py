from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


class RecordNotFoundError(ValueError):
    pass


class RecordValidationError(ValueError):
    pass


class RecordAccessError(ValueError):
    pass


class AuthenticationError(ValueError):
    pass


class StoreFailureError(RuntimeError):
    """The database reported something other than "no rows"."""


@contextmanager
def WrapStoreErrors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailureError(f"Failed to {action}: {exc.__class__.__name__}") from exc
