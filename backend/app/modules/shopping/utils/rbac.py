from app.core.errors import RecordAccessError
from app.modules.auth.deps import UserContext


def IsOwner(user: UserContext, created_by: str | None) -> bool:
    return bool(created_by) and user.Id == created_by


def RequireOwner(user: UserContext, created_by: str | None, label: str = "record") -> None:
    if not IsOwner(user, created_by):
        raise RecordAccessError(f"Not allowed to modify this {label}")
