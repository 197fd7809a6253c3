import pytest

from app.core.errors import RecordAccessError
from app.modules.auth.deps import UserContext
from app.modules.shopping.utils.rbac import IsOwner, RequireOwner


def test_shopping_rbac_owner():
    user = UserContext(Id="user-1")
    assert IsOwner(user, "user-1")
    RequireOwner(user, "user-1")


def test_shopping_rbac_other_caller():
    user = UserContext(Id="user-2")
    assert not IsOwner(user, "user-1")
    with pytest.raises(RecordAccessError):
        RequireOwner(user, "user-1", "shopping list")


def test_shopping_rbac_missing_creator():
    assert not IsOwner(UserContext(Id="user-1"), None)
