import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from app.db import Base, RecordStore
from app.modules.auth.deps import UserContext
from app.modules.auth.service import CreateAccessToken
from app.modules.inventory import models as inventory_models  # noqa: F401
from app.modules.inventory.services import CreateInventoryItem
from app.modules.prices import models as prices_models  # noqa: F401
from app.modules.shopping import models as shopping_models  # noqa: F401
from app.modules.stores import models as stores_models  # noqa: F401
from app.modules.stores.services import CreateStore

TEST_SECRET = "pantry-test-secret"


@pytest.fixture
def record_store(tmp_path):
    store = RecordStore(url=f"sqlite:///{tmp_path / 'pantry.db'}").Open()
    Base.metadata.create_all(store.Engine)
    yield store
    store.Close()


@pytest.fixture
def db(record_store):
    session = record_store.OpenSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user():
    return UserContext(Id="user-alice", Email="alice@example.com")


@pytest.fixture
def other_user():
    return UserContext(Id="user-bob")


@pytest.fixture
def make_item(db, user):
    def _make(name="Milk", **fields):
        return CreateInventoryItem(db, user, {"Name": name, **fields})

    return _make


@pytest.fixture
def make_store(db, user):
    def _make(name="Corner Shop", **fields):
        return CreateStore(db, user, {"Name": name, **fields})

    return _make


@pytest.fixture
def jwt_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)
    monkeypatch.delenv("JWT_ACCESS_TTL_MINUTES", raising=False)


@pytest.fixture
def auth_headers(jwt_env):
    def _headers(user_id="user-alice", email=None):
        token, _ttl = CreateAccessToken(user_id, email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(record_store, jwt_env):
    from app.main import app

    app.state.record_store = record_store
    with TestClient(app) as test_client:
        yield test_client
    app.state.record_store = None


@pytest.fixture
def fail_count_queries(record_store):
    """Make every aggregate COUNT query on the store fail at the driver."""

    def _fail(_conn, _cursor, statement, parameters, _context, _executemany):
        if "count(" in statement.lower():
            raise OperationalError(statement, parameters, Exception("disk I/O error"))

    event.listen(record_store.Engine, "before_cursor_execute", _fail)
    yield
    event.remove(record_store.Engine, "before_cursor_execute", _fail)
