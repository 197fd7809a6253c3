import logging
import os
from collections.abc import Iterator
from urllib.parse import quote_plus

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()
logger = logging.getLogger("app.db")


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _build_connection_url(login_env: str, password_env: str, database_override: str | None = None) -> str:
    driver = os.getenv("SQLSERVER_DRIVER", "")
    host = os.getenv("SQLSERVER_HOST", "")
    port = os.getenv("SQLSERVER_PORT", "")
    database = database_override or os.getenv("SQLSERVER_DB", "")
    user = os.getenv(login_env, "")
    password = os.getenv(password_env, "")

    missing = [key for key, value in {
        "SQLSERVER_HOST": host,
        "SQLSERVER_PORT": port,
        "SQLSERVER_DB": database,
        "SQLSERVER_DRIVER": driver,
        login_env: user,
        password_env: password,
    }.items() if not value]
    if missing:
        raise RuntimeError(f"Missing database configuration: {', '.join(missing)}")

    driver_encoded = quote_plus(driver)
    password_encoded = quote_plus(password)
    return (
        f"mssql+pyodbc://{user}:{password_encoded}@{host}:{port}/{database}"
        f"?driver={driver_encoded}&Encrypt=yes&TrustServerCertificate=yes"
    )


def BuildUserConnectionUrl() -> str:
    override = os.getenv("DATABASE_URL", "").strip()
    if override:
        return override
    return _build_connection_url("SQLSERVER_USER_LOGIN", "SQLSERVER_USER_PASSWORD")


def BuildAdminConnectionUrl(database_override: str | None = None) -> str:
    override = os.getenv("DATABASE_URL", "").strip()
    if override and database_override is None:
        return override
    return _build_connection_url("SQLSERVER_ADMIN_LOGIN", "SQLSERVER_ADMIN_PASSWORD", database_override)


SQLITE_SCHEMAS = ("inventory", "shopping")


def _attach_sqlite_schemas(engine: Engine) -> None:
    database = engine.url.database or ""
    in_memory = not database or database == ":memory:"
    stem = os.path.splitext(database)[0]

    @event.listens_for(engine, "connect")
    def _attach(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        for schema in SQLITE_SCHEMAS:
            target = ":memory:" if in_memory else f"{stem}.{schema}.db"
            cursor.execute(f"ATTACH DATABASE '{target}' AS {schema}")
        cursor.close()


class RecordStore:
    """Owns the engine and session factory for one process.

    Opened once at startup and closed at shutdown; every request gets its own
    session from it.
    """

    def __init__(self, url: str | None = None, engine: Engine | None = None):
        self.Url = url
        self.Engine = engine
        self._SessionFactory: sessionmaker | None = None
        if engine is not None:
            self._SessionFactory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @property
    def IsOpen(self) -> bool:
        return self._SessionFactory is not None

    def Open(self) -> "RecordStore":
        if self.IsOpen:
            return self
        url = self.Url or BuildUserConnectionUrl()
        if url.startswith("sqlite"):
            self.Engine = create_engine(url, connect_args={"check_same_thread": False})
            _attach_sqlite_schemas(self.Engine)
        else:
            self.Engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_size=_read_int_env("SQLALCHEMY_POOL_SIZE", 10),
                max_overflow=_read_int_env("SQLALCHEMY_MAX_OVERFLOW", 20),
                pool_timeout=_read_int_env("SQLALCHEMY_POOL_TIMEOUT", 60),
            )
        self._SessionFactory = sessionmaker(bind=self.Engine, autocommit=False, autoflush=False)
        logger.info("record store opened (%s)", self.Engine.url.get_backend_name())
        return self

    def Close(self) -> None:
        if self.Engine is not None:
            self.Engine.dispose()
            logger.info("record store closed")
        self.Engine = None
        self._SessionFactory = None

    def OpenSession(self) -> Session:
        if self._SessionFactory is None:
            raise RuntimeError("Record store is not open")
        return self._SessionFactory()

    def Ping(self) -> None:
        with self.OpenSession() as session:
            session.execute(text("SELECT 1"))


def GetRecordStore(request: Request) -> RecordStore:
    store = getattr(request.app.state, "record_store", None)
    if store is None or not store.IsOpen:
        raise RuntimeError("Record store is not open")
    return store


def GetDb(request: Request) -> Iterator[Session]:
    db = GetRecordStore(request).OpenSession()
    try:
        yield db
    finally:
        db.close()
