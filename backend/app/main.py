import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import LoadSettings
from app.core.logging import setup_logging
from app.core.migrations import RunMigrations
from app.db import RecordStore
from app.modules.auth.router import router as auth_router
from app.modules.core.router import router as core_router
from app.modules.inventory.router import router as inventory_router
from app.modules.prices.router import router as prices_router
from app.modules.shopping.router import router as shopping_router
from app.modules.stores.router import router as stores_router

setup_logging()

logger = logging.getLogger("app.request")
startup_logger = logging.getLogger("app.startup")
settings = LoadSettings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RunMigrationsOnStartup:
        RunMigrations()
    store = getattr(app.state, "record_store", None)
    owns_store = store is None
    if owns_store:
        store = RecordStore()
        app.state.record_store = store
    store.Open()
    startup_logger.info("startup complete")
    try:
        yield
    finally:
        if owns_store:
            store.Close()
            app.state.record_store = None


app = FastAPI(title="Pantry API", lifespan=lifespan)

if settings.AllowedOrigins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.AllowedOrigins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def request_logger(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = int((time.perf_counter() - start) * 1000)

    parts = [f"{request.method} {request.url.path}"]
    if request.url.query:
        parts.append(f"query={request.url.query}")

    status = response.status_code
    if status >= 400:
        if status == 404:
            parts.append("ERROR: endpoint not found")
        elif status >= 500:
            parts.append("ERROR: server error")
        else:
            parts.append("ERROR: client error")

    parts.append(f"status={status}")
    parts.append(f"{duration_ms}ms")

    log_msg = " | ".join(parts)
    if status >= 500:
        logger.error(log_msg)
    elif status >= 400:
        logger.warning(log_msg)
    else:
        logger.info(log_msg)

    response.headers["X-Request-Id"] = request_id
    return response


app.include_router(core_router)
app.include_router(auth_router)
app.include_router(stores_router)
app.include_router(inventory_router)
app.include_router(prices_router)
app.include_router(shopping_router)
