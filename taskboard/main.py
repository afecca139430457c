import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from taskboard.core.config import SettingsDep, get_settings
from taskboard.core.logging import configure_logging
from taskboard.database import async_session, create_db_and_tables, dispose_engine
from taskboard.errors import register_exception_handlers
from taskboard.routers import categories, tasks
from taskboard.services.category_service import CategoryService

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("taskboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    if settings.seed_categories:
        async with async_session() as session:
            await CategoryService.seed_default_categories(session)
    logger.info("API ready on %s", settings.api_prefix)
    yield
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Task and category management API with SQLModel",
    swagger_ui_parameters={"displayRequestDuration": True},
    version=settings.version,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def strip_trailing_slash(request: Request, call_next):
    # /api/tasks/ routes like /api/tasks
    path = request.scope["path"]
    if path != "/" and path.endswith("/"):
        request.scope["path"] = path.rstrip("/") or "/"
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


# Include routers
app.include_router(tasks.router, prefix=settings.api_prefix)
app.include_router(categories.router, prefix=settings.api_prefix)


@app.get("/")
async def root(app_settings: SettingsDep):
    return {
        "message": f"Welcome to {app_settings.app_name}",
        "docs": "/docs",
        "version": app_settings.version,
    }


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def run():
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
