import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.config import settings
from app.content_types import BlockManager, ContentTypeManager
from app.database import AsyncSessionLocal, Base, engine
from app.exception_handlers import register_exception_handlers
from app.fields import FieldTypeRegistry, build_widget_registry
from app.middleware.logging import StructuredLoggingMiddleware, configure_logging
from app.modules import ModuleDescriptor, enabled_modules
from app.routes import field_types as field_type_routes
from app.routes import widgets as widget_routes
from app.routes.content_types import block_types_router, content_types_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the catalogue tables in debug mode and make sure the default content types exist."""
    logger.info("Starting up the application...")
    if settings.debug:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")

    async with AsyncSessionLocal() as db:
        if await app.state.content_types.ensure_default_types(db):
            logger.info("Default content types created")
    yield
    logger.info("Shutting down the application...")
    await engine.dispose()


def create_app(modules: list[ModuleDescriptor] | None = None, use_lifespan: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    The field type catalogue, the widget registry and both type managers are
    built here, once, and stored on `app.state`; requests only read them.
    """
    configure_logging(settings.log_level, json_format=settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        description="Content types, fields and widgets",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan if use_lifespan else None,
    )

    modules = enabled_modules(modules)
    app.state.field_types = FieldTypeRegistry()
    app.state.widgets = build_widget_registry(app.state.field_types, modules)
    app.state.content_types = ContentTypeManager(app.state.field_types)
    app.state.block_types = BlockManager(app.state.field_types)
    for module in modules:
        app.state.content_types.register_code_types(module.content_types)
        app.state.block_types.register_code_types(module.block_types)
    logger.info("Loaded modules: %s", ", ".join(module.name for module in modules) or "none")

    register_exception_handlers(app)
    app.add_middleware(StructuredLoggingMiddleware)

    app.include_router(field_type_routes.router, prefix="/api/v1")
    app.include_router(widget_routes.router, prefix="/api/v1")
    app.include_router(content_types_router, prefix="/api/v1")
    app.include_router(block_types_router, prefix="/api/v1")

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok", "version": settings.app_version}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
