import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from headless_cms.config import settings
from headless_cms.database import AsyncSessionLocal, Base, engine
from headless_cms.exception_handlers import register_exception_handlers
from headless_cms.graphql.schema import generate_headless_schema
from headless_cms.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from headless_cms.plugins.loader import initialize_plugins
from headless_cms.routes import content_models, headless, monitoring

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, build plugin registries and publish the headless schema."""
    setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs)

    if settings.create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    field_types, model_fields = initialize_plugins()
    app.state.field_types = field_types
    app.state.model_fields = model_fields

    async with AsyncSessionLocal() as db:
        app.state.headless_schema = await generate_headless_schema(db, field_types, model_fields)
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    await engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Headless CMS with a GraphQL API generated from content models",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(headless.router, prefix="/graphql/headless")
    app.include_router(content_models.router, prefix="/graphql/headless/models")
    app.include_router(monitoring.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
