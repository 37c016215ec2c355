"""Pizzeria API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PizzeriaError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema creation and menu seeding at startup are settings toggles; production
      deployments run alembic migrations instead
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pizzeria.api.error_handlers import register_error_handlers
from pizzeria.api.routes import health, resources
from pizzeria.config import get_settings
from pizzeria.infrastructure.database import init_db
from pizzeria.infrastructure.menu_seed import seed_menu
from pizzeria.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.auto_create_schema:
        await manager.create_schema()
    if settings.seed_menu:
        async with manager.session() as db:
            await seed_menu(db)
    logger.info("Pizzeria API started")
    yield
    await manager.dispose()
    logger.info("Pizzeria API shutting down")


app = FastAPI(
    title="Pizzeria API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(resources.router)

register_error_handlers(app)
