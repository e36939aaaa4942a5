"""
FastAPI application entry point for the profile backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from profile_backend.config import Settings, get_settings
from profile_backend.pages import create_pages_router, mount_static
from profile_backend.routes import router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    missing = settings.missing_required()
    for name in missing:
        logger.error("Missing config: %s", name)
    if missing and settings.strict_config:
        raise RuntimeError(f"Missing required config: {', '.join(missing)}")

    app = FastAPI(title="Profile Backend", version="0.1.0")
    app.dependency_overrides[get_settings] = lambda: settings
    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(create_pages_router(settings.views_dir))
    mount_static(app, settings.static_dir)
    return app


app = create_app()
