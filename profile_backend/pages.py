"""
HTML views and static assets served alongside the API.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles


def _view(path: Path) -> FileResponse:
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path, media_type="text/html")


def create_pages_router(views_dir: Path) -> APIRouter:
    router = APIRouter(include_in_schema=False)

    @router.get("/")
    def index_page():
        return _view(views_dir / "index.html")

    # The id is read client-side by the page script.
    @router.get("/profile/{profile_id}")
    def profile_page(profile_id: str):
        return _view(views_dir / "profile.html")

    return router


def mount_static(app: FastAPI, static_dir: Path) -> None:
    """Serve the static directory at the site root; must be mounted last."""
    app.mount("/", StaticFiles(directory=static_dir), name="public")
