"""
Index page for VIEW_ENGINE=html: serves `index.html` from the static
directory at `/`. Registered only when that view engine is configured.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from app.exceptions import NotFoundError

router = APIRouter(include_in_schema=False)


@router.get("/")
async def index(request: Request) -> FileResponse:
    page = Path(request.app.state.settings.static_dir) / "index.html"
    if not page.is_file():
        raise NotFoundError(resource="page", resource_id="index.html")
    return FileResponse(path=str(page), media_type="text/html")
