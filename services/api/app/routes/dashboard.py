"""Dashboard page.

GET / - Serves the static page that polls /metrics and renders the two counts.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter()


@router.get("/", include_in_schema=False)
async def serve_dashboard() -> FileResponse:
    return FileResponse(str(STATIC_DIR / "index.html"), media_type="text/html")
