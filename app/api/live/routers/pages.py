from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

PUBLIC_DIR = Path(__file__).resolve().parents[4] / "public"

router = APIRouter()


@router.get("/", include_in_schema=False)
async def index_page():
    return FileResponse(PUBLIC_DIR / "index.html")


@router.get("/stream", include_in_schema=False)
async def streamer_page():
    return FileResponse(PUBLIC_DIR / "streamer.html")


@router.get("/watch", include_in_schema=False)
async def audience_page():
    return FileResponse(PUBLIC_DIR / "audience.html")
