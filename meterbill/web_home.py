from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from meterbill.api.deps import get_settings
from meterbill.config import Settings

router = APIRouter(tags=["web"])


@router.get("/", response_class=FileResponse)
def home(settings: Settings = Depends(get_settings)):
    index = Path(settings.static_dir) / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Client bundle not found")
    return FileResponse(index.resolve())


@router.get("/config")
def client_config(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"publishableKey": settings.stripe_publishable_key}
