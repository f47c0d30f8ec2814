from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, JSONResponse

from relay.api.deps import get_static_dir

ENTRY_DOCUMENT = "index.html"

router = APIRouter()


@router.get("/{full_path:path}", include_in_schema=False)
def serve_bundle(full_path: str, static_dir: Path = Depends(get_static_dir)):
    root = static_dir.resolve()
    if full_path:
        candidate = (root / full_path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)
    entry = root / ENTRY_DOCUMENT
    if not entry.is_file():
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Not found"},
        )
    return FileResponse(entry)
