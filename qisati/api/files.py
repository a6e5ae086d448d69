"""
파일 업로드 API (커버 이미지, 오디오, JSON 메타데이터)
"""

from fastapi import APIRouter, UploadFile, File, Body, Depends
from typing import Any, Dict

from qisati.core.errors import invalid_input
from qisati.core.security import Principal, get_current_principal
from qisati.dependencies import get_storage
from qisati.schemas.audio import UploadResponse
from qisati.services.storage import Storage

router = APIRouter()

ALLOWED_PREFIXES = ("image/", "audio/")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
):
    """이미지/오디오 파일 하나를 업로드하고 content id와 URL을 반환합니다."""
    content_type = file.content_type or ""
    if not content_type.startswith(ALLOWED_PREFIXES):
        raise invalid_input("이미지 또는 오디오 파일만 업로드할 수 있습니다.")
    try:
        data = await file.read()
    finally:
        await file.close()
    if not data:
        raise invalid_input("빈 파일입니다.")
    if len(data) > MAX_UPLOAD_BYTES:
        raise invalid_input("파일 크기는 10MB를 넘을 수 없습니다.")

    stored = await storage.save(data, filename=file.filename, content_type=content_type)
    return {"content_id": stored.content_id, "url": stored.url}


@router.post("/json", response_model=UploadResponse)
async def pin_json(
    document: Dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
):
    """JSON 문서 하나를 고정합니다 (코인/에디션 메타데이터)."""
    if not document:
        raise invalid_input("빈 문서입니다.")
    stored = await storage.pin_json(document)
    return {"content_id": stored.content_id, "url": stored.url}
