from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional

from app.api.deps import get_upload_service
from app.schemas.social import UploadResponse
from app.services.upload_service import UploadService

router = APIRouter(tags=["uploads"])


def _read(upload: Optional[UploadFile], uploads: UploadService) -> Optional[bytes]:
    if upload is None:
        return None
    # One byte past the limit is enough to reject an oversized file
    return upload.file.read(uploads.max_bytes + 1)


@router.post("/upload", response_model=UploadResponse)
def upload(
    file: Optional[UploadFile] = File(None), uploads: UploadService = Depends(get_upload_service)
) -> UploadResponse:
    url = uploads.save_image(_read(file, uploads), file.filename if file else None)
    return UploadResponse(url=url)


@router.post("/upload-avatar", response_model=UploadResponse)
def upload_avatar(
    avatar: Optional[UploadFile] = File(None),
    wallet: Optional[str] = Form(None),
    uploads: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    url = uploads.save_avatar(_read(avatar, uploads), avatar.filename if avatar else None, wallet)
    return UploadResponse(url=url)
