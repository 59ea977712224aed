"""Conversion of multipart uploads into domain media uploads."""

from typing import Optional

from fastapi import UploadFile

from mediahub.core.domain.entities import MediaUpload


async def read_upload(upload: Optional[UploadFile]) -> Optional[MediaUpload]:
    if upload is None:
        return None
    return MediaUpload(
        filename=upload.filename or "",
        content=await upload.read(),
        content_type=upload.content_type,
    )
