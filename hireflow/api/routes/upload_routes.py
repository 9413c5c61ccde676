"""
Upload Routes

POST /upload - Store a single file (multipart field `image`), return its public URL
"""

from fastapi import APIRouter, UploadFile, File

from hireflow.schemas.schemas import UploadResponse
from hireflow.utils.file_upload import save_upload

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadResponse)
async def upload_file(image: UploadFile = File(None)):
    """Pass-through storage for avatars, post images and resumes."""
    url = await save_upload(image)
    return UploadResponse(url=url)
