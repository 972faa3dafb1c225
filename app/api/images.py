"""Image upload and delivery URL endpoints"""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pydantic import BaseModel

from app.api.dependencies import get_image_service
from app.middleware.auth import get_current_user_id
from app.models.image import ImageUploadResult
from app.services.image import ImageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/images", tags=["images"])


class ResizeResponse(BaseModel):
    url: str


@router.post("", response_model=ImageUploadResult)
async def upload_image(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: ImageService = Depends(get_image_service),
):
    """
    Upload an image for a todo.

    The type is checked before the body is read. The response says whether
    the image was hosted or encoded inline, and why it fell back.
    """
    service.validate(file.content_type, file.size or 0)
    data = await file.read()
    result = await service.upload(data, file.filename or "image", file.content_type)
    if not result.is_hosted:
        logger.info(f"Image for user {user_id} stored inline ({result.fallback_reason})")
    return result


@router.get("/resize", response_model=ResizeResponse)
async def resize_image(
    url: str,
    width: int = Query(..., gt=0),
    height: int = Query(..., gt=0),
    user_id: str = Depends(get_current_user_id),
):
    return {"url": ImageService.resize_url(url, width, height)}
