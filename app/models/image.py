"""Image upload domain model"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class ImageSource(str, Enum):
    """Where an uploaded image ended up"""
    HOSTED = "hosted"
    INLINE = "inline"


class ImageUploadResult(BaseModel):
    """Outcome of an image upload, including which path was taken"""
    url: str
    source: ImageSource
    fallback_reason: Optional[str] = None

    @property
    def is_hosted(self) -> bool:
        return self.source == ImageSource.HOSTED
