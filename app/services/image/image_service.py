"""
Image Service

Uploads todo images to Cloudinary (unsigned upload preset) and builds
resized delivery URLs.

Uploading is an explicit two-step strategy:
1. hosted upload to Cloudinary
2. inline data URL, used when Cloudinary is not configured, rejects the
   upload preset, or cannot be reached

The result says which path was taken.
"""

import base64
import logging
import re
from typing import Optional, Tuple

import httpx

from app import config
from app.models.image import ImageSource, ImageUploadResult
from app.services.errors import ImageValidationError, UpstreamServiceError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"

# Cloudinary rejections that mean "misconfigured preset", not "bad image"
_PRESET_ERROR_MARKERS = ("upload preset", "whitelist")

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<payload>.*)$", re.DOTALL)


def to_data_url(data: bytes, content_type: str) -> str:
    """Encode raw bytes as a base64 data URL"""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def data_url_to_bytes(data_url: str) -> Tuple[str, bytes]:
    """
    Decode a base64 data URL.

    Returns:
        (mime type, raw bytes)

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    match = _DATA_URL_RE.match(data_url or "")
    if not match:
        raise ValueError("Invalid data URL")
    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except ValueError as e:
        raise ValueError(f"Invalid base64 payload in data URL: {e}")
    return match.group("mime"), payload


class ImageService:
    """Service for image hosting"""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        upload_preset: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.cloud_name = config.CLOUDINARY_CLOUD_NAME if cloud_name is None else cloud_name
        self.upload_preset = config.CLOUDINARY_UPLOAD_PRESET if upload_preset is None else upload_preset
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.upload_preset)

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/image/upload"

    @staticmethod
    def validate(content_type: Optional[str], size: int) -> None:
        """Reject unsupported types and oversize files before any upload"""
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ImageValidationError("Only JPEG, PNG, GIF and WEBP images are accepted")
        if size > MAX_IMAGE_SIZE:
            raise ImageValidationError("The image must not exceed 5MB")

    async def upload(self, data: bytes, filename: str, content_type: str) -> ImageUploadResult:
        """
        Upload an image, falling back to an inline data URL.

        Raises:
            ImageValidationError: If the file type or size is not accepted
            UpstreamServiceError: If Cloudinary rejects the image for another reason
        """
        self.validate(content_type, len(data))

        if not self.is_configured:
            logger.warning("Cloudinary configuration is missing, falling back to inline encoding")
            return self._inline(data, content_type, "not_configured")

        try:
            response = await self._post(
                self.upload_url,
                data={"upload_preset": self.upload_preset},
                files={"file": (filename, data, content_type)},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error uploading image to Cloudinary: {e}")
            return self._inline(data, content_type, "upload_failed")

        if response.is_success:
            url = response.json().get("secure_url")
            if not url:
                raise UpstreamServiceError("Cloudinary response is missing secure_url")
            logger.info(f"Uploaded image {filename} to Cloudinary")
            return ImageUploadResult(url=url, source=ImageSource.HOSTED)

        error_message = self._error_message(response)
        logger.error(f"Cloudinary upload failed ({response.status_code}): {error_message}")

        if any(marker in error_message.lower() for marker in _PRESET_ERROR_MARKERS):
            logger.warning("Using inline fallback due to Cloudinary preset configuration issue")
            return self._inline(data, content_type, "preset_rejected")

        raise UpstreamServiceError(
            f"Failed to upload image to Cloudinary: {error_message}",
            status_code=502,
        )

    async def test_connection(self) -> bool:
        """Ping Cloudinary with the configured cloud name"""
        try:
            response = await self._get(f"{CLOUDINARY_API_BASE}/{self.cloud_name}/ping")
        except httpx.HTTPError as e:
            logger.error(f"Error testing Cloudinary connection: {e}")
            return False

        if response.is_success:
            logger.info("Cloudinary connection successful")
            return True

        logger.error(f"Cloudinary connection failed: {response.text}")
        return False

    @staticmethod
    def resize_url(image_url: str, width: int, height: int) -> str:
        """
        Delivery URL cropped to width x height.

        Only Cloudinary URLs are transformed; data URLs and other hosts are
        returned unchanged.
        """
        if not image_url:
            return ""

        if image_url.startswith("data:"):
            return image_url

        if "cloudinary.com" in image_url:
            return image_url.replace("/upload/", f"/upload/c_fill,w_{width},h_{height}/", 1)

        return image_url

    def _inline(self, data: bytes, content_type: str, reason: str) -> ImageUploadResult:
        return ImageUploadResult(
            url=to_data_url(data, content_type),
            source=ImageSource.INLINE,
            fallback_reason=reason,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return response.text

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.post(url, timeout=30.0, **kwargs)

    async def _get(self, url: str) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(url)
        async with httpx.AsyncClient() as client:
            return await client.get(url, timeout=10.0)
