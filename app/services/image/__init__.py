"""Image hosting service"""
from app.services.image.image_service import ImageService, data_url_to_bytes, to_data_url

__all__ = ["ImageService", "data_url_to_bytes", "to_data_url"]
