"""Service-level exceptions shared by the API layer"""
from typing import Optional


class TodoValidationError(ValueError):
    """Input rejected before any call to the store"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ImageValidationError(ValueError):
    """Image rejected before upload (type or size)"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamServiceError(Exception):
    """
    A hosted collaborator (store, identity provider, image CDN) failed.

    message is safe to show to the user; code is the provider's error code
    when one was reported.
    """

    def __init__(self, message: str, code: Optional[str] = None, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class AlreadyInitializedError(Exception):
    """The one-time initialization has already been performed"""
