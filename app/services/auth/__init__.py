"""Authentication and session services"""
from app.services.auth.auth_service import (
    AuthService,
    SIGNED_IN,
    SIGNED_OUT,
    translate_auth_error,
)
from app.services.auth.session import SessionContext

__all__ = [
    "AuthService",
    "SessionContext",
    "SIGNED_IN",
    "SIGNED_OUT",
    "translate_auth_error",
]
