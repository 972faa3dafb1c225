"""
Initialization gate middleware

Until the app has been initialized every route redirects to the
initialization route; afterwards the initialization route redirects to
the root.
"""
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.features.initialization.domain import InitializationState

logger = logging.getLogger(__name__)

INITIALIZE_PATH = "/api/initialize"
EXEMPT_PREFIXES = ("/docs", "/redoc", "/openapi.json", "/api/health")


class InitializationGateMiddleware(BaseHTTPMiddleware):
    """Redirects requests according to app.state.initialization_gate"""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        gate = request.app.state.initialization_gate
        state = await gate.resolve()
        is_initialize_route = path.rstrip("/") == INITIALIZE_PATH

        if state == InitializationState.UNINITIALIZED and not is_initialize_route:
            logger.debug(f"App not initialized, redirecting {path}")
            return RedirectResponse(INITIALIZE_PATH, status_code=307)

        if state == InitializationState.INITIALIZED and is_initialize_route:
            return RedirectResponse("/", status_code=303)

        return await call_next(request)
