"""Translate service exceptions into HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from supabase import PostgrestAPIError  # type: ignore

from app.services.errors import (
    ImageValidationError,
    TodoValidationError,
    UpstreamServiceError,
)

logger = logging.getLogger(__name__)


async def todo_validation_error_handler(request: Request, exc: TodoValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"field": exc.field, "message": exc.message})


async def image_validation_error_handler(request: Request, exc: ImageValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"field": "image", "message": exc.message})


async def upstream_error_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def store_error_handler(request: Request, exc: PostgrestAPIError) -> JSONResponse:
    logger.error(f"Record store error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=502, content={"detail": "The record store rejected the request"})



def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoValidationError, todo_validation_error_handler)
    app.add_exception_handler(ImageValidationError, image_validation_error_handler)
    app.add_exception_handler(UpstreamServiceError, upstream_error_handler)
    app.add_exception_handler(PostgrestAPIError, store_error_handler)
