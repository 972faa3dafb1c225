"""One-time initialization API endpoints"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.dependencies import get_initialization_gate, get_initialization_service
from app.features.initialization.domain import InitializationResult, InitializationState
from app.features.initialization.schemas import (
    InitializationStatusResponse,
    InitializeRequest,
)
from app.features.initialization.service import InitializationGate, InitializationService
from app.services.errors import AlreadyInitializedError

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/initialize", tags=["initialization"])


@router.get("", response_model=InitializationStatusResponse)
async def get_initialization_status(
    gate: InitializationGate = Depends(get_initialization_gate),
):
    """
    Report whether the application still needs initializing.

    Once initialized, requests to this route are redirected to the root
    before they get here.
    """
    state = await gate.resolve()
    if state == InitializationState.INITIALIZED:
        message = "The application is initialized"
    else:
        message = "The application must be initialized before use"
    return {"state": state, "message": message}


@router.post("", response_model=InitializationResult, status_code=201)
async def initialize(
    request: InitializeRequest,
    service: InitializationService = Depends(get_initialization_service),
):
    """
    Seed the categories and, optionally, the demo account.

    Raises:
        409: The application was already initialized (possibly by a
             concurrent request)
    """
    try:
        return await service.initialize(
            initialized_by=request.initialized_by,
            create_demo_account=request.create_demo_account,
        )
    except AlreadyInitializedError as e:
        raise HTTPException(status_code=409, detail=str(e))
