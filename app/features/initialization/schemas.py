"""Request/response schemas for the initialization API"""

from typing import Optional

from pydantic import BaseModel

from app.features.initialization.domain import InitializationState


class InitializeRequest(BaseModel):
    create_demo_account: bool = True
    initialized_by: Optional[str] = None


class InitializationStatusResponse(BaseModel):
    state: InitializationState
    message: str
