"""One-time initialization feature module"""

# The router lives in app.features.initialization.api; importing it here would
# cycle through app.api.dependencies
from app.features.initialization.domain import (
    AppInitialization,
    InitializationResult,
    InitializationState,
)

__all__ = [
    "AppInitialization",
    "InitializationResult",
    "InitializationState",
]
