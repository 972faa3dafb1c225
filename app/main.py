import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from typing import Optional  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from app import config  # noqa: E402
from app.api.base import api_router  # noqa: E402
from app.api.errors import register_exception_handlers  # noqa: E402
from app.features.initialization.repository import read_initialization_record  # noqa: E402
from app.features.initialization.service import InitializationGate  # noqa: E402
from app.middleware.initialization_gate import InitializationGateMiddleware  # noqa: E402


def create_app(gate: Optional[InitializationGate] = None) -> FastAPI:
    """Build the application; tests pass their own gate"""
    application = FastAPI(
        title="Todo Backend API",
        description="Backend API for a personal todo list with filters, stats and image attachments",
        version="1.0.0"
    )
    application.state.initialization_gate = gate or InitializationGate(read_initialization_record)

    # Middleware added last runs first: CORS wraps the gate so redirects carry CORS headers
    application.add_middleware(InitializationGateMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(api_router)

    @application.get("/")
    def read_root():
        return {
            "message": "Todo Backend API",
            "docs": "/docs",
            "version": "1.0.0"
        }

    return application


app = create_app()


def run():
    """Development server"""
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    run()
