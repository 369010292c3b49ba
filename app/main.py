import logging

# FastAPI imports
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# API imports
from app.api import api_router

# Core imports
from app.core import lifespan as app_state
from app.core.config import settings
from app.core.lifespan import lifespan

# Middleware imports
from app.middleware import RequestLoggingMiddleware

# Logging configuration
logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    application = FastAPI(
        title="ERC-20 Fabric Gateway",
        description="ERC-20 token chaincode client with chaincode event subscription",
        version="1.0.0",
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.include_router(api_router, prefix=settings.API_PREFIX or "/api/v1")

    return application

app = create_application()

@app.get("/", tags=["App"], summary="App Version")
async def root():
    return {
        "message": "Fabric gateway is running!",
        "version": "1.0.0",
    }

@app.get("/health")
async def health_check():
    gateway = app_state.fabric_gateway
    listener = app_state.event_listener
    return {
        "status": "healthy",
        "fabric_connected": bool(gateway is not None and gateway.connected),
        "listener_running": bool(listener is not None and listener.running),
        "chaincode_event": settings.FABRIC_CHAINCODE_EVENT,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
