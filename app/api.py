from fastapi import APIRouter

# Import module routers
from app.modules.token.routes import router as token_router

# Create main API router
api_router = APIRouter()

# Include module routers
api_router.include_router(token_router, prefix="/token", tags=["token"])
