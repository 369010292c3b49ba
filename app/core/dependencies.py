"""Reusable dependency providers for FastAPI routes."""

from fastapi import Depends, HTTPException

from app.core import lifespan as app_state
from app.core.config import settings
from app.modules.fabric.gateway import FabricGateway
from app.modules.token.service import TokenService


def get_fabric_gateway() -> FabricGateway:
    """FastAPI dependency that returns the gateway connected at startup."""
    gateway = app_state.fabric_gateway
    if gateway is None or not gateway.connected:
        raise HTTPException(status_code=503, detail="Fabric gateway is not connected")
    return gateway


def get_token_service(gateway: FabricGateway = Depends(get_fabric_gateway)) -> TokenService:
    return TokenService.from_settings(gateway, settings)
