import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.core.config import settings
from app.modules.fabric.gateway import FabricGateway
from app.modules.fabric.handlers import log_chaincode_error, log_chaincode_event
from app.modules.fabric.listener import ChaincodeEventListener

# Configure logger
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global instances shared with route dependencies
fabric_gateway: Optional[FabricGateway] = None
event_listener: Optional[ChaincodeEventListener] = None


def build_listener(gateway: FabricGateway) -> ChaincodeEventListener:
    return ChaincodeEventListener(
        gateway=gateway,
        channel_name=settings.FABRIC_CHANNEL_NAME,
        peer_name=settings.FABRIC_PEER_NAME,
        chaincode_id=settings.FABRIC_CHAINCODE_ID,
        event_name=settings.FABRIC_CHAINCODE_EVENT,
        on_event=log_chaincode_event,
        on_error=log_chaincode_error,
        full_block=settings.FABRIC_EVENT_FULL_BLOCK,
        start_block=settings.FABRIC_EVENT_START_BLOCK,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    global fabric_gateway, event_listener

    # Startup
    logger.info("🔌 Connecting to Fabric network as %s...", settings.FABRIC_USER_NAME)
    fabric_gateway = await FabricGateway.from_settings(settings).connect()

    if settings.FABRIC_LISTENER_ENABLED:
        logger.info("🚀 Subscribing to chaincode event %s...", settings.FABRIC_CHAINCODE_EVENT)
        try:
            event_listener = build_listener(fabric_gateway)
            handle = await event_listener.start()
        except Exception:
            logger.exception("Failed to start chaincode event listener")
            if event_listener is not None:
                await event_listener.stop()
                event_listener = None
            fabric_gateway.close()
            fabric_gateway = None
            raise
        logger.info("chaincode event handler started with handler_id=%s", handle)

    yield

    # Shutdown
    if event_listener is not None:
        logger.info("🛑 Stopping chaincode event listener...")
        await event_listener.stop()
        event_listener = None

    logger.info("🔌 Closing Fabric gateway...")
    if fabric_gateway is not None:
        fabric_gateway.close()
        fabric_gateway = None
