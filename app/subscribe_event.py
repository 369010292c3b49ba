"""Standalone chaincode event subscriber.

Connects as the configured user, subscribes to the configured chaincode event
and logs every occurrence until interrupted. Exits with status 1 when the
client or the subscription cannot be set up.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Optional

from app.core.config import Settings, settings
from app.modules.fabric.gateway import get_client
from app.modules.fabric.handlers import log_chaincode_error, log_chaincode_event
from app.modules.fabric.listener import ChaincodeEventListener

logger = logging.getLogger(__name__)


async def _wait_forever() -> None:
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:  # pragma: no cover - Windows fallback
            pass

    await stop_event.wait()


async def subscribe_event(config: Settings = settings) -> ChaincodeEventListener:
    gateway = await get_client(config)

    listener: Optional[ChaincodeEventListener] = None
    try:
        listener = ChaincodeEventListener(
            gateway=gateway,
            channel_name=config.FABRIC_CHANNEL_NAME,
            peer_name=config.FABRIC_PEER_NAME,
            chaincode_id=config.FABRIC_CHAINCODE_ID,
            event_name=config.FABRIC_CHAINCODE_EVENT,
            on_event=log_chaincode_event,
            on_error=log_chaincode_error,
            full_block=config.FABRIC_EVENT_FULL_BLOCK,
            start_block=config.FABRIC_EVENT_START_BLOCK,
        )
        handle = await listener.start()
    except Exception:
        if listener is not None:
            await listener.stop()
        gateway.close()
        raise

    logger.info("chaincode event handler started with handler_id=%s", handle)
    return listener


async def main(config: Settings = settings) -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    try:
        listener = await subscribe_event(config)
    except Exception as exc:
        logger.error("error: %s", exc)
        return 1

    try:
        await _wait_forever()
    finally:
        await listener.stop()
        listener.gateway.close()
        logger.info("Chaincode event listener stopped.")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(asyncio.run(main()))
