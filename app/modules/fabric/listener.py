"""Chaincode event subscription over a peer's channel event hub."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from app.modules.fabric.gateway import FabricGateway
from app.modules.fabric.models import ChaincodeEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[ChaincodeEvent], None]
ErrorHandler = Callable[[BaseException], None]


def normalize_start_block(value: Any) -> Any:
    """Digit strings become block numbers; the SDK rejects them otherwise."""
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        return text or None
    return value


class ChaincodeEventListener:
    """Registers one chaincode event listener and keeps the delivery stream running.

    Errors coming from the stream or raised by ``on_event`` are handed to
    ``on_error``. The listener never reconnects or resubscribes on its own.
    """

    def __init__(
        self,
        *,
        gateway: FabricGateway,
        channel_name: str,
        peer_name: str,
        chaincode_id: str,
        event_name: str,
        on_event: EventHandler,
        on_error: ErrorHandler,
        full_block: bool = True,
        start_block: Optional[Any] = None,
    ) -> None:
        if not chaincode_id:
            raise ValueError("Chaincode id is required")
        if not event_name:
            raise ValueError("Chaincode event name is required")
        self._gateway = gateway
        self._channel_name = channel_name
        self._peer_name = peer_name
        self._chaincode_id = chaincode_id
        self._event_name = event_name
        self._on_event = on_event
        self._on_error = on_error
        self._full_block = full_block
        self._start_block = normalize_start_block(start_block)
        self._event_hub: Any = None
        self._registration: Any = None
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def gateway(self) -> FabricGateway:
        return self._gateway

    @property
    def registration(self) -> Any:
        return self._registration

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> Any:
        """Register the callbacks, connect the hub and return the listener handle."""
        if self._task is not None:
            raise RuntimeError("ChaincodeEventListener already started")

        channel = self._gateway.get_channel(self._channel_name)
        self._event_hub = self._gateway.new_event_hub(channel, self._peer_name)
        self._registration = self._event_hub.registerChaincodeEvent(
            self._chaincode_id,
            self._event_name,
            onEvent=self._dispatch,
        )

        stream = self._event_hub.connect(filtered=not self._full_block, start=self._start_block)
        self._task = asyncio.create_task(self._consume(stream), name="chaincode-event-listener")
        logger.debug(
            "Subscribed to %s/%s on channel=%s peer=%s",
            self._chaincode_id,
            self._event_name,
            self._channel_name,
            self._peer_name,
        )
        return self._registration

    async def stop(self) -> None:
        if self._event_hub is not None:
            if self._registration is not None:
                try:
                    self._event_hub.unregisterChaincodeEvent(self._registration)
                except Exception as exc:  # pragma: no cover - already unregistered
                    logger.debug("Failed to unregister chaincode listener: %s", exc)
            self._event_hub.disconnect()
            self._event_hub = None
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._registration = None

    async def _consume(self, stream: Any) -> None:
        try:
            await stream
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._report(exc)
        else:
            logger.info("Chaincode event stream from %s closed", self._peer_name)

    def _dispatch(
        self,
        cc_event: Any,
        block_number: Optional[int] = None,
        tx_id: Optional[str] = None,
        tx_status: Optional[str] = None,
    ) -> None:
        try:
            event = ChaincodeEvent.from_sdk(cc_event, block_number, tx_id, tx_status)
            self._on_event(event)
        except Exception as exc:
            self._report(exc)

    def _report(self, exc: BaseException) -> None:
        try:
            self._on_error(exc)
        except Exception:  # pragma: no cover - error handler must not kill the stream
            logger.exception("Chaincode error handler failed")
