"""Default callbacks for chaincode event subscriptions."""

from __future__ import annotations

import logging

from app.modules.fabric.models import ChaincodeEvent
from app.modules.token.models import decode_token_event

logger = logging.getLogger(__name__)


def log_chaincode_event(event: ChaincodeEvent) -> None:
    """Log every delivered event and, for token events, the decoded payload."""
    logger.info(
        "chaincode event emitted: %s  %s  %s",
        event.chaincode_id,
        event.event_name,
        event.payload_text,
    )

    try:
        decoded = decode_token_event(event)
    except ValueError as exc:
        logger.warning("Could not decode %s payload (tx=%s): %s", event.event_name, event.tx_id, exc)
        return

    if decoded is not None:
        logger.info("%s block=%s tx=%s: %r", event.event_name, event.block_number, event.tx_id, decoded)


def log_chaincode_error(exc: BaseException) -> None:
    logger.error("chaincode event error: %s", exc)
