"""Payloads emitted and returned by the ERC-20 token chaincode."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from app.modules.fabric.models import ChaincodeEvent

TRANSFER_EVENT = "transferEvent"
APPROVAL_EVENT = "approvalEvent"


@dataclass(frozen=True)
class TransferEvent:
    sender: str
    recipient: str
    amount: int

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TransferEvent":
        try:
            return cls(
                sender=str(payload["sender"]),
                recipient=str(payload["recipient"]),
                amount=int(payload["amount"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed {TRANSFER_EVENT} payload: {payload!r}") from exc


@dataclass(frozen=True)
class ApprovalEvent:
    """Approval event payload; also the row format of ``approvalList``."""

    owner: str
    spender: str
    allowance: int

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ApprovalEvent":
        try:
            return cls(
                owner=str(payload["owner"]),
                spender=str(payload["spender"]),
                allowance=int(payload["allowance"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed {APPROVAL_EVENT} payload: {payload!r}") from exc

    def to_payload(self) -> Dict[str, Any]:
        return {"owner": self.owner, "spender": self.spender, "allowance": self.allowance}


TokenEvent = Union[TransferEvent, ApprovalEvent]


def _json_object(event: ChaincodeEvent) -> Dict[str, Any]:
    try:
        data = json.loads(event.payload_text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{event.event_name} payload is not JSON: {event.payload_text!r}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{event.event_name} payload must be a JSON object")
    return data


def decode_token_event(event: ChaincodeEvent) -> Optional[TokenEvent]:
    """Decode a token chaincode event; ``None`` for events the token contract does not define."""
    if event.event_name == TRANSFER_EVENT:
        return TransferEvent.from_payload(_json_object(event))
    if event.event_name == APPROVAL_EVENT:
        return ApprovalEvent.from_payload(_json_object(event))
    return None


def parse_approval_list(raw: str) -> List[ApprovalEvent]:
    data = json.loads(raw) if raw else []
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("approvalList response must be a JSON array")
    return [ApprovalEvent.from_payload(item) for item in data]
