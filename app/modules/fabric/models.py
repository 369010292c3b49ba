"""Identity, profile and event types shared by the Fabric helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CryptoContent:
    """Private key and signed certificate used to build the user identity."""

    private_key: Path
    signed_cert: Path


@dataclass(frozen=True)
class UserIdentity:
    username: str
    org_name: str
    msp_id: str
    crypto: CryptoContent


@dataclass(frozen=True)
class ConnectionProfiles:
    """Network-level and organization-level connection profile files."""

    network: Path
    organization: Path


@dataclass(frozen=True)
class ChaincodeEvent:
    """A chaincode event delivered by a peer's channel event hub."""

    chaincode_id: str
    event_name: str
    payload: bytes
    tx_id: Optional[str] = None
    block_number: Optional[int] = None
    tx_status: Optional[str] = None

    @property
    def payload_text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")

    @classmethod
    def from_sdk(
        cls,
        cc_event: Dict[str, Any],
        block_number: Optional[int] = None,
        tx_id: Optional[str] = None,
        tx_status: Optional[str] = None,
    ) -> "ChaincodeEvent":
        payload = cc_event.get("payload") or b""
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return cls(
            chaincode_id=str(cc_event.get("chaincode_id", "")),
            event_name=str(cc_event.get("event_name", "")),
            payload=bytes(payload),
            tx_id=tx_id or cc_event.get("tx_id"),
            block_number=block_number,
            tx_status=tx_status,
        )
