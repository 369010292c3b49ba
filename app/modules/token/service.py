"""Client for the ERC-20 token chaincode's query and invoke functions."""

from __future__ import annotations

import json
import logging
import re
from typing import List, Optional, Sequence

from app.core.config import Settings, settings
from app.modules.fabric.gateway import FabricGateway
from app.modules.token.models import ApprovalEvent, parse_approval_list

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class TokenArgumentError(ValueError):
    """Raised before submitting a call whose arguments the chaincode would reject."""

    def __init__(self, error_type: str, type_name: str, message: str) -> None:
        super().__init__(f"failed to {error_type} {type_name}, error: {message}")
        self.error_type = error_type
        self.type_name = type_name


def convert_to_positive(name: str, value: object) -> int:
    """Parse ``value`` as a strictly positive integer amount."""
    if isinstance(value, bool):
        raise TokenArgumentError("Convert", name, "must be integer")
    text = str(value)
    if not _INTEGER.fullmatch(text):
        raise TokenArgumentError("Convert", name, "must be integer")
    amount = int(text)
    if amount <= 0:
        raise TokenArgumentError("Convert", name, "must be positive")
    return amount


def _require(name: str, value: str) -> str:
    if not value or not value.strip():
        raise TokenArgumentError("Validate", name, "cannot be empty")
    return value


def _parse_amount(fcn: str, raw: str) -> int:
    text = (raw or "").strip().strip('"')
    if not text:
        return 0
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"{fcn} returned a non-numeric payload: {raw!r}") from exc


class TokenService:
    """Queries and invokes the token chaincode as the gateway's user."""

    def __init__(
        self,
        gateway: FabricGateway,
        *,
        channel_name: str,
        chaincode_id: str,
        peers: Sequence[str],
        wait_for_event: bool = True,
    ) -> None:
        if not peers:
            raise ValueError("At least one endorsing peer is required")
        self._gateway = gateway
        self._channel_name = channel_name
        self._chaincode_id = chaincode_id
        self._peers = list(peers)
        self._wait_for_event = wait_for_event

    @classmethod
    def from_settings(cls, gateway: FabricGateway, config: Settings = settings) -> "TokenService":
        return cls(
            gateway,
            channel_name=config.FABRIC_CHANNEL_NAME,
            chaincode_id=config.FABRIC_CHAINCODE_ID,
            peers=[config.FABRIC_PEER_NAME],
            wait_for_event=config.FABRIC_INVOKE_WAIT_FOR_EVENT,
        )

    # Queries

    async def total_supply(self, token_name: str) -> int:
        raw = await self._query("totalSupply", [_require("tokenName", token_name)])
        return _parse_amount("totalSupply", raw)

    async def balance_of(self, address: str) -> int:
        raw = await self._query("balanceOf", [_require("address", address)])
        return _parse_amount("balanceOf", raw)

    async def allowance(self, owner: str, spender: str) -> int:
        raw = await self._query("allowance", [_require("owner", owner), _require("spender", spender)])
        return _parse_amount("allowance", raw)

    async def approval_list(self, owner: str) -> List[ApprovalEvent]:
        raw = await self._query("approvalList", [_require("owner", owner)])
        try:
            return parse_approval_list(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"approvalList returned invalid JSON: {raw!r}") from exc

    # Invokes

    async def transfer(self, caller: str, recipient: str, amount: object) -> str:
        value = convert_to_positive("transferAmount", amount)
        return await self._invoke(
            "transfer",
            [_require("caller", caller), _require("recipient", recipient), str(value)],
        )

    async def approve(self, owner: str, spender: str, amount: object) -> str:
        value = convert_to_positive("AllowanceAmount", amount)
        return await self._invoke(
            "approve",
            [_require("owner", owner), _require("spender", spender), str(value)],
        )

    async def transfer_from(self, owner: str, spender: str, recipient: str, amount: object) -> str:
        value = convert_to_positive("TransferAmount", amount)
        return await self._invoke(
            "transferFrom",
            [
                _require("owner", owner),
                _require("spender", spender),
                _require("recipient", recipient),
                str(value),
            ],
        )

    async def increase_allowance(self, owner: str, spender: str, amount: object) -> str:
        value = convert_to_positive("IncreaseAmount", amount)
        return await self._invoke(
            "increaseAllowance",
            [_require("owner", owner), _require("spender", spender), str(value)],
        )

    async def decrease_allowance(self, owner: str, spender: str, amount: object) -> str:
        value = convert_to_positive("DecreaseAmount", amount)
        return await self._invoke(
            "decreaseAllowance",
            [_require("owner", owner), _require("spender", spender), str(value)],
        )

    async def transfer_other_token(self, chaincode_name: str, caller: str, recipient: str, amount: object) -> str:
        value = convert_to_positive("transferAmount", amount)
        return await self._invoke(
            "transferOtherToken",
            [
                _require("chaincodeName", chaincode_name),
                _require("caller", caller),
                _require("recipient", recipient),
                str(value),
            ],
        )

    async def mint(self, address: str, amount: object) -> str:
        value = convert_to_positive("MintAmount", amount)
        return await self._invoke("mint", [_require("address", address), str(value)])

    async def burn(self, address: str, amount: object) -> str:
        value = convert_to_positive("BurnAmount", amount)
        return await self._invoke("burn", [_require("address", address), str(value)])

    async def _query(self, fcn: str, args: List[str]) -> str:
        logger.debug("Querying %s.%s args=%s", self._chaincode_id, fcn, args)
        return await self._gateway.query(
            channel_name=self._channel_name,
            peers=self._peers,
            chaincode_id=self._chaincode_id,
            fcn=fcn,
            args=args,
        )

    async def _invoke(self, fcn: str, args: List[str]) -> str:
        logger.info("Invoking %s.%s args=%s", self._chaincode_id, fcn, args)
        result: Optional[str] = await self._gateway.invoke(
            channel_name=self._channel_name,
            peers=self._peers,
            chaincode_id=self._chaincode_id,
            fcn=fcn,
            args=args,
            wait_for_event=self._wait_for_event,
        )
        return result or ""
