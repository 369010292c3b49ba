import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_token_service
from app.modules.fabric.gateway import ChaincodeCallError

from .schemas import (
    AllowanceRequest,
    AmountResponse,
    Approval,
    ApprovalListResponse,
    InvokeResponse,
    SupplyChangeRequest,
    TransferFromRequest,
    TransferOtherTokenRequest,
    TransferRequest,
)
from .service import TokenArgumentError, TokenService

router = APIRouter()
logger = logging.getLogger(__name__)


async def _call(fcn: str, call: Callable[[], Awaitable]):
    try:
        return await call()
    except TokenArgumentError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ChaincodeCallError as exc:
        logger.error("Chaincode call %s failed: %s", fcn, exc.message)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except ValueError as exc:
        logger.error("Unexpected chaincode response for %s: %s", fcn, exc)
        raise HTTPException(status_code=502, detail=f"Unexpected response from {fcn}: {exc}") from exc


@router.get("/total-supply/{token_name}", response_model=AmountResponse, summary="Total token supply")
async def total_supply(token_name: str, service: TokenService = Depends(get_token_service)) -> AmountResponse:
    amount = await _call("totalSupply", lambda: service.total_supply(token_name))
    return AmountResponse(amount=amount)


@router.get("/balance/{address}", response_model=AmountResponse, summary="Token balance of an address")
async def balance_of(address: str, service: TokenService = Depends(get_token_service)) -> AmountResponse:
    amount = await _call("balanceOf", lambda: service.balance_of(address))
    return AmountResponse(amount=amount)


@router.get("/allowance/{owner}/{spender}", response_model=AmountResponse, summary="Remaining allowance")
async def allowance(owner: str, spender: str, service: TokenService = Depends(get_token_service)) -> AmountResponse:
    amount = await _call("allowance", lambda: service.allowance(owner, spender))
    return AmountResponse(amount=amount)


@router.get("/approvals/{owner}", response_model=ApprovalListResponse, summary="Approvals granted by an owner")
async def approval_list(owner: str, service: TokenService = Depends(get_token_service)) -> ApprovalListResponse:
    approvals = await _call("approvalList", lambda: service.approval_list(owner))
    return ApprovalListResponse(
        owner=owner,
        approvals=[Approval(**approval.to_payload()) for approval in approvals],
    )


@router.post("/transfer", response_model=InvokeResponse)
async def transfer(body: TransferRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call("transfer", lambda: service.transfer(body.caller, body.recipient, body.amount))
    return InvokeResponse(function="transfer", result=result)


@router.post("/approve", response_model=InvokeResponse)
async def approve(body: AllowanceRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call("approve", lambda: service.approve(body.owner, body.spender, body.amount))
    return InvokeResponse(function="approve", result=result)


@router.post("/transfer-from", response_model=InvokeResponse)
async def transfer_from(body: TransferFromRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call(
        "transferFrom",
        lambda: service.transfer_from(body.owner, body.spender, body.recipient, body.amount),
    )
    return InvokeResponse(function="transferFrom", result=result)


@router.post("/increase-allowance", response_model=InvokeResponse)
async def increase_allowance(body: AllowanceRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call(
        "increaseAllowance",
        lambda: service.increase_allowance(body.owner, body.spender, body.amount),
    )
    return InvokeResponse(function="increaseAllowance", result=result)


@router.post("/decrease-allowance", response_model=InvokeResponse)
async def decrease_allowance(body: AllowanceRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call(
        "decreaseAllowance",
        lambda: service.decrease_allowance(body.owner, body.spender, body.amount),
    )
    return InvokeResponse(function="decreaseAllowance", result=result)


@router.post("/transfer-other-token", response_model=InvokeResponse, summary="Transfer tokens of another chaincode")
async def transfer_other_token(
    body: TransferOtherTokenRequest, service: TokenService = Depends(get_token_service)
) -> InvokeResponse:
    result = await _call(
        "transferOtherToken",
        lambda: service.transfer_other_token(body.chaincode_name, body.caller, body.recipient, body.amount),
    )
    return InvokeResponse(function="transferOtherToken", result=result)


@router.post("/mint", response_model=InvokeResponse)
async def mint(body: SupplyChangeRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call("mint", lambda: service.mint(body.address, body.amount))
    return InvokeResponse(function="mint", result=result)


@router.post("/burn", response_model=InvokeResponse)
async def burn(body: SupplyChangeRequest, service: TokenService = Depends(get_token_service)) -> InvokeResponse:
    result = await _call("burn", lambda: service.burn(body.address, body.amount))
    return InvokeResponse(function="burn", result=result)
