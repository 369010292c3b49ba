"""ERC-20 token chaincode client."""

from .models import ApprovalEvent, TransferEvent, decode_token_event
from .service import TokenArgumentError, TokenService

__all__ = [
    "ApprovalEvent",
    "TokenArgumentError",
    "TokenService",
    "TransferEvent",
    "decode_token_event",
]
