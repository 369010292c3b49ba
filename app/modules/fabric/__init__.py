"""Hyperledger Fabric client helpers."""

from .gateway import ChaincodeCallError, FabricGateway, FabricSetupError, get_client
from .listener import ChaincodeEventListener
from .models import ChaincodeEvent, ConnectionProfiles, CryptoContent, UserIdentity

__all__ = [
    "ChaincodeCallError",
    "ChaincodeEvent",
    "ChaincodeEventListener",
    "ConnectionProfiles",
    "CryptoContent",
    "FabricGateway",
    "FabricSetupError",
    "UserIdentity",
    "get_client",
]
