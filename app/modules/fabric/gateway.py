"""Fabric client construction and user context handling."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from app.core.config import Settings, settings
from app.modules.fabric.models import ConnectionProfiles, CryptoContent, UserIdentity
from app.modules.fabric.profile import credential_store_path as profile_store_path, load_profiles, materialize_profile

logger = logging.getLogger(__name__)


class FabricSetupError(RuntimeError):
    """Raised when the client, credential store or user context cannot be prepared."""


class ChaincodeCallError(Exception):
    """Raised when a chaincode query or invoke is rejected by the network."""

    def __init__(self, fcn: str, message: str) -> None:
        super().__init__(f"chaincode call '{fcn}' failed: {message}")
        self.fcn = fcn
        self.message = message


class FabricGateway:
    """Wraps an SDK client together with the user every request is signed as."""

    def __init__(
        self,
        *,
        profiles: ConnectionProfiles,
        identity: UserIdentity,
        credential_store_path: Optional[str] = None,
        skip_persistence: bool = True,
    ) -> None:
        self._profiles = profiles
        self._identity = identity
        self._credential_store_path = credential_store_path
        self._skip_persistence = skip_persistence
        self._client: Any = None
        self._user: Any = None
        self._state_store: Any = None
        self._temp_store_dir: Optional[str] = None

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "FabricGateway":
        identity = UserIdentity(
            username=config.FABRIC_USER_NAME,
            org_name=config.FABRIC_ORG_NAME,
            msp_id=config.FABRIC_MSP_ID,
            crypto=CryptoContent(
                private_key=Path(config.FABRIC_PRIVATE_KEY_PATH),
                signed_cert=Path(config.FABRIC_SIGNED_CERT_PATH),
            ),
        )
        profiles = ConnectionProfiles(
            network=Path(config.FABRIC_NETWORK_PROFILE_PATH),
            organization=Path(config.FABRIC_ORG_PROFILE_PATH),
        )
        return cls(
            profiles=profiles,
            identity=identity,
            credential_store_path=config.FABRIC_CREDENTIAL_STORE_PATH,
            skip_persistence=config.FABRIC_SKIP_PERSISTENCE,
        )

    @property
    def identity(self) -> UserIdentity:
        return self._identity

    @property
    def connected(self) -> bool:
        return self._client is not None and self._user is not None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise RuntimeError("FabricGateway is not connected")
        return self._client

    @property
    def user(self) -> Any:
        if self._user is None:
            raise RuntimeError("FabricGateway is not connected")
        return self._user

    async def connect(self) -> "FabricGateway":
        """Build the client from the profiles and set the user context."""
        if self.connected:
            return self
        self._ensure_sdk()
        try:
            profile_path, store_path = await asyncio.to_thread(self._prepare)
            self._build(profile_path, store_path)
        except Exception as exc:
            self._cleanup_store()
            raise FabricSetupError(
                f"Failed to set up Fabric client for user '{self._identity.username}': {exc}"
            ) from exc
        logger.info(
            "Fabric user context set: user=%s msp=%s",
            self._identity.username,
            self._identity.msp_id,
        )
        return self

    def get_channel(self, name: str) -> Any:
        channel = self.client.get_channel(name)
        if channel is None:
            channel = self.client.new_channel(name)
        return channel

    def new_event_hub(self, channel: Any, peer_name: str) -> Any:
        peer = self.client.get_peer(peer_name)
        if peer is None:
            raise FabricSetupError(f"Peer '{peer_name}' is not defined in the connection profile")
        return channel.newChannelEventHub(peer, self.user)

    async def query(
        self,
        *,
        channel_name: str,
        peers: Sequence[str],
        chaincode_id: str,
        fcn: str,
        args: Sequence[str],
    ) -> str:
        try:
            self.get_channel(channel_name)
            return await self.client.chaincode_query(
                requestor=self.user,
                channel_name=channel_name,
                peers=list(peers),
                args=list(args),
                cc_name=chaincode_id,
                fcn=fcn,
            )
        except Exception as exc:
            raise ChaincodeCallError(fcn, str(exc)) from exc

    async def invoke(
        self,
        *,
        channel_name: str,
        peers: Sequence[str],
        chaincode_id: str,
        fcn: str,
        args: Sequence[str],
        wait_for_event: bool = True,
    ) -> str:
        try:
            self.get_channel(channel_name)
            return await self.client.chaincode_invoke(
                requestor=self.user,
                channel_name=channel_name,
                peers=list(peers),
                args=list(args),
                cc_name=chaincode_id,
                fcn=fcn,
                wait_for_event=wait_for_event,
            )
        except Exception as exc:
            raise ChaincodeCallError(fcn, str(exc)) from exc

    def close(self) -> None:
        self._client = None
        self._user = None
        self._state_store = None
        self._cleanup_store()

    def _ensure_sdk(self) -> None:
        try:
            import hfc.fabric  # noqa: F401
        except ModuleNotFoundError as exc:  # pragma: no cover - dependency guard
            raise RuntimeError(
                "fabric-sdk-py package is required to connect to a Fabric network."
                " Install it with 'pip install fabric-sdk-py'."
            ) from exc

    def _prepare(self) -> Tuple[Path, str]:
        """File work that can run off the event loop: profiles, store directory, credential checks."""
        profile = load_profiles(self._profiles)
        store_path = self._resolve_store_path(profile)

        crypto = self._identity.crypto
        for label, path in (("private key", crypto.private_key), ("signed certificate", crypto.signed_cert)):
            if not path.is_file():
                raise FileNotFoundError(f"{label} not found: {path}")

        return materialize_profile(profile), store_path

    def _build(self, profile_path: Path, store_path: str) -> None:
        # The SDK binds its gRPC channels to the current event loop, so this runs on the loop.
        from hfc.fabric import Client
        from hfc.fabric.user import create_user
        from hfc.util.keyvaluestore import FileKeyValueStore

        try:
            client = Client(net_profile=str(profile_path))
        finally:
            profile_path.unlink(missing_ok=True)

        state_store = FileKeyValueStore(store_path)
        crypto = self._identity.crypto
        user = create_user(
            name=self._identity.username,
            org=self._identity.org_name,
            state_store=state_store,
            msp_id=self._identity.msp_id,
            key_path=str(crypto.private_key),
            cert_path=str(crypto.signed_cert),
        )

        self._client = client
        self._state_store = state_store
        self._user = user

    def _resolve_store_path(self, profile: dict) -> str:
        if self._skip_persistence:
            self._temp_store_dir = tempfile.mkdtemp(prefix="fabric-kvs-")
            return self._temp_store_dir
        path = self._credential_store_path or profile_store_path(profile)
        if not path:
            raise FabricSetupError("No credential store path configured and none found in the profile")
        Path(path).mkdir(parents=True, exist_ok=True)
        return path

    def _cleanup_store(self) -> None:
        if self._temp_store_dir is not None:
            shutil.rmtree(self._temp_store_dir, ignore_errors=True)
            self._temp_store_dir = None


async def get_client(config: Settings = settings) -> FabricGateway:
    """Build a gateway from settings and connect it."""
    gateway = FabricGateway.from_settings(config)
    return await gateway.connect()
