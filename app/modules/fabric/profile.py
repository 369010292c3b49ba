"""Connection profile loading.

Profiles are authored in YAML and split in two files: the network profile
(peers, orderers, CAs, channels) and the organization profile (the ``client``
section with the credential store location). The Python SDK reads a single
JSON profile from disk, so both files are merged and written out as JSON.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from app.modules.fabric.models import ConnectionProfiles

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_profile(path: PathLike) -> Dict[str, Any]:
    profile_path = Path(path)
    if not profile_path.is_file():
        raise FileNotFoundError(f"Connection profile not found: {profile_path}")

    with profile_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Connection profile {profile_path} must be a mapping, got {type(data).__name__}")
    return data


def merge_profiles(network: Dict[str, Any], organization: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two profiles; values from ``organization`` win."""
    merged: Dict[str, Any] = dict(network)
    for key, value in organization.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_profiles(current, value)
        else:
            merged[key] = value
    return merged


def load_profiles(profiles: ConnectionProfiles) -> Dict[str, Any]:
    return merge_profiles(load_profile(profiles.network), load_profile(profiles.organization))


def credential_store_path(profile: Dict[str, Any]) -> Optional[str]:
    """Return ``client.credentialStore.path`` from a merged profile, if any."""
    client_section = profile.get("client") or {}
    store = client_section.get("credentialStore") or {}
    path = store.get("path")
    return str(path) if path else None


def materialize_profile(profile: Dict[str, Any]) -> Path:
    """Write a merged profile to a temporary JSON file and return its path."""
    with tempfile.NamedTemporaryFile("w", delete=False, suffix=".json", encoding="utf-8") as tmp_file:
        json.dump(profile, tmp_file)
        logger.debug("Merged connection profiles into %s", tmp_file.name)
        return Path(tmp_file.name)
