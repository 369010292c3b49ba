import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import Optional

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseSettings):
    # API Settings
    API_VERSION: str = os.getenv("API_VERSION", "v1")
    API_PREFIX: str = os.getenv("API_PREFIX", f"/api/{API_VERSION}")
    DEBUG: bool = _env_flag("DEBUG", "False")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Connection profiles (network-level and organization-level)
    FABRIC_NETWORK_PROFILE_PATH: str = os.getenv("FABRIC_NETWORK_PROFILE_PATH", "profiles/network-config.yaml")
    FABRIC_ORG_PROFILE_PATH: str = os.getenv("FABRIC_ORG_PROFILE_PATH", "profiles/org1.yaml")

    # Org & User
    FABRIC_USER_NAME: str = os.getenv("FABRIC_USER_NAME", "my")
    FABRIC_ORG_NAME: str = os.getenv("FABRIC_ORG_NAME", "org1.example.com")
    FABRIC_MSP_ID: str = os.getenv("FABRIC_MSP_ID", "Org1MSP")
    FABRIC_PEER_NAME: str = os.getenv("FABRIC_PEER_NAME", "peer0.org1.example.com")
    FABRIC_CHANNEL_NAME: str = os.getenv("FABRIC_CHANNEL_NAME", "mychannel")

    # Credentials. Paths may contain spaces, strip surrounding quotes like other secrets.
    FABRIC_PRIVATE_KEY_PATH: str = (os.getenv("FABRIC_PRIVATE_KEY_PATH", "") or "").strip().strip('"').strip("'")
    FABRIC_SIGNED_CERT_PATH: str = (os.getenv("FABRIC_SIGNED_CERT_PATH", "") or "").strip().strip('"').strip("'")
    FABRIC_CREDENTIAL_STORE_PATH: Optional[str] = os.getenv("FABRIC_CREDENTIAL_STORE_PATH") or None
    FABRIC_SKIP_PERSISTENCE: bool = _env_flag("FABRIC_SKIP_PERSISTENCE", "True")

    # Chaincode & events
    FABRIC_CHAINCODE_ID: str = os.getenv("FABRIC_CHAINCODE_ID", "erc20-transfer")
    FABRIC_CHAINCODE_EVENT: str = os.getenv("FABRIC_CHAINCODE_EVENT", "transferEvent")
    FABRIC_EVENT_FULL_BLOCK: bool = _env_flag("FABRIC_EVENT_FULL_BLOCK", "True")
    FABRIC_EVENT_START_BLOCK: Optional[str] = os.getenv("FABRIC_EVENT_START_BLOCK") or None
    FABRIC_LISTENER_ENABLED: bool = _env_flag("FABRIC_LISTENER_ENABLED", "True")
    FABRIC_INVOKE_WAIT_FOR_EVENT: bool = _env_flag("FABRIC_INVOKE_WAIT_FOR_EVENT", "True")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

# Create settings instance
settings = Settings()
