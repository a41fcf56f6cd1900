"""
Configuration management for the LUIS client.

Reads credentials, feature flags and the service endpoint from
environment variables and .env files.
"""

import os
import logging
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("config")

# Load .env file if available
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
    logger.debug("Loaded .env file from %s", env_path)
else:
    # Also try loading from current directory
    load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def mask_key(key: Optional[str]) -> str:
    """Show only the last four characters of a subscription key."""
    if not key:
        return "(not set)"
    return "*" * max(len(key) - 4, 0) + key[-4:]


class Config:
    """
    Centralized configuration for the LUIS client.
    
    Reads from environment variables with sensible defaults.
    """
    
    # Credentials
    APP_ID: Optional[str] = os.getenv("LUIS_APP_ID", None)
    APP_KEY: Optional[str] = os.getenv("LUIS_APP_KEY", None)
    
    # Feature flags
    PREVIEW: bool = _flag("LUIS_PREVIEW")
    VERBOSE: bool = _flag("LUIS_VERBOSE")
    
    # Service
    ENDPOINT: str = os.getenv("LUIS_ENDPOINT", "https://api.projectoxford.ai/luis/v1/application")
    TIMEOUT: float = float(os.getenv("LUIS_TIMEOUT", "30.0"))
    
    @classmethod
    def client_config(cls, **overrides) -> dict:
        """Initialization data for create_client, with non-None OVERRIDES applied."""
        data = {
            "app_id": cls.APP_ID,
            "app_key": cls.APP_KEY,
            "preview": cls.PREVIEW,
            "verbose": cls.VERBOSE,
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return data
    
    @classmethod
    def get_client(cls, **overrides):
        """
        Build a client from the current configuration.
        
        Returns:
            LUISClient bound to APP_ID / APP_KEY and the feature flags
        
        Raises:
            ConfigError: If credentials are missing or malformed
        """
        from luis.core.client import create_client
        data = cls.client_config(**overrides)
        logger.info(
            "Using LUIS endpoint: %s (preview: %s, verbose: %s, timeout: %.1fs)",
            cls.ENDPOINT, data["preview"], data["verbose"], cls.TIMEOUT
        )
        return create_client(data, endpoint=cls.ENDPOINT, timeout=cls.TIMEOUT)
    
    @classmethod
    def print_config(cls):
        """Print current configuration (useful for debugging)."""
        print("\nLUIS Client Configuration:")
        print(f"  Application Id: {cls.APP_ID or '(not set)'}")
        print(f"  Subscription Key: {mask_key(cls.APP_KEY)}")
        print(f"  Endpoint: {cls.ENDPOINT}")
        print(f"  Preview: {'enabled' if cls.PREVIEW else 'disabled'}")
        print(f"  Verbose: {'enabled' if cls.VERBOSE else 'disabled'}")
        print(f"  Timeout: {cls.TIMEOUT}s")
        print()
