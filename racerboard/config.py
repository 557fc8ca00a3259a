"""Application configuration."""

import os
import re
from dataclasses import dataclass
from typing import Optional

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_address(value: object) -> bool:
    """Check for the 0x-prefixed 40 hex digit address form."""
    return isinstance(value, str) and bool(ADDRESS_RE.match(value))


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Chain
    rpc_url: str = "https://testnet-rpc.monad.xyz"
    chain_id: int = 10143
    contract_address: Optional[str] = None
    server_private_key: Optional[str] = None
    # Overrides the signer address as the "game" scope when set
    game_address: Optional[str] = None

    # Identity upstream
    identity_api_url: str = "https://monad-games-id-site.vercel.app"
    identity_concurrency: int = 6
    identity_throttle_ms: int = 10

    # Score authorization
    nonce_ttl_ms: int = 2 * 60 * 1000

    # Game registration metadata
    game_name: str = "Monad Racer"
    game_image: str = ""
    game_url: str = ""

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            rpc_url=os.getenv("MONAD_RPC_URL", "https://testnet-rpc.monad.xyz"),
            chain_id=int(os.getenv("MONAD_CHAIN_ID", "10143")),
            contract_address=os.getenv("CONTRACT_ADDRESS") or None,
            server_private_key=os.getenv("SERVER_PRIVATE_KEY") or None,
            game_address=os.getenv("GAME_ADDRESS") or None,
            identity_api_url=os.getenv(
                "IDENTITY_API_URL",
                "https://monad-games-id-site.vercel.app"
            ),
            identity_concurrency=int(os.getenv("IDENTITY_CONCURRENCY", "6")),
            identity_throttle_ms=int(os.getenv("IDENTITY_THROTTLE_MS", "10")),
            nonce_ttl_ms=int(os.getenv("NONCE_TTL_MS", str(2 * 60 * 1000))),
            game_name=os.getenv("GAME_NAME", "Monad Racer"),
            game_image=os.getenv("GAME_IMAGE", ""),
            game_url=os.getenv("GAME_URL", ""),
        )
