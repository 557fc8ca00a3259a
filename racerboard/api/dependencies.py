"""FastAPI dependencies for dependency injection."""

from typing import Optional

from fastapi import Depends

from racerboard.config import Config, is_address
from racerboard.datasources import ChainClient
from racerboard.services import IdentityService, NonceStore

# Global instances - initialized at app startup
_config: Optional[Config] = None
_chain_client: Optional[ChainClient] = None
_identity_service: Optional[IdentityService] = None
_nonce_store: Optional[NonceStore] = None


def set_dependencies(
    config: Config,
    chain_client: ChainClient,
    identity_service: IdentityService,
    nonce_store: NonceStore,
) -> None:
    """Set the global instances handlers are injected with."""
    global _config, _chain_client, _identity_service, _nonce_store
    _config = config
    _chain_client = chain_client
    _identity_service = identity_service
    _nonce_store = nonce_store


def get_config() -> Config:
    """Get the application configuration."""
    if _config is None:
        raise RuntimeError("Config not initialized. Call set_dependencies() first.")
    return _config


def get_chain_client() -> ChainClient:
    """Get the global chain client for dependency injection."""
    if _chain_client is None:
        raise RuntimeError("ChainClient not initialized. Call set_dependencies() first.")
    return _chain_client


def get_identity_service() -> IdentityService:
    """Get the global identity service (and its shared cache)."""
    if _identity_service is None:
        raise RuntimeError("IdentityService not initialized. Call set_dependencies() first.")
    return _identity_service


def get_nonce_store() -> NonceStore:
    """Get the global nonce store."""
    if _nonce_store is None:
        raise RuntimeError("NonceStore not initialized. Call set_dependencies() first.")
    return _nonce_store


def get_scope_game(
    config: Config = Depends(get_config),
    chain: ChainClient = Depends(get_chain_client),
) -> Optional[str]:
    """
    The designated game address for "game" scope.

    GAME_ADDRESS if configured, otherwise the server signer, which is the
    wallet that submits updatePlayerData for this game.
    """
    if is_address(config.game_address):
        return config.game_address
    signer = chain.signer_address
    return signer if is_address(signer) else None
