from .base import ChainClient, IdentitySource
from .evm import Web3ChainClient
from .identity import GamesIdSource

__all__ = [
    "ChainClient",
    "IdentitySource",
    "Web3ChainClient",
    "GamesIdSource",
]
