"""Games ID username service data source."""

import logging
import time
from typing import Any, Optional

import httpx

from .base import IdentitySource

logger = logging.getLogger(__name__)

# API constants
GAMES_ID_API_URL = "https://monad-games-id-site.vercel.app"
CHECK_WALLET_ENDPOINT = "/api/check-wallet"
REQUEST_TIMEOUT = 5.0


class GamesIdSource(IdentitySource):
    """
    Identity source backed by the Games ID check-wallet endpoint.

    Limitations:
    - The response shape is not documented and has varied over time
    - No retries; identity lookups are best-effort
    """

    def __init__(self, api_url: str = GAMES_ID_API_URL):
        """
        Initialize the Games ID source.

        Args:
            api_url: Base URL of the Games ID site
        """
        self.api_url = api_url
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Accept": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        return self._client

    async def fetch_wallet_profile(self, wallet: str) -> Any:
        """
        Fetch the check-wallet record for a wallet.

        A cache-busting timestamp is appended so intermediate caches never
        serve a stale "no username" answer.
        """
        client = await self._get_client()
        params = {"wallet": wallet, "t": int(time.time() * 1000)}

        try:
            response = await client.get(CHECK_WALLET_ENDPOINT, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.debug(f"HTTP error {e.response.status_code} for wallet {wallet}")
            raise
        except httpx.HTTPError as e:
            logger.debug(f"Request failed for wallet {wallet}: {e}")
            raise

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
