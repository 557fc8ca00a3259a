"""Player stats service reading cumulative totals from contract state."""

import asyncio
from typing import Optional

from racerboard.config import is_address
from racerboard.datasources import ChainClient
from racerboard.errors import InvalidRequestError
from racerboard.models import GameStats, StatsResponse, TotalStats


class StatsService:
    """
    Service for a player's on-chain totals.

    Uses point reads of contract storage rather than replaying logs, so the
    numbers cover the whole chain history.
    """

    def __init__(
        self,
        chain: ChainClient,
        contract_address: Optional[str],
        game_address: Optional[str] = None,
    ):
        self.chain = chain
        self.contract_address = contract_address
        self.game_address = game_address

    async def get_stats(self, player: Optional[str]) -> StatsResponse:
        """Read global and per-game totals for a player concurrently."""
        player = (player or "").strip().lower()
        if not is_address(player) or not is_address(self.contract_address):
            raise InvalidRequestError("bad params")

        total, game = await asyncio.gather(
            self._read_total(player),
            self._read_game(player),
        )

        return StatsResponse(player=player, total=total, game=game)

    async def _read_total(self, player: str) -> TotalStats:
        score, transactions = await asyncio.gather(
            self.chain.read_contract(self.contract_address, "totalScoreOfPlayer", [player]),
            self.chain.read_contract(self.contract_address, "totalTransactionsOfPlayer", [player]),
        )
        return TotalStats(score=int(score), transactions=int(transactions))

    async def _read_game(self, player: str) -> Optional[GameStats]:
        if not is_address(self.game_address):
            return None
        score, transactions = await self.chain.read_contract(
            self.contract_address,
            "playerDataPerGame",
            [self.game_address, player],
        )
        return GameStats(
            score=int(score),
            transactions=int(transactions),
            gameAddress=self.game_address,
        )
