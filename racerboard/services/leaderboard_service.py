"""Leaderboard service ranking players from on-chain PlayerDataUpdated events."""

import logging
from typing import Optional

from racerboard.config import is_address
from racerboard.datasources import ChainClient
from racerboard.errors import ConfigurationError
from racerboard.models import LeaderboardResponse, LeaderboardRow, Scope
from .aggregation import aggregate_events, rank_players
from .identity_service import DEFAULT_CONCURRENCY, IdentityService
from .log_fetcher import fetch_player_events
from .range_planner import plan_window
from .validation import require_contract

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Service for generating leaderboards from a sliding window of chain events."""

    def __init__(
        self,
        chain: ChainClient,
        identity: Optional[IdentityService],
        contract_address: Optional[str],
        default_game: Optional[str] = None,
        name_concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.chain = chain
        self.identity = identity
        self.contract_address = contract_address
        self.default_game = default_game
        self.name_concurrency = name_concurrency

    def resolve_game_address(self, scope: Scope, game: Optional[str]) -> Optional[str]:
        """
        Pick the game to filter on.

        An explicit valid `game` wins, otherwise the configured game. Global
        scope never filters.
        """
        if scope != "game":
            return None
        game_address = game if is_address(game) else self.default_game
        if not is_address(game_address):
            raise ConfigurationError("GAME scope requires server signer or ?game=")
        return game_address

    async def get_leaderboard(
        self,
        scope: Scope = "game",
        game: Optional[str] = None,
        limit: int = 20,
        range_size: int = 10_000,
        chunk_size: int = 90,
        max_chunks: int = 200,
        with_names: bool = True,
    ) -> LeaderboardResponse:
        """
        Rank players by total score over the last `range_size` blocks.

        Args:
            scope: "game" to count one game's events, "global" for all games
            game: Optional game address override for game scope
            limit: Number of rows to return
            range_size: Trailing blocks to scan
            chunk_size: Blocks per log query
            max_chunks: Upper bound on log queries
            with_names: Resolve usernames for the returned rows

        Returns:
            LeaderboardResponse with rows ranked 1..n
        """
        contract = require_contract(self.contract_address)
        game_address = self.resolve_game_address(scope, game)

        latest = await self.chain.get_block_number()
        window = plan_window(latest, range_size, chunk_size, max_chunks)

        events = await fetch_player_events(
            self.chain,
            contract,
            window.from_block,
            window.to_block,
            window.chunk_size,
            arg_filter={"game": game_address} if game_address else None,
        )

        aggregates = aggregate_events(events, scope_game=game_address)
        top = rank_players(aggregates, limit)

        # Only the rows being returned are enriched
        names: dict[str, Optional[str]] = {}
        if with_names and top and self.identity is not None:
            names = await self.identity.resolve(
                (agg.player for agg in top),
                concurrency=self.name_concurrency,
            )

        rows = [
            LeaderboardRow(
                rank=i + 1,
                player=agg.player,
                username=names.get(agg.player.lower()),
                score=agg.total_score,
                transactions=agg.total_transactions,
            )
            for i, agg in enumerate(top)
        ]

        logger.info(
            f"Leaderboard scope={scope} game={game_address} "
            f"blocks=[{window.from_block},{window.to_block}] "
            f"events={len(events)} players={len(aggregates)} rows={len(rows)}"
        )

        return LeaderboardResponse(
            scope=scope,
            gameAddress=game_address,
            fromBlock=window.from_block,
            toBlock=window.to_block,
            chunkSize=window.chunk_size,
            rowsCount=len(rows),
            rows=rows,
        )
