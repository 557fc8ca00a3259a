"""Player event history service."""

from typing import Optional

from racerboard.datasources import ChainClient
from racerboard.models import PlayerEventRow, PlayerEventsResponse
from .log_fetcher import fetch_player_events
from .range_planner import plan_window
from .validation import require_address, require_contract


class PlayerEventsService:
    """Service for a single player's raw PlayerDataUpdated history."""

    def __init__(self, chain: ChainClient, contract_address: Optional[str]):
        self.chain = chain
        self.contract_address = contract_address

    async def get_player_events(
        self,
        player: Optional[str],
        limit: int = 20,
        range_size: int = 8000,
        chunk_size: int = 90,
        max_chunks: int = 200,
    ) -> PlayerEventsResponse:
        """
        Get a player's most recent events, newest first.

        The log query filters on the indexed player argument, so only this
        player's events are transferred.
        """
        contract = require_contract(self.contract_address)
        player = require_address(player, "bad player")

        latest = await self.chain.get_block_number()
        window = plan_window(latest, range_size, chunk_size, max_chunks)

        events = await fetch_player_events(
            self.chain,
            contract,
            window.from_block,
            window.to_block,
            window.chunk_size,
            arg_filter={"player": player},
        )

        events.sort(key=lambda e: e.recency_key)

        rows = [
            PlayerEventRow(
                blockNumber=e.block_number,
                txHash=e.transaction_hash,
                game=e.game,
                player=e.player,
                scoreAmount=e.score_amount,
                transactionAmount=e.transaction_amount,
            )
            for e in events[:limit]
        ]

        return PlayerEventsResponse(
            player=player,
            fromBlock=window.from_block,
            toBlock=window.to_block,
            chunkSize=window.chunk_size,
            rows=rows,
        )
