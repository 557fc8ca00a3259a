"""Chunked PlayerDataUpdated log fetching."""

import logging
from typing import Any, Iterator, Optional

from racerboard.datasources import ChainClient
from racerboard.datasources.abi import PLAYER_DATA_UPDATED
from racerboard.models import PlayerEvent

logger = logging.getLogger(__name__)


def iter_chunks(from_block: int, to_block: int, chunk_size: int) -> Iterator[tuple[int, int]]:
    """
    Yield inclusive (start, end) sub-ranges covering [from_block, to_block].

    Each chunk ends at start + chunk_size (clipped to to_block) and the next
    one begins right after it.
    """
    start = from_block
    while start <= to_block:
        end = min(start + chunk_size, to_block)
        yield start, end
        start = end + 1


async def fetch_player_events(
    client: ChainClient,
    contract_address: str,
    from_block: int,
    to_block: int,
    chunk_size: int,
    arg_filter: Optional[dict[str, Any]] = None,
) -> list[PlayerEvent]:
    """
    Fetch PlayerDataUpdated events chunk by chunk.

    Chunks are queried one after another so provider load stays predictable
    and results keep chunk order. Any chunk failure aborts the whole fetch;
    partial results are never returned.

    Args:
        client: Chain client to query
        contract_address: Games registry contract
        from_block: First block (inclusive)
        to_block: Last block (inclusive)
        chunk_size: Chunk step, see iter_chunks
        arg_filter: Optional indexed argument filter, e.g. {"game": "0x..."}

    Returns:
        Events in source order (not sorted)
    """
    events: list[PlayerEvent] = []
    chunks = 0

    for start, end in iter_chunks(from_block, to_block, chunk_size):
        logs = await client.get_logs(
            contract_address,
            PLAYER_DATA_UPDATED,
            start,
            end,
            arg_filter,
        )
        events.extend(PlayerEvent.from_log(log) for log in logs)
        chunks += 1

    logger.debug(
        f"Scanned [{from_block},{to_block}] in {chunks} chunks, "
        f"{len(events)} events (filter={arg_filter})"
    )
    return events
