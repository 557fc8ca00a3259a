"""Block range planning for chunked event log scans."""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BlockWindow:
    """An inclusive block range to scan and the chunk size to scan it with."""
    from_block: int
    to_block: int
    chunk_size: int

    @property
    def block_count(self) -> int:
        return max(self.to_block - self.from_block + 1, 0)

    @property
    def chunk_count(self) -> int:
        """Chunks of `chunk_size` blocks needed to cover the window."""
        return math.ceil(self.block_count / self.chunk_size)


def clamp_int(value: Optional[object], default: int, lo: int, hi: int) -> int:
    """
    Parse a request parameter as an int clamped to [lo, hi].

    Missing, non-numeric or non-finite input falls back to `default`
    instead of raising. Fractions are truncated toward zero.
    """
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return max(lo, min(int(number), hi))


def plan_window(
    latest_block: int,
    requested_range: int,
    chunk_size: int,
    max_chunks: int,
) -> BlockWindow:
    """
    Plan the "last N blocks" window ending at the chain head.

    If covering the requested range would take more than `max_chunks`
    chunk queries, the window is shrunk from the left so it fits exactly
    `chunk_size * max_chunks` blocks. Coverage is traded for a bounded
    number of RPC calls.

    Args:
        latest_block: Current chain head
        requested_range: Number of trailing blocks requested
        chunk_size: Blocks per log query
        max_chunks: Upper bound on log queries

    Returns:
        BlockWindow with from_block >= 0 and to_block == latest_block
    """
    to_block = max(latest_block, 0)
    requested_range = max(requested_range, 1)
    chunk_size = max(chunk_size, 1)
    max_chunks = max(max_chunks, 1)

    from_block = max(0, to_block - requested_range + 1)
    window = BlockWindow(from_block, to_block, chunk_size)

    if window.chunk_count > max_chunks:
        from_block = max(0, to_block - (chunk_size * max_chunks - 1))
        window = BlockWindow(from_block, to_block, chunk_size)

    return window
