"""Leaderboard models for aggregation and API responses."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .quantity import Uint

Scope = Literal["game", "global"]


class PlayerAggregate(BaseModel):
    """
    Running totals for one player over a scanned block range.

    Derived per request, never persisted.
    """
    player: str = Field(description="Player address as first seen on chain")
    total_score: int = Field(default=0, ge=0)
    total_transactions: int = Field(default=0, ge=0)

    @property
    def rank_key(self) -> tuple[int, int]:
        return (self.total_score, self.total_transactions)


class LeaderboardRow(BaseModel):
    """
    A single entry in the leaderboard.
    """
    model_config = ConfigDict(populate_by_name=True)

    rank: int
    player: str = Field(
        description="Player address as first seen on chain; compare case-insensitively"
    )
    username: Optional[str] = Field(default=None, description="Resolved display name, None if unknown")
    score: Uint
    transactions: Uint


class LeaderboardResponse(BaseModel):
    """Ranked leaderboard with the scanned block window."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    scope: Scope
    gameAddress: Optional[str] = Field(default=None, description="Game filter, None for global scope")
    fromBlock: Uint
    toBlock: Uint
    chunkSize: int
    rowsCount: int
    rows: list[LeaderboardRow]
