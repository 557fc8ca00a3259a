"""Player stats models read from contract state."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .quantity import Uint


class TotalStats(BaseModel):
    score: Uint
    transactions: Uint


class GameStats(BaseModel):
    score: Uint
    transactions: Uint
    gameAddress: str


class StatsResponse(BaseModel):
    """
    Cumulative on-chain totals for a player.

    `game` is present only when a scope game address is configured.
    """
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    player: str
    total: TotalStats
    game: Optional[GameStats] = None
