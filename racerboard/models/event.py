"""On-chain event models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .quantity import Uint


class ChainLog(BaseModel):
    """
    A decoded log entry as returned by a chain client.

    `args` carries the event's decoded arguments keyed by ABI name.
    """
    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Emitting contract address")
    event: str = Field(description="Event name")
    args: dict[str, Any]
    block_number: int
    transaction_hash: str
    log_index: int = 0


class PlayerEvent(BaseModel):
    """
    A single PlayerDataUpdated event.

    Ordering key is block number, ties broken by log index (emission order).
    """
    model_config = ConfigDict(frozen=True)

    game: str
    player: str
    score_amount: int = Field(ge=0)
    transaction_amount: int = Field(ge=0)
    block_number: int
    transaction_hash: str
    log_index: int = 0

    @classmethod
    def from_log(cls, log: ChainLog) -> "PlayerEvent":
        """Build an event from a decoded PlayerDataUpdated log."""
        args = log.args
        return cls(
            game=str(args["game"]),
            player=str(args["player"]),
            score_amount=int(args.get("scoreAmount") or 0),
            transaction_amount=int(args.get("transactionAmount") or 0),
            block_number=log.block_number,
            transaction_hash=log.transaction_hash,
            log_index=log.log_index,
        )

    @property
    def recency_key(self) -> tuple[int, int]:
        """Sorts newest block first, keeping emission order within a block."""
        return (-self.block_number, self.log_index)


class PlayerEventRow(BaseModel):
    """A raw event row in the player events response."""
    model_config = ConfigDict(populate_by_name=True)

    blockNumber: Uint
    txHash: str
    game: str
    player: str
    scoreAmount: Uint
    transactionAmount: Uint


class PlayerEventsResponse(BaseModel):
    """Player event history, newest first."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    player: str
    fromBlock: Uint
    toBlock: Uint
    chunkSize: Optional[int] = None
    rows: list[PlayerEventRow]
