"""Score authorization and submission models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NonceRecord(BaseModel):
    """
    A one-time score authorization nonce issued to a wallet.

    Lives only in process memory and expires after `ttlMs`.
    """
    model_config = ConfigDict(populate_by_name=True)

    wallet: str
    nonce: str
    issuedAt: int = Field(description="Issue time in milliseconds")
    ttlMs: int
    used: bool = False

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.issuedAt + self.ttlMs


class NonceResponse(BaseModel):
    """Nonce plus the message the player signs with their wallet."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    wallet: str
    nonce: str
    issuedAt: int
    ttlMs: int
    message: str


class ScoreSubmission(BaseModel):
    """Signed score submission body."""
    model_config = ConfigDict(populate_by_name=True)

    wallet: str = ""
    scoreAmount: int = Field(default=0, ge=0)
    transactionAmount: int = Field(default=0, ge=0)
    nonce: str = ""
    message: str = ""
    signature: str = ""
    msPlayed: float = Field(default=0, description="Client-reported session length in milliseconds")


class ScoreSubmitResponse(BaseModel):
    ok: bool = True
    tx: str = Field(description="Transaction hash of the updatePlayerData call")
