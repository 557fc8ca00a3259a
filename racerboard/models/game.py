"""Game status and registration models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .quantity import Uint


class GameStatusResponse(BaseModel):
    """Readiness of the server signer and contract configuration."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    signer: Optional[str] = None
    contract: Optional[str] = None
    latestBlock: Uint
    ready: bool


class GameMeta(BaseModel):
    name: str = ""
    image: str = ""
    url: str = ""


class GameRegistrationStatus(BaseModel):
    """On-chain registration record of this game."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    registered: bool
    game: str
    meta: GameMeta


class GameRegisterRequest(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None


class GameRegisterResponse(BaseModel):
    ok: bool = True
    tx: str
    game: str
    name: str
    image: str
    url: str
