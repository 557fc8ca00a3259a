from .quantity import Uint
from .event import ChainLog, PlayerEvent, PlayerEventRow, PlayerEventsResponse
from .leaderboard import (
    Scope,
    PlayerAggregate,
    LeaderboardRow,
    LeaderboardResponse,
)
from .stats import TotalStats, GameStats, StatsResponse
from .identity import LookupStatus, UsernameLookup, UsernameCheckResponse
from .score import (
    NonceRecord,
    NonceResponse,
    ScoreSubmission,
    ScoreSubmitResponse,
)
from .game import (
    GameStatusResponse,
    GameMeta,
    GameRegistrationStatus,
    GameRegisterRequest,
    GameRegisterResponse,
)

__all__ = [
    "Uint",
    "ChainLog",
    "PlayerEvent",
    "PlayerEventRow",
    "PlayerEventsResponse",
    "Scope",
    "PlayerAggregate",
    "LeaderboardRow",
    "LeaderboardResponse",
    "TotalStats",
    "GameStats",
    "StatsResponse",
    "LookupStatus",
    "UsernameLookup",
    "UsernameCheckResponse",
    "NonceRecord",
    "NonceResponse",
    "ScoreSubmission",
    "ScoreSubmitResponse",
    "GameStatusResponse",
    "GameMeta",
    "GameRegistrationStatus",
    "GameRegisterRequest",
    "GameRegisterResponse",
]
