from .leaderboard_service import LeaderboardService
from .player_events_service import PlayerEventsService
from .stats_service import StatsService
from .identity_service import IdentityService, IdentityCache
from .nonce_store import NonceStore
from .score_service import ScoreService, ScorePolicy
from .game_service import GameService

__all__ = [
    "LeaderboardService",
    "PlayerEventsService",
    "StatsService",
    "IdentityService",
    "IdentityCache",
    "NonceStore",
    "ScoreService",
    "ScorePolicy",
    "GameService",
]
