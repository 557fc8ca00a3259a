"""API routes for the racing game back-end."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from racerboard.config import Config
from racerboard.datasources import ChainClient
from racerboard.models import (
    GameRegisterRequest,
    GameRegisterResponse,
    GameRegistrationStatus,
    GameStatusResponse,
    LeaderboardResponse,
    NonceResponse,
    PlayerEventsResponse,
    ScoreSubmission,
    ScoreSubmitResponse,
    StatsResponse,
    UsernameCheckResponse,
)
from racerboard.services import (
    GameService,
    IdentityService,
    LeaderboardService,
    NonceStore,
    PlayerEventsService,
    ScoreService,
    StatsService,
)
from racerboard.services.range_planner import clamp_int
from racerboard.services.validation import require_address
from .dependencies import (
    get_chain_client,
    get_config,
    get_identity_service,
    get_nonce_store,
    get_scope_game,
)

router = APIRouter(prefix="/api")
game_router = APIRouter(prefix="/game")

EXAMPLE_ADDRESS = "0x0e09b56ef137f417e424f1265425e93bfff77e17"


def _flag(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no")


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    scope: Optional[str] = Query(
        "game",
        description="Ranking scope: game (this game only) or global (all games)",
        example="game"
    ),
    limit: Optional[str] = Query(None, description="Rows to return, 1-100 (default 20)"),
    range: Optional[str] = Query(
        None,
        description="Trailing blocks to scan, 100-50000 (default 10000)"
    ),
    chunk: Optional[str] = Query(None, description="Blocks per log query, 10-100 (default 90)"),
    maxChunks: Optional[str] = Query(None, description="Max log queries, 1-2000 (default 200)"),
    withNames: Optional[str] = Query(None, description="Resolve usernames (0 to disable)"),
    game: Optional[str] = Query(
        None,
        description="Game address override for game scope",
        example=EXAMPLE_ADDRESS
    ),
    chain: ChainClient = Depends(get_chain_client),
    identity: IdentityService = Depends(get_identity_service),
    config: Config = Depends(get_config),
    scope_game: Optional[str] = Depends(get_scope_game),
) -> LeaderboardResponse:
    """
    Rank players by score (then transactions) over recent PlayerDataUpdated events.

    Returns: scope, gameAddress, fromBlock, toBlock, rows[rank, player, username, score, transactions]
    """
    service = LeaderboardService(
        chain,
        identity,
        config.contract_address,
        default_game=scope_game,
        name_concurrency=config.identity_concurrency,
    )
    return await service.get_leaderboard(
        scope="global" if scope == "global" else "game",
        game=game,
        limit=clamp_int(limit, 20, 1, 100),
        range_size=clamp_int(range, 10_000, 100, 50_000),
        chunk_size=clamp_int(chunk, 90, 10, 100),
        max_chunks=clamp_int(maxChunks, 200, 1, 2_000),
        with_names=_flag(withNames),
    )


@router.get("/player/events", response_model=PlayerEventsResponse)
async def get_player_events(
    player: Optional[str] = Query(
        None,
        description="Player address",
        example=EXAMPLE_ADDRESS
    ),
    limit: Optional[str] = Query(None, description="Rows to return, 1-100 (default 20)"),
    range: Optional[str] = Query(
        None,
        description="Trailing blocks to scan, 100-50000 (default 8000)"
    ),
    chunk: Optional[str] = Query(None, description="Blocks per log query, 10-100 (default 90)"),
    maxChunks: Optional[str] = Query(None, description="Max log queries, 1-2000 (default 200)"),
    chain: ChainClient = Depends(get_chain_client),
    config: Config = Depends(get_config),
) -> PlayerEventsResponse:
    """
    Get a player's recent score events, newest first.

    Returns: rows[blockNumber, txHash, game, player, scoreAmount, transactionAmount]
    """
    service = PlayerEventsService(chain, config.contract_address)
    return await service.get_player_events(
        player=player,
        limit=clamp_int(limit, 20, 1, 100),
        range_size=clamp_int(range, 8000, 100, 50_000),
        chunk_size=clamp_int(chunk, 90, 10, 100),
        max_chunks=clamp_int(maxChunks, 200, 1, 2_000),
    )


@router.get("/get-stats", response_model=StatsResponse, response_model_exclude_none=True)
async def get_stats(
    player: Optional[str] = Query(
        None,
        description="Player address",
        example=EXAMPLE_ADDRESS
    ),
    chain: ChainClient = Depends(get_chain_client),
    config: Config = Depends(get_config),
    scope_game: Optional[str] = Depends(get_scope_game),
) -> StatsResponse:
    """
    Get a player's cumulative totals from contract state.

    Returns: total{score, transactions}, game{score, transactions, gameAddress}
    """
    service = StatsService(chain, config.contract_address, game_address=scope_game)
    return await service.get_stats(player)


@router.get("/check-username", response_model=UsernameCheckResponse)
async def check_username(
    wallet: Optional[str] = Query(
        None,
        description="Wallet address",
        example=EXAMPLE_ADDRESS
    ),
    identity: IdentityService = Depends(get_identity_service),
) -> UsernameCheckResponse:
    """
    Check whether a wallet has a username registered, bypassing the cache.

    Returns: hasUsername, username
    """
    wallet = require_address(wallet, "wallet required or invalid")
    return await identity.check_username(wallet)


@router.get("/score/nonce", response_model=NonceResponse)
async def get_score_nonce(
    wallet: Optional[str] = Query(
        None,
        description="Wallet address",
        example=EXAMPLE_ADDRESS
    ),
    chain: ChainClient = Depends(get_chain_client),
    nonces: NonceStore = Depends(get_nonce_store),
    config: Config = Depends(get_config),
) -> NonceResponse:
    """
    Issue a one-time nonce and the message the player signs to submit a score.

    Returns: nonce, issuedAt, ttlMs, message
    """
    service = ScoreService(chain, nonces, config.contract_address, nonce_ttl_ms=config.nonce_ttl_ms)
    return service.issue_nonce(wallet)


@router.post("/score/submit", response_model=ScoreSubmitResponse)
async def submit_score(
    body: ScoreSubmission,
    chain: ChainClient = Depends(get_chain_client),
    nonces: NonceStore = Depends(get_nonce_store),
    config: Config = Depends(get_config),
) -> ScoreSubmitResponse:
    """
    Verify a signed score submission and record it on chain.

    Returns: tx
    """
    service = ScoreService(chain, nonces, config.contract_address, nonce_ttl_ms=config.nonce_ttl_ms)
    return await service.submit(body)


@game_router.get("/status", response_model=GameStatusResponse)
async def get_game_status(
    chain: ChainClient = Depends(get_chain_client),
    config: Config = Depends(get_config),
) -> GameStatusResponse:
    """Report whether the signer and contract are configured, plus the chain head."""
    return await GameService(chain, config).get_status()


@game_router.get("/register", response_model=GameRegistrationStatus)
async def get_game_registration(
    chain: ChainClient = Depends(get_chain_client),
    config: Config = Depends(get_config),
) -> GameRegistrationStatus:
    """Read this game's registry entry."""
    return await GameService(chain, config).get_registration()


@game_router.post("/register", response_model=GameRegisterResponse)
async def register_game(
    body: Optional[GameRegisterRequest] = Body(None),
    chain: ChainClient = Depends(get_chain_client),
    config: Config = Depends(get_config),
) -> GameRegisterResponse:
    """Register the server signer as a game in the registry contract."""
    return await GameService(chain, config).register(body)
