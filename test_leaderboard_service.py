"""Tests for the leaderboard, player events and stats services."""

import asyncio

import pytest

from conftest import (
    CONTRACT,
    GAME_A,
    GAME_B,
    FakeChainClient,
    FakeIdentitySource,
    make_log,
    player_address,
)
from racerboard.errors import ChainError, ConfigurationError, InvalidRequestError
from racerboard.services import IdentityService, LeaderboardService, PlayerEventsService, StatsService

P1, P2, P3, P4 = (player_address(i) for i in range(1, 5))


@pytest.fixture
def race_chain() -> FakeChainClient:
    return FakeChainClient(
        head=1275,
        logs=[
            make_log(P1, 100, 5, block=1000),
            make_log(P2, 60, 8, block=1010),
            make_log(P2, 40, 0, block=1200),
            make_log(P3, 90, 20, block=1270),
            make_log(P4, 500, 1, block=1100, game=GAME_B),
            # Outside the scanned window
            make_log(P3, 1000, 1, block=100),
        ],
    )


def leaderboard(chain, identity=None, default_game=GAME_A, contract=CONTRACT):
    return LeaderboardService(chain, identity, contract, default_game=default_game)


def test_game_scope_leaderboard(race_chain):
    source = FakeIdentitySource({P2: {"username": "bee"}})
    identity = IdentityService(source, throttle_delay=0)

    result = asyncio.run(leaderboard(race_chain, identity).get_leaderboard(range_size=276, chunk_size=90))

    assert result.scope == "game"
    assert result.gameAddress == GAME_A
    assert (result.fromBlock, result.toBlock) == (1000, 1275)
    assert [(r.rank, r.player, r.score, r.transactions) for r in result.rows] == [
        (1, P2, 100, 8),
        (2, P1, 100, 5),
        (3, P3, 90, 20),
    ]
    assert [r.username for r in result.rows] == ["bee", None, None]
    assert result.rowsCount == 3
    assert race_chain.log_calls[0] == (1000, 1090, {"game": GAME_A})
    assert len(race_chain.log_calls) == 4


def test_global_scope_counts_all_games(race_chain):
    result = asyncio.run(
        leaderboard(race_chain).get_leaderboard(scope="global", range_size=276, with_names=False)
    )

    assert result.gameAddress is None
    assert result.rows[0].player == P4
    assert all(call[2] is None for call in race_chain.log_calls)


def test_explicit_game_overrides_default(race_chain):
    result = asyncio.run(
        leaderboard(race_chain).get_leaderboard(game=GAME_B, range_size=276, with_names=False)
    )

    assert result.gameAddress == GAME_B
    assert [r.player for r in result.rows] == [P4]


def test_invalid_game_override_falls_back_to_default(race_chain):
    result = asyncio.run(
        leaderboard(race_chain).get_leaderboard(game="0x123", range_size=276, with_names=False)
    )

    assert result.gameAddress == GAME_A


def test_only_top_rows_are_enriched(race_chain):
    source = FakeIdentitySource()
    identity = IdentityService(source, throttle_delay=0)

    result = asyncio.run(
        leaderboard(race_chain, identity).get_leaderboard(scope="global", limit=2, range_size=276)
    )

    assert result.rowsCount == 2
    assert sorted(source.calls) == sorted([P4, P2])


def test_names_disabled_skips_lookups(race_chain):
    source = FakeIdentitySource()
    identity = IdentityService(source, throttle_delay=0)

    result = asyncio.run(
        leaderboard(race_chain, identity).get_leaderboard(range_size=276, with_names=False)
    )

    assert source.calls == []
    assert all(r.username is None for r in result.rows)


def test_identity_outage_does_not_fail_leaderboard(race_chain):
    source = FakeIdentitySource(error=lambda: RuntimeError("upstream down"))
    identity = IdentityService(source, throttle_delay=0)

    result = asyncio.run(leaderboard(race_chain, identity).get_leaderboard(range_size=276))

    assert result.rowsCount == 3
    assert all(r.username is None for r in result.rows)


def test_game_scope_without_game_is_rejected(race_chain):
    with pytest.raises(ConfigurationError, match="GAME scope"):
        asyncio.run(leaderboard(race_chain, default_game=None).get_leaderboard())


def test_missing_contract_is_rejected(race_chain):
    with pytest.raises(ConfigurationError, match="CONTRACT_ADDRESS"):
        asyncio.run(leaderboard(race_chain, contract=None).get_leaderboard())


def test_chunk_failure_fails_leaderboard(race_chain):
    race_chain.fail_on_call = 3

    with pytest.raises(ChainError):
        asyncio.run(leaderboard(race_chain).get_leaderboard(range_size=276))


def test_leaderboard_scan_respects_max_chunks():
    chain = FakeChainClient(head=100_000)

    result = asyncio.run(
        leaderboard(chain).get_leaderboard(range_size=50_000, chunk_size=10, max_chunks=5)
    )

    assert result.fromBlock == 100_000 - 49
    assert len(chain.log_calls) <= 5


def test_player_events_newest_first(race_chain):
    # Listed ahead of its block-mate but emitted after it
    race_chain.logs.insert(0, make_log(P2, 1, 1, block=1200, log_index=3))
    service = PlayerEventsService(race_chain, CONTRACT)

    result = asyncio.run(service.get_player_events(P2.upper().replace("0X", "0x"), range_size=276))

    assert result.player == P2
    assert [(r.blockNumber, r.scoreAmount) for r in result.rows] == [(1200, 40), (1200, 1), (1010, 60)]
    assert all(call[2] == {"player": P2} for call in race_chain.log_calls)


def test_player_events_limit(race_chain):
    service = PlayerEventsService(race_chain, CONTRACT)

    result = asyncio.run(service.get_player_events(P2, limit=1, range_size=276))

    assert [r.blockNumber for r in result.rows] == [1200]


@pytest.mark.parametrize("player", [None, "", "0x1234", "not-an-address"])
def test_player_events_rejects_bad_player(race_chain, player):
    with pytest.raises(InvalidRequestError, match="bad player"):
        asyncio.run(PlayerEventsService(race_chain, CONTRACT).get_player_events(player))


def stats_chain() -> FakeChainClient:
    return FakeChainClient(
        reads={
            "totalScoreOfPlayer": 1234,
            "totalTransactionsOfPlayer": 56,
            "playerDataPerGame": (300, 7),
        },
    )


def test_stats_reads_totals_and_game():
    chain = stats_chain()
    service = StatsService(chain, CONTRACT, game_address=GAME_A)

    result = asyncio.run(service.get_stats(P1))

    assert (result.total.score, result.total.transactions) == (1234, 56)
    assert (result.game.score, result.game.transactions) == (300, 7)
    assert result.game.gameAddress == GAME_A
    assert ("playerDataPerGame", [GAME_A, P1]) in chain.read_calls
    assert chain.log_calls == []


def test_stats_without_game_address():
    chain = stats_chain()

    result = asyncio.run(StatsService(chain, CONTRACT).get_stats(P1))

    assert result.game is None
    assert [name for name, _ in chain.read_calls] == ["totalScoreOfPlayer", "totalTransactionsOfPlayer"]


def test_stats_rejects_bad_params():
    with pytest.raises(InvalidRequestError, match="bad params"):
        asyncio.run(StatsService(stats_chain(), CONTRACT).get_stats("0xnope"))
    with pytest.raises(InvalidRequestError, match="bad params"):
        asyncio.run(StatsService(stats_chain(), None).get_stats(P1))
