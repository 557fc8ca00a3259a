"""HTTP-level tests for the API routes and the error envelope."""

import pytest
from fastapi.testclient import TestClient

from conftest import (
    CONTRACT,
    GAME_A,
    SIGNER,
    FakeChainClient,
    FakeIdentitySource,
    make_log,
    player_address,
)
from racerboard.app import create_app
from racerboard.config import Config

P1, P2 = player_address(1), player_address(2)


@pytest.fixture
def chain() -> FakeChainClient:
    return FakeChainClient(
        head=20_000,
        logs=[
            make_log(P1, 2**70, 3, block=19_990),
            make_log(P2, 10, 1, block=19_995),
        ],
        reads={
            "totalScoreOfPlayer": 77,
            "totalTransactionsOfPlayer": 4,
            "playerDataPerGame": (70, 3),
            "games": (SIGNER, "img.png", "Monad Racer", "https://racer.example"),
        },
        signer=SIGNER,
    )


@pytest.fixture
def source() -> FakeIdentitySource:
    return FakeIdentitySource({P1: {"user": {"username": "whale"}}})


def make_client(chain, source, **config_overrides) -> TestClient:
    config = Config(
        contract_address=CONTRACT,
        game_address=GAME_A,
        identity_throttle_ms=0,
        **config_overrides,
    )
    return TestClient(create_app(config, chain_client=chain, identity_source=source))


def test_health(chain, source):
    with make_client(chain, source) as client:
        assert client.get("/health").json() == {"status": "healthy"}


def test_leaderboard(chain, source):
    with make_client(chain, source) as client:
        response = client.get("/api/leaderboard", params={"range": "1000", "chunk": "100"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["scope"] == "game"
    assert body["gameAddress"] == GAME_A
    assert body["fromBlock"] == "19001"
    assert body["toBlock"] == "20000"
    assert body["rowsCount"] == 2
    assert body["rows"][0] == {
        "rank": 1,
        "player": P1,
        "username": "whale",
        "score": str(2**70),
        "transactions": "3",
    }
    assert body["rows"][1]["username"] is None


def test_leaderboard_bad_numbers_fall_back_to_defaults(chain, source):
    with make_client(chain, source) as client:
        body = client.get(
            "/api/leaderboard",
            params={"limit": "lots", "range": "1e9", "chunk": "abc", "withNames": "0"},
        ).json()

    assert body["ok"] is True
    # range clamps to 50000 and chunk falls back to 90; 200 chunks of 90 cap the window
    assert body["fromBlock"] == str(20_000 - (90 * 200 - 1))
    assert body["chunkSize"] == 90
    assert all(row["username"] is None for row in body["rows"])
    assert source.calls == []


def test_leaderboard_global_scope(chain, source):
    with make_client(chain, source) as client:
        body = client.get("/api/leaderboard", params={"scope": "global", "range": "100"}).json()

    assert body["scope"] == "global"
    assert body["gameAddress"] is None
    assert all(call[2] is None for call in chain.log_calls)


def test_leaderboard_without_contract_is_request_error(chain, source):
    config = Config(contract_address=None, identity_throttle_ms=0)
    with TestClient(create_app(config, chain_client=chain, identity_source=source)) as client:
        response = client.get("/api/leaderboard")

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "CONTRACT_ADDRESS missing"}


def test_leaderboard_chain_failure_is_structured(chain, source):
    chain.fail_on_call = 1
    with make_client(chain, source) as client:
        response = client.get("/api/leaderboard")

    assert response.status_code == 500
    body = response.json()
    assert body["ok"] is False
    assert "eth_getLogs" in body["error"]


def test_player_events(chain, source):
    with make_client(chain, source) as client:
        body = client.get("/api/player/events", params={"player": P2, "range": "100"}).json()

    assert body["ok"] is True
    assert body["rows"] == [{
        "blockNumber": "19995",
        "txHash": "0x" + f"{19_995:032x}{0:032x}",
        "game": GAME_A,
        "player": P2,
        "scoreAmount": "10",
        "transactionAmount": "1",
    }]


def test_player_events_requires_valid_player(chain, source):
    with make_client(chain, source) as client:
        response = client.get("/api/player/events", params={"player": "0xabc"})

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "bad player"}


def test_stats(chain, source):
    with make_client(chain, source) as client:
        body = client.get("/api/get-stats", params={"player": P1}).json()

    assert body == {
        "ok": True,
        "player": P1,
        "total": {"score": "77", "transactions": "4"},
        "game": {"score": "70", "transactions": "3", "gameAddress": GAME_A},
    }


def test_stats_without_scope_game_omits_game(source):
    chain = FakeChainClient(reads={"totalScoreOfPlayer": 1, "totalTransactionsOfPlayer": 2})
    config = Config(contract_address=CONTRACT, identity_throttle_ms=0)
    with TestClient(create_app(config, chain_client=chain, identity_source=source)) as client:
        body = client.get("/api/get-stats", params={"player": P1}).json()

    assert "game" not in body
    assert body["total"] == {"score": "1", "transactions": "2"}


def test_stats_missing_player(chain, source):
    with make_client(chain, source) as client:
        response = client.get("/api/get-stats")

    assert response.status_code == 400
    assert response.json()["error"] == "bad params"


def test_check_username(chain, source):
    with make_client(chain, source) as client:
        found = client.get("/api/check-username", params={"wallet": P1}).json()
        missing = client.get("/api/check-username", params={"wallet": P2}).json()
        invalid = client.get("/api/check-username", params={"wallet": "nope"})

    assert found["ok"] is True
    assert found["hasUsername"] is True
    assert found["username"] == "whale"
    assert missing["hasUsername"] is False
    assert invalid.status_code == 400


def test_score_nonce(chain, source):
    with make_client(chain, source) as client:
        body = client.get("/api/score/nonce", params={"wallet": P1}).json()

    assert body["ok"] is True
    assert body["wallet"] == P1
    assert body["ttlMs"] == 120_000
    assert f"nonce={body['nonce']}" in body["message"]


def test_score_submit_rejects_malformed_body(chain, source):
    with make_client(chain, source) as client:
        response = client.post("/api/score/submit", json={"wallet": P1, "scoreAmount": -5})

    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_score_submit_unknown_nonce(chain, source):
    with make_client(chain, source) as client:
        response = client.post(
            "/api/score/submit",
            json={"wallet": P1, "nonce": "missing", "message": "m", "signature": "0x00"},
        )

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "nonce not found"}


def test_game_status(chain, source):
    with make_client(chain, source) as client:
        body = client.get("/game/status").json()

    assert body == {
        "ok": True,
        "signer": SIGNER,
        "contract": CONTRACT,
        "latestBlock": "20000",
        "ready": True,
    }


def test_game_registration(chain, source):
    with make_client(chain, source) as client:
        status = client.get("/game/register").json()
        registered = client.post("/game/register", json={"name": "Racer X"}).json()

    assert status["registered"] is True
    assert status["meta"] == {"name": "Monad Racer", "image": "img.png", "url": "https://racer.example"}
    assert registered["ok"] is True
    assert chain.writes == [("registerGame", [SIGNER, "Racer X", "", ""])]


def test_shutdown_closes_identity_source(chain, source):
    with make_client(chain, source):
        pass

    assert source.closed is True


def test_leaderboard_row_keeps_on_chain_address_form(chain):
    mixed = "0x" + "Cd" * 20
    chain.logs.append(make_log(mixed, 5, 1, block=19_999))
    source = FakeIdentitySource({mixed: {"username": "mixy"}})
    with make_client(chain, source) as client:
        rows = client.get("/api/leaderboard", params={"range": "100"}).json()["rows"]

    assert rows[-1]["player"] == mixed
    assert rows[-1]["username"] == "mixy"
    assert mixed.lower() in source.calls
