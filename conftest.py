"""Shared in-memory fakes for the chain and identity upstreams."""

from typing import Any, Callable, Optional, Sequence

from racerboard.datasources import ChainClient, IdentitySource
from racerboard.errors import ChainError
from racerboard.models import ChainLog

CONTRACT = "0x00000000000000000000000000000000000000c0"
GAME_A = "0xAAAAaaaaAAAAaaaaAAAAaaaaAAAAaaaaAAAAaaaa"
GAME_B = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
SIGNER = "0x5151515151515151515151515151515151515151"


def player_address(n: int) -> str:
    return "0x" + f"{n:040x}"


def make_log(
    player: str,
    score: int,
    transactions: int,
    block: int,
    game: str = GAME_A,
    log_index: int = 0,
) -> ChainLog:
    return ChainLog(
        address=CONTRACT,
        event="PlayerDataUpdated",
        args={
            "game": game,
            "player": player,
            "scoreAmount": score,
            "transactionAmount": transactions,
        },
        block_number=block,
        transaction_hash="0x" + f"{block:032x}{log_index:032x}",
        log_index=log_index,
    )


class FakeChainClient(ChainClient):
    """Chain held in memory; records every call it receives."""

    def __init__(
        self,
        head: int = 0,
        logs: Sequence[ChainLog] = (),
        reads: Optional[dict[str, Any]] = None,
        signer: Optional[str] = None,
        fail_on_call: Optional[int] = None,
    ):
        self.head = head
        self.logs = list(logs)
        self.reads = reads or {}
        self.signer = signer
        self.fail_on_call = fail_on_call
        self.log_calls: list[tuple[int, int, Optional[dict]]] = []
        self.read_calls: list[tuple[str, list]] = []
        self.writes: list[tuple[str, list]] = []

    @property
    def signer_address(self) -> Optional[str]:
        return self.signer

    async def get_block_number(self) -> int:
        return self.head

    async def get_logs(self, contract_address, event_name, from_block, to_block, arg_filter=None):
        self.log_calls.append((from_block, to_block, arg_filter))
        if self.fail_on_call is not None and len(self.log_calls) == self.fail_on_call:
            raise ChainError("eth_getLogs failed: limit exceeded")

        def matches(log: ChainLog) -> bool:
            if not from_block <= log.block_number <= to_block:
                return False
            for key, value in (arg_filter or {}).items():
                if str(log.args[key]).lower() != str(value).lower():
                    return False
            return True

        return [log for log in self.logs if matches(log)]

    async def read_contract(self, contract_address, function_name, args=()):
        self.read_calls.append((function_name, list(args)))
        value = self.reads[function_name]
        return value(*args) if callable(value) else value

    async def write_contract(self, contract_address, function_name, args=()):
        self.writes.append((function_name, list(args)))
        return "0x" + f"{len(self.writes):064x}"


class FakeIdentitySource(IdentitySource):
    """Identity upstream answering from a dict, counting calls per wallet."""

    def __init__(
        self,
        payloads: Optional[dict[str, Any]] = None,
        error: Optional[Callable[[], Exception]] = None,
    ):
        self.payloads = {k.lower(): v for k, v in (payloads or {}).items()}
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch_wallet_profile(self, wallet: str) -> Any:
        self.calls.append(wallet)
        if self.error is not None:
            raise self.error()
        return self.payloads.get(wallet, {"hasUsername": False})

    async def close(self) -> None:
        self.closed = True

