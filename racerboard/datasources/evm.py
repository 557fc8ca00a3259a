"""EVM JSON-RPC chain client built on web3.py."""

import logging
from typing import Any, Awaitable, Optional, Sequence, TypeVar

from eth_account import Account
from web3 import AsyncWeb3, Web3

from racerboard.config import is_address
from racerboard.errors import ChainError
from racerboard.models import ChainLog
from .abi import GAME_CONTRACT_ABI
from .base import ChainClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# API constants
MONAD_TESTNET_RPC_URL = "https://testnet-rpc.monad.xyz"
MONAD_TESTNET_CHAIN_ID = 10143


def _to_chain_arg(value: Any) -> Any:
    """web3 rejects non-checksummed address arguments."""
    if is_address(value):
        return Web3.to_checksum_address(value)
    return value


class Web3ChainClient(ChainClient):
    """
    Chain client using an async web3 HTTP provider.

    Limitations:
    - Only the games registry ABI is known; other contracts cannot be decoded
    - Writes require a server private key and are signed locally
    - No retries; a failing call surfaces as ChainError
    """

    def __init__(
        self,
        rpc_url: str = MONAD_TESTNET_RPC_URL,
        chain_id: int = MONAD_TESTNET_CHAIN_ID,
        private_key: Optional[str] = None,
        abi: Optional[list[dict]] = None,
    ):
        """
        Initialize the chain client.

        Args:
            rpc_url: HTTP JSON-RPC endpoint
            chain_id: Chain id used when signing transactions
            private_key: Server signer key, None for a read-only client
            abi: Contract ABI, defaults to the games registry ABI
        """
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.abi = abi or GAME_CONTRACT_ABI
        self._account = Account.from_key(private_key) if private_key else None
        self._w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

    @property
    def signer_address(self) -> Optional[str]:
        return self._account.address if self._account is not None else None

    def _contract(self, contract_address: str):
        return self._w3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=self.abi,
        )

    async def _guard(self, what: str, awaitable: Awaitable[T]) -> T:
        """Await an RPC call, converting any failure into ChainError."""
        try:
            return await awaitable
        except ChainError:
            raise
        except Exception as e:
            logger.error(f"{what} failed: {e}")
            raise ChainError(f"{what} failed: {e}") from e

    async def get_block_number(self) -> int:
        """Get the current chain head."""
        return int(await self._guard("eth_blockNumber", self._w3.eth.block_number))

    async def get_logs(
        self,
        contract_address: str,
        event_name: str,
        from_block: int,
        to_block: int,
        arg_filter: Optional[dict[str, Any]] = None,
    ) -> list[ChainLog]:
        """
        Retrieve decoded logs for one event over a block range.

        Indexed argument filters are pushed down into the topic filter by web3.
        """
        event = getattr(self._contract(contract_address).events, event_name)
        argument_filters = (
            {k: _to_chain_arg(v) for k, v in arg_filter.items()} if arg_filter else None
        )

        entries = await self._guard(
            f"eth_getLogs {event_name} [{from_block},{to_block}]",
            event.get_logs(
                argument_filters=argument_filters,
                from_block=from_block,
                to_block=to_block,
            ),
        )

        return [
            ChainLog(
                address=str(entry["address"]),
                event=entry["event"],
                args=dict(entry["args"]),
                block_number=int(entry["blockNumber"]),
                transaction_hash=Web3.to_hex(entry["transactionHash"]),
                log_index=int(entry["logIndex"]),
            )
            for entry in entries
        ]

    async def read_contract(
        self,
        contract_address: str,
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a view function."""
        fn = getattr(self._contract(contract_address).functions, function_name)
        call_args = [_to_chain_arg(a) for a in args]
        return await self._guard(f"eth_call {function_name}", fn(*call_args).call())

    async def write_contract(
        self,
        contract_address: str,
        function_name: str,
        args: Sequence[Any] = (),
    ) -> str:
        """
        Build, sign and broadcast a contract transaction.

        Gas and fee fields are filled in by web3 from the node's estimates.
        """
        if self._account is None:
            raise ChainError("server signer missing")

        fn = getattr(self._contract(contract_address).functions, function_name)
        call_args = [_to_chain_arg(a) for a in args]
        sender = self._account.address

        nonce = await self._guard(
            "eth_getTransactionCount",
            self._w3.eth.get_transaction_count(sender, "pending"),
        )
        tx = await self._guard(
            f"build {function_name}",
            fn(*call_args).build_transaction({
                "from": sender,
                "nonce": nonce,
                "chainId": self.chain_id,
            }),
        )
        signed = self._account.sign_transaction(tx)
        tx_hash = await self._guard(
            "eth_sendRawTransaction",
            self._w3.eth.send_raw_transaction(signed.raw_transaction),
        )

        tx_hex = Web3.to_hex(tx_hash)
        logger.info(f"Sent {function_name} from {sender}: {tx_hex}")
        return tx_hex
