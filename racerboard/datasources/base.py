"""Abstract base classes for upstream data sources."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from racerboard.models import ChainLog


class ChainClient(ABC):
    """
    Abstract interface for the EVM chain the game contract lives on.

    This abstraction keeps the scanning and aggregation services independent
    of the RPC library and lets tests substitute an in-memory chain.
    """

    @property
    def signer_address(self) -> Optional[str]:
        """
        Address of the server signer used for contract writes.

        None when the client is read-only.
        """
        return None

    @abstractmethod
    async def get_block_number(self) -> int:
        """
        Get the current chain head.

        Returns:
            Latest block number
        """
        pass

    @abstractmethod
    async def get_logs(
        self,
        contract_address: str,
        event_name: str,
        from_block: int,
        to_block: int,
        arg_filter: Optional[dict[str, Any]] = None,
    ) -> list[ChainLog]:
        """
        Retrieve decoded event logs emitted by a contract.

        Args:
            contract_address: Emitting contract address (0x...)
            event_name: Event name from the game ABI, e.g. "PlayerDataUpdated"
            from_block: First block (inclusive)
            to_block: Last block (inclusive)
            arg_filter: Optional filter on indexed event arguments,
                e.g. {"player": "0x..."}

        Returns:
            Decoded logs in the order the node returned them

        Note:
            Implementations must not split or retry the range themselves;
            chunking is the caller's job so provider limits stay visible.
        """
        pass

    @abstractmethod
    async def read_contract(
        self,
        contract_address: str,
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Point read of contract state via a view function.

        Returns:
            The decoded return value (a tuple for multiple outputs)
        """
        pass

    @abstractmethod
    async def write_contract(
        self,
        contract_address: str,
        function_name: str,
        args: Sequence[Any] = (),
    ) -> str:
        """
        Send a state-changing contract call signed by the server signer.

        Returns:
            Transaction hash (0x...)
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the client holds resources that need cleanup.
        """
        pass


class IdentitySource(ABC):
    """
    Abstract interface for the external wallet -> username service.

    Implementations return the raw decoded payload and raise on transport,
    status or decoding errors. Interpreting the payload is left to
    IdentityService, which also absorbs the errors.
    """

    @abstractmethod
    async def fetch_wallet_profile(self, wallet: str) -> Any:
        """
        Look up the identity record for a wallet.

        Args:
            wallet: Lower-cased wallet address (0x...)

        Returns:
            Decoded JSON body of the upstream response
        """
        pass

    async def close(self) -> None:
        """Clean up resources (e.g., close HTTP sessions)."""
        pass
