"""Request and configuration checks shared by the services."""

from typing import Optional

from racerboard.config import is_address
from racerboard.errors import ConfigurationError, InvalidRequestError


def require_contract(contract_address: Optional[str]) -> str:
    """Return the configured contract address or raise ConfigurationError."""
    if not is_address(contract_address):
        raise ConfigurationError("CONTRACT_ADDRESS missing")
    return contract_address


def require_address(value: Optional[str], error: str) -> str:
    """Return a lower-cased address or raise InvalidRequestError(error)."""
    address = (value or "").strip().lower()
    if not is_address(address):
        raise InvalidRequestError(error)
    return address
