"""Error types rendered into the {ok: false, error} response envelope."""


class RacerboardError(Exception):
    """Base error carrying the HTTP status it should be reported with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(RacerboardError):
    """Malformed address or missing/invalid request parameter."""

    status_code = 400


class ConfigurationError(InvalidRequestError):
    """Required server configuration (contract, scope game) is missing."""


class PermissionDeniedError(RacerboardError):
    """The server signer lacks a role the contract requires."""

    status_code = 403


class ChainError(RacerboardError):
    """An RPC call or contract read/write failed."""

    status_code = 500
