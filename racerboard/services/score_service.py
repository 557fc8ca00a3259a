"""Score authorization and on-chain submission service."""

import logging
import re
import secrets
from dataclasses import dataclass
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from racerboard.datasources import ChainClient
from racerboard.errors import ConfigurationError, InvalidRequestError, PermissionDeniedError
from racerboard.models import NonceRecord, NonceResponse, ScoreSubmission, ScoreSubmitResponse
from .nonce_store import NonceStore, now_ms
from .validation import require_address

logger = logging.getLogger(__name__)

HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")
DEFAULT_NONCE_TTL_MS = 2 * 60 * 1000


def authorization_message(wallet: str, nonce: str, issued_at: int) -> str:
    """The EIP-191 message a player signs to authorize one score submission."""
    return (
        "Monad Racer Score Authorization\n"
        f"wallet={wallet}\n"
        f"nonce={nonce}\n"
        f"issuedAt={issued_at}"
    )


@dataclass(frozen=True)
class ScorePolicy:
    """
    Plausibility bounds for a submitted score.

    The game yields roughly 100 points per second, so twice that is
    tolerated, with a flat allowance for very short runs.
    """
    min_session_ms: int = 2000
    points_per_second: int = 200
    score_floor: int = 300

    def max_score(self, seconds: float) -> int:
        return int(max(self.points_per_second * seconds, self.score_floor))

    def check(self, score: int, ms_played: float, issued_at: int, now: int) -> None:
        """Raise InvalidRequestError if the score is not plausible."""
        elapsed_ms = ms_played if ms_played > 0 else now - issued_at
        seconds = max(elapsed_ms / 1000, 0.001)
        if score > self.max_score(seconds):
            raise InvalidRequestError("unreasonable score")
        if 0 < ms_played < self.min_session_ms:
            raise InvalidRequestError("too short session")


class ScoreService:
    """Service issuing score nonces and writing verified scores on chain."""

    def __init__(
        self,
        chain: ChainClient,
        nonces: NonceStore,
        contract_address: Optional[str],
        nonce_ttl_ms: int = DEFAULT_NONCE_TTL_MS,
        policy: Optional[ScorePolicy] = None,
    ):
        self.chain = chain
        self.nonces = nonces
        self.contract_address = contract_address
        self.nonce_ttl_ms = nonce_ttl_ms
        self.policy = policy or ScorePolicy()

    def issue_nonce(self, wallet: Optional[str], now: Optional[int] = None) -> NonceResponse:
        """Issue a fresh nonce for a wallet, sweeping expired ones first."""
        wallet = require_address(wallet, "bad wallet")
        now = now_ms() if now is None else now

        self.nonces.sweep_expired(now)

        record = NonceRecord(
            wallet=wallet,
            nonce=secrets.token_hex(16),
            issuedAt=now,
            ttlMs=self.nonce_ttl_ms,
        )
        self.nonces.put(record)

        return NonceResponse(
            wallet=wallet,
            nonce=record.nonce,
            issuedAt=record.issuedAt,
            ttlMs=record.ttlMs,
            message=authorization_message(wallet, record.nonce, record.issuedAt),
        )

    def _verify_nonce(self, wallet: str, nonce: str, now: int) -> NonceRecord:
        record = self.nonces.get(nonce)
        if record is None:
            raise InvalidRequestError("nonce not found")
        if record.used:
            raise InvalidRequestError("nonce already used")
        if record.wallet.lower() != wallet:
            raise InvalidRequestError("nonce wallet mismatch")
        if record.is_expired(now):
            raise InvalidRequestError("nonce expired")
        return record

    @staticmethod
    def _verify_signature(wallet: str, nonce: str, message: str, signature: str) -> None:
        # The signed text must bind this nonce, otherwise any old signature replays
        if f"nonce={nonce}" not in message:
            raise InvalidRequestError("message does not match nonce")
        try:
            signer = Account.recover_message(encode_defunct(text=message), signature=signature)
        except Exception as e:
            logger.debug(f"Signature recovery failed for {wallet}: {e!r}")
            raise InvalidRequestError("invalid signature") from e
        if signer.lower() != wallet:
            raise InvalidRequestError("invalid signature")

    async def _require_game_role(self, contract: str) -> None:
        sender = self.chain.signer_address
        if sender is None:
            raise ConfigurationError("server signer missing")
        role = await self.chain.read_contract(contract, "GAME_ROLE")
        has_role = await self.chain.read_contract(contract, "hasRole", [role, sender])
        if not has_role:
            raise PermissionDeniedError(f"Server signer has no GAME_ROLE ({sender})")

    async def submit(self, body: ScoreSubmission, now: Optional[int] = None) -> ScoreSubmitResponse:
        """
        Verify a signed score and record it on chain.

        The nonce is reserved before the first await, so a concurrent
        submission of the same body is rejected. The reservation is released
        if the role check or the write fails, so that write can be retried.
        """
        if not self.contract_address:
            raise ConfigurationError("CONTRACT_ADDRESS missing")
        wallet = require_address(body.wallet, "bad wallet")
        if not body.nonce or not body.message or not body.signature:
            raise InvalidRequestError("missing nonce/signature")
        if not HEX_RE.match(body.signature):
            raise InvalidRequestError("signature must be 0x-hex")

        now = now_ms() if now is None else now
        record = self._verify_nonce(wallet, body.nonce, now)
        self._verify_signature(wallet, body.nonce, body.message, body.signature)
        self.policy.check(body.scoreAmount, body.msPlayed, record.issuedAt, now)

        record.used = True
        self.nonces.put(record)
        try:
            await self._require_game_role(self.contract_address)
            tx = await self.chain.write_contract(
                self.contract_address,
                "updatePlayerData",
                [wallet, body.scoreAmount, body.transactionAmount],
            )
        except Exception:
            record.used = False
            self.nonces.put(record)
            raise

        logger.info(f"Recorded score {body.scoreAmount} for {wallet}: {tx}")
        return ScoreSubmitResponse(tx=tx)
