"""In-memory store for one-time score authorization nonces."""

import time
from typing import Optional

from racerboard.models import NonceRecord


def now_ms() -> int:
    return int(time.time() * 1000)


class NonceStore:
    """
    Process-lifetime nonce records keyed by nonce.

    Not shared across processes; a multi-worker deployment needs an
    external store.
    """

    def __init__(self):
        self._records: dict[str, NonceRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def get(self, nonce: str) -> Optional[NonceRecord]:
        return self._records.get(nonce)

    def put(self, record: NonceRecord) -> None:
        self._records[record.nonce] = record

    def sweep_expired(self, now: Optional[int] = None) -> int:
        """Drop expired records. Returns how many were removed."""
        now = now_ms() if now is None else now
        expired = [k for k, rec in self._records.items() if rec.is_expired(now)]
        for key in expired:
            del self._records[key]
        return len(expired)
