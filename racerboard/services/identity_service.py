"""Wallet address to username resolution with caching and bounded concurrency."""

import asyncio
import logging
from typing import Any, Callable, Iterable, Mapping, Optional

import httpx

from racerboard.datasources import IdentitySource
from racerboard.models import LookupStatus, UsernameCheckResponse, UsernameLookup

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 10
DEFAULT_CONCURRENCY = 6
DEFAULT_THROTTLE_DELAY = 0.01

UsernameRule = Callable[[Mapping[str, Any]], Optional[str]]


def field_rule(*path: str) -> UsernameRule:
    """Build a rule reading a non-empty string at a (possibly nested) key path."""

    def rule(payload: Mapping[str, Any]) -> Optional[str]:
        node: Any = payload
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if isinstance(node, str) and node.strip():
            return node.strip()
        return None

    rule.__name__ = "field_rule_" + "_".join(path)
    return rule


# Applied in priority order; the first non-empty match wins
USERNAME_RULES: tuple[UsernameRule, ...] = (
    field_rule("username"),
    field_rule("handle"),
    field_rule("user", "username"),
    field_rule("user", "handle"),
)


def extract_username(
    payload: Mapping[str, Any],
    rules: Iterable[UsernameRule] = USERNAME_RULES,
) -> Optional[str]:
    """Return the first username any rule finds in the payload."""
    for rule in rules:
        username = rule(payload)
        if username:
            return username
    return None


def has_username_flag(payload: Mapping[str, Any]) -> bool:
    """Read the upstream's optional hasUsername / exists flags."""
    return any(payload.get(flag) is True for flag in ("hasUsername", "exists"))


def parse_lookup(payload: Any) -> UsernameLookup:
    """
    Interpret an upstream check-wallet payload.

    A name string is authoritative on its own. A true hasUsername/exists
    flag without any recognizable name still resolves to NOT_FOUND, since
    there is nothing to display, but the flag is kept.
    """
    if not isinstance(payload, Mapping):
        return UsernameLookup(status=LookupStatus.UNRECOGNIZED)

    flagged = has_username_flag(payload)
    username = extract_username(payload)
    if username:
        return UsernameLookup(status=LookupStatus.FOUND, username=username, flagged=flagged)

    if flagged:
        logger.debug(f"Upstream flags a username but none could be extracted: {payload!r}")
    return UsernameLookup(status=LookupStatus.NOT_FOUND, flagged=flagged)


class IdentityCache:
    """
    Process-wide address -> username memo, including negative (None) results.

    Entries are never evicted. All access happens on the event loop thread,
    so no locking is needed.
    """

    def __init__(self):
        self._entries: dict[str, Optional[str]] = {}

    def __contains__(self, address: str) -> bool:
        return address.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, address: str) -> Optional[str]:
        return self._entries.get(address.lower())

    def put(self, address: str, username: Optional[str]) -> None:
        self._entries[address.lower()] = username


class IdentityService:
    """Service for best-effort username enrichment of wallet addresses."""

    def __init__(
        self,
        source: IdentitySource,
        cache: Optional[IdentityCache] = None,
        throttle_delay: float = DEFAULT_THROTTLE_DELAY,
    ):
        """
        Args:
            source: Upstream identity source
            cache: Shared cache, a fresh one if None
            throttle_delay: Seconds a worker waits after each upstream call
        """
        self.source = source
        self.cache = cache if cache is not None else IdentityCache()
        self.throttle_delay = throttle_delay

    async def lookup(self, wallet: str) -> UsernameLookup:
        """
        Query the upstream for one wallet, bypassing the cache.

        Never raises. Error statuses and undecodable bodies come back as
        REJECTED, anything else (transport errors included) as FAILED.
        """
        try:
            payload = await self.source.fetch_wallet_profile(wallet.lower())
        except (httpx.HTTPStatusError, ValueError) as e:
            logger.warning(f"Username lookup rejected for {wallet}: {e!r}")
            return UsernameLookup(status=LookupStatus.REJECTED, error=str(e) or type(e).__name__)
        except Exception as e:
            logger.warning(f"Username lookup failed for {wallet}: {e!r}")
            return UsernameLookup(status=LookupStatus.FAILED, error=str(e) or type(e).__name__)

        result = parse_lookup(payload)
        if result.status == LookupStatus.UNRECOGNIZED:
            logger.warning(f"Unrecognized identity payload for {wallet}: {payload!r}")
        return result

    async def check_username(self, wallet: str) -> UsernameCheckResponse:
        """
        Fresh username check for one wallet, used right after a player
        registers a name. Neither reads nor writes the cache.

        Only an unreachable upstream reports ok=False; an error status or
        unreadable body counts as "no username yet".
        """
        lookup = await self.lookup(wallet)
        if lookup.status == LookupStatus.FAILED:
            return UsernameCheckResponse(ok=False, hasUsername=False, error=lookup.error)
        return UsernameCheckResponse(
            ok=True,
            hasUsername=lookup.flagged or lookup.status == LookupStatus.FOUND,
            username=lookup.username,
        )

    async def resolve(
        self,
        addresses: Iterable[str],
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> dict[str, Optional[str]]:
        """
        Resolve addresses to usernames.

        A fixed pool of workers pulls addresses from one shared cursor, so a
        worker that finishes early picks up the next address. Cache hits cost
        no upstream call. Every miss is cached (None included) and followed
        by the throttle delay.

        Args:
            addresses: Addresses in any case; duplicates are collapsed
            concurrency: Worker count, clamped to [1, 10]

        Returns:
            Mapping of every lower-cased input address to a username or None
        """
        unique = list(dict.fromkeys(a.lower() for a in addresses))
        results: dict[str, Optional[str]] = {}
        if not unique:
            return results

        cursor = iter(unique)

        async def worker() -> None:
            for address in cursor:
                if address in self.cache:
                    results[address] = self.cache.get(address)
                    continue

                lookup = await self.lookup(address)
                self.cache.put(address, lookup.resolved)
                results[address] = lookup.resolved

                if self.throttle_delay > 0:
                    await asyncio.sleep(self.throttle_delay)

        workers = min(max(concurrency, 1), MAX_CONCURRENCY, len(unique))
        await asyncio.gather(*(worker() for _ in range(workers)))

        return results
