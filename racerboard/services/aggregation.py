"""Per-player aggregation and ranking of PlayerDataUpdated events."""

from typing import Iterable, Mapping, Optional

from racerboard.models import PlayerAggregate, PlayerEvent


def aggregate_events(
    events: Iterable[PlayerEvent],
    scope_game: Optional[str] = None,
) -> dict[str, PlayerAggregate]:
    """
    Fold events into running totals keyed by lower-cased player address.

    Args:
        events: Events in any order; accumulation is commutative
        scope_game: If set, events from any other game are skipped
            (compared case-insensitively)

    Returns:
        Mapping of lower-cased player address to PlayerAggregate, in
        first-seen order

    Note:
        Deltas are assumed non-negative as emitted by the contract.
    """
    scope = scope_game.lower() if scope_game else None
    totals: dict[str, PlayerAggregate] = {}

    for event in events:
        # The log query already filters by game; re-check in case it did not
        if scope is not None and event.game.lower() != scope:
            continue

        key = event.player.lower()
        agg = totals.get(key)
        if agg is None:
            agg = PlayerAggregate(player=event.player)
            totals[key] = agg

        agg.total_score += event.score_amount
        agg.total_transactions += event.transaction_amount

    return totals


def rank_players(
    aggregates: Mapping[str, PlayerAggregate] | Iterable[PlayerAggregate],
    limit: int,
) -> list[PlayerAggregate]:
    """
    Order players by score, then transactions (both descending), and cut to `limit`.

    The whole set is sorted before truncating. Python's sort is stable, so
    full ties keep the aggregate mapping's insertion order.
    """
    if isinstance(aggregates, Mapping):
        aggregates = aggregates.values()

    ranked = sorted(aggregates, key=lambda a: a.rank_key, reverse=True)
    return ranked[:max(limit, 0)]
