"""Fold per-group outcomes into one aggregate result.

Groups resolve in arbitrary order, so the folded collections are sorted to make
the aggregate independent of the order outcomes arrive in.
"""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING

from .contracts import AggregateResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .contracts import GroupOutcome


def _accumulate(aggregate: AggregateResult, outcome: GroupOutcome) -> AggregateResult:
    updated = aggregate.updated
    if outcome.updated_record is not None:
        updated = (*updated, outcome.updated_record)
    return AggregateResult(
        updated=updated,
        removed=(*aggregate.removed, *outcome.removed_ids),
        errors=(*aggregate.errors, *outcome.error_messages),
        total=aggregate.total + outcome.group_total,
    )


def summarize(outcomes: Iterable[GroupOutcome]) -> AggregateResult:
    folded = reduce(_accumulate, outcomes, AggregateResult())
    return AggregateResult(
        updated=tuple(sorted(folded.updated, key=lambda record: record.id or "")),
        removed=tuple(sorted(folded.removed)),
        errors=tuple(sorted(folded.errors)),
        total=folded.total,
    )
