"""Entry point for bulk contact merges.

A merge fans out into one reconciliation per group, all running concurrently
on the event loop. Group failures are captured in their outcomes and never
abort the run; only the final event synchronisation can fail the run, after
all group work has already been applied.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.domain.ports.notifications import notify

from .contracts import request_total, validate_merge_request
from .progress import ProgressAggregator
from .reconcile import GroupReconciler
from .summarize import summarize

if TYPE_CHECKING:
    from contactmerge.domain.ports.notifications import MergeListener
    from contactmerge.domain.ports.persistence import RecordStore
    from contactmerge.domain.ports.synchronization import EventSynchronizer

    from .contracts import AggregateResult, GroupOutcome, MergeGroup, MergeRequest

log = getLogger(__name__)


@dataclass(slots=True)
class MergeCoordinator:
    store: RecordStore
    synchronizer: EventSynchronizer
    listener: MergeListener
    last_result: AggregateResult | None = field(default=None, init=False)

    async def run(self, request: MergeRequest) -> AggregateResult:
        """Merge every group of ``request`` and return the folded result."""

        validate_merge_request(request)
        self.last_result = None
        notify(self.listener.merge_started)

        reconciler = GroupReconciler(self.store)
        total_units = request_total(request)
        progress = ProgressAggregator(total_units, self.listener)
        log.info("Merging %d contact group(s), %d unit(s) of work", len(request), total_units)

        async def reconcile_and_report(group: MergeGroup) -> GroupOutcome:
            outcome = await reconciler.reconcile(group)
            progress.record(group.canonical, outcome)
            return outcome

        outcomes = await asyncio.gather(
            *(reconcile_and_report(group) for group in request.values())
        )
        result = summarize(outcomes)
        self.last_result = result
        log.info(
            "Merge finished: updated=%d removed=%d errors=%d total=%d",
            len(result.updated),
            len(result.removed),
            len(result.errors),
            result.total,
        )

        notify(self.listener.contacts_changed)
        notify(self.listener.merge_finished, result)

        await self.synchronizer.sync()
        return result
