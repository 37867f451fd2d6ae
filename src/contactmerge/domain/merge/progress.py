"""Cumulative progress reporting for groups that resolve out of order."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.domain.ports.notifications import notify

from .contracts import ProgressState

if TYPE_CHECKING:
    from contactmerge.domain.model import ContactRecord
    from contactmerge.domain.ports.notifications import MergeListener

    from .contracts import GroupOutcome

log = getLogger(__name__)

COMPLETE_PERCENT = 100


class ProgressAggregator:
    """Sum each resolved group's share of the run and notify the listener.

    A group contributes ``floor(group_total * 100 / total_units)`` percent.
    ``record`` never suspends, so two groups resolving on the same event loop
    cannot interleave their updates.
    """

    def __init__(self, total_units: int, listener: MergeListener) -> None:
        if total_units < 0:
            raise ValueError("total_units must be non-negative")
        self._listener = listener
        self._state = ProgressState(
            total_units=total_units,
            percent=COMPLETE_PERCENT if total_units == 0 else 0,
        )

    @property
    def state(self) -> ProgressState:
        return self._state

    def contribution(self, outcome: GroupOutcome) -> int:
        total_units = self._state.total_units
        if total_units == 0:
            return COMPLETE_PERCENT
        return (outcome.group_total * 100) // total_units

    def record(self, canonical: ContactRecord, outcome: GroupOutcome) -> ProgressState:
        """Account for one resolved group and emit the new progress."""

        previous = self._state
        completed = previous.completed_units + outcome.group_total
        if previous.total_units == 0:
            percent = COMPLETE_PERCENT
        else:
            # floored shares may sum to less than 100; completed_units marks completion
            percent = min(previous.percent + self.contribution(outcome), COMPLETE_PERCENT)

        self._state = ProgressState(
            completed_units=completed,
            total_units=previous.total_units,
            percent=max(percent, previous.percent),
        )
        log.debug(
            "Merge progress %s%% (%s/%s units)",
            self._state.percent,
            self._state.completed_units,
            self._state.total_units,
        )

        notify(self._listener.progress_updated, self._state.percent)
        notify(self._listener.record_updated, outcome.updated_record or canonical)
        return self._state
