"""Per-group reconciliation: update the canonical contact, then drop its duplicates."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.domain.ports.persistence import RecordUpdateError

from .contracts import GroupOutcome

if TYPE_CHECKING:
    from contactmerge.domain.ports.persistence import RecordStore

    from .contracts import MergeGroup

log = getLogger(__name__)


@dataclass(slots=True)
class GroupReconciler:
    store: RecordStore

    async def reconcile(self, group: MergeGroup) -> GroupOutcome:
        """Reconcile ``group`` and capture every failure in the returned outcome."""

        group_total = group.total
        canonical = group.canonical

        try:
            await self.store.update(canonical)
        except RecordUpdateError as exc:
            log.warning("Update of contact %s failed (%s): %s", canonical.id, exc.kind, exc)
            return GroupOutcome(
                group_total=group_total,
                updated_record=None if exc.is_conflict else canonical,
                error_messages=(str(exc),),
            )
        except Exception as exc:  # noqa: BLE001
            log.warning("Update of contact %s failed: %s", canonical.id, exc)
            return GroupOutcome(
                group_total=group_total,
                updated_record=canonical,
                error_messages=(str(exc),),
            )

        if not group.duplicates:
            return GroupOutcome(group_total=group_total, updated_record=canonical)

        try:
            removal = await self.store.remove(group.duplicates)
        except Exception as exc:  # noqa: BLE001
            log.warning("Removing duplicates of contact %s failed: %s", canonical.id, exc)
            return GroupOutcome(
                group_total=group_total,
                updated_record=canonical,
                error_messages=(str(exc),),
            )

        if removal.errors:
            log.info(
                "Contact %s: %d duplicate(s) removed, %d failed",
                canonical.id,
                len(removal.removed),
                len(removal.errors),
            )
        return GroupOutcome(
            group_total=group_total,
            updated_record=canonical,
            removed_ids=tuple(removal.removed),
            error_messages=removal.error_messages,
        )
