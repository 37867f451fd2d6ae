"""Value types exchanged by the merge workflow."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contactmerge.domain.errors import EmptyMergeRequestError, InvalidMergeGroupError

if TYPE_CHECKING:
    from contactmerge.domain.model import ContactID, ContactRecord


@dataclass(frozen=True, slots=True)
class MergeGroup:
    """One canonical contact and the identifiers it supersedes."""

    canonical: ContactRecord
    duplicates: tuple[ContactID, ...] = ()

    def __post_init__(self) -> None:
        if self.canonical.id is None:
            raise InvalidMergeGroupError("Canonical contact must have an identifier")
        if self.canonical.id in self.duplicates:
            raise InvalidMergeGroupError(
                f"Contact {self.canonical.id} cannot be both canonical and a duplicate"
            )

    @property
    def total(self) -> int:
        """Units of work: the canonical update plus one per duplicate."""

        return 1 + len(self.duplicates)


type MergeRequest = Mapping[str, MergeGroup]


def validate_merge_request(request: MergeRequest) -> None:
    if not request:
        raise EmptyMergeRequestError("Merge request contains no groups")


def request_total(request: MergeRequest) -> int:
    return sum(group.total for group in request.values())


@dataclass(frozen=True, slots=True, kw_only=True)
class GroupOutcome:
    """Result of reconciling one group; produced once and never mutated."""

    group_total: int
    updated_record: ContactRecord | None = None
    removed_ids: tuple[ContactID, ...] = ()
    error_messages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class AggregateResult:
    """Totals folded from every group outcome of one merge run."""

    updated: tuple[ContactRecord, ...] = ()
    removed: tuple[ContactID, ...] = ()
    errors: tuple[str, ...] = ()
    total: int = 0

    @property
    def succeeded(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True, kw_only=True)
class ProgressState:
    completed_units: int = 0
    total_units: int = 0
    percent: int = field(default=0)
