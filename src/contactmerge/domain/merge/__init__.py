"""Bulk contact merge workflow."""

from __future__ import annotations

from .contracts import (
    AggregateResult,
    GroupOutcome,
    MergeGroup,
    MergeRequest,
    ProgressState,
    request_total,
    validate_merge_request,
)
from .coordinator import MergeCoordinator
from .progress import ProgressAggregator
from .reconcile import GroupReconciler
from .summarize import summarize

__all__ = [
    "AggregateResult",
    "GroupOutcome",
    "GroupReconciler",
    "MergeCoordinator",
    "MergeGroup",
    "MergeRequest",
    "ProgressAggregator",
    "ProgressState",
    "request_total",
    "summarize",
    "validate_merge_request",
]
