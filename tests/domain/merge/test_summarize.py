from __future__ import annotations

from itertools import permutations

from contactmerge.domain.merge import AggregateResult, GroupOutcome, summarize
from tests.support.contacts import make_contact


def _outcomes() -> list[GroupOutcome]:
    return [
        GroupOutcome(
            group_total=3,
            updated_record=make_contact("A"),
            removed_ids=("A1", "A2"),
        ),
        GroupOutcome(group_total=2, updated_record=None, error_messages=("B is stale",)),
        GroupOutcome(
            group_total=4,
            updated_record=make_contact("C"),
            removed_ids=("C1",),
            error_messages=("C2 not found", "C3 not found"),
        ),
    ]


def test_summarize_folds_all_outcomes() -> None:
    result = summarize(_outcomes())

    assert [record.id for record in result.updated] == ["A", "C"]
    assert result.removed == ("A1", "A2", "C1")
    assert result.errors == ("B is stale", "C2 not found", "C3 not found")
    assert result.total == 9
    assert not result.succeeded


def test_summarize_is_order_independent() -> None:
    outcomes = _outcomes()
    expected = summarize(outcomes)

    for ordering in permutations(outcomes):
        assert summarize(ordering) == expected


def test_summarize_of_nothing_is_empty() -> None:
    assert summarize([]) == AggregateResult()
