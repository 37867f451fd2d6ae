from __future__ import annotations

import logging

import pytest

from contactmerge.domain.merge import AggregateResult
from contactmerge.domain.ports.notifications import ContactsListener, CreateMode
from contactmerge.domain.ports.persistence import CreateResult, CreationError
from contactmerge.ui.listener import LoggingListener
from tests.support.contacts import make_contact


def test_logging_listener_satisfies_protocol() -> None:
    assert isinstance(LoggingListener(), ContactsListener)


def test_merge_notifications_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    listener = LoggingListener()

    with caplog.at_level(logging.DEBUG, logger="contactmerge.ui.listener"):
        listener.merge_started()
        listener.progress_updated(60)
        listener.record_updated(make_contact("A", name="Alice"))
        listener.merge_finished(
            AggregateResult(
                updated=(make_contact("A"),), removed=("A1",), errors=("A2 not found",), total=3
            )
        )

    assert listener.last_percent == 60
    assert "Merge progress: 60%" in caplog.messages
    assert "Contact A (Alice) merged" in caplog.messages
    assert "Merged 1 contact(s), removed 1 duplicate(s), 1 error(s)" in caplog.messages
    assert "A2 not found" in caplog.messages


def test_create_errors_are_warnings(caplog: pytest.LogCaptureFixture) -> None:
    result = CreateResult(errors=(CreationError(index=0, message="Invalid email"),), total=1)

    with caplog.at_level(logging.INFO, logger="contactmerge.ui.listener"):
        LoggingListener().contacts_created(result, CreateMode.IMPORT)

    assert caplog.messages == ["Created 0 of 1 contact(s) (import)", "Contact #0: Invalid email"]
    assert caplog.records[-1].levelno == logging.WARNING
