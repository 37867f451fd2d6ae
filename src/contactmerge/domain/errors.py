"""Domain error definitions."""

from __future__ import annotations


class ContactMergeError(RuntimeError):
    """Base class for errors raised by the contact domain."""


class InvalidMergeGroupError(ContactMergeError, ValueError):
    """Raised when a merge group violates its own invariants."""


class EmptyMergeRequestError(ContactMergeError, ValueError):
    """Raised when a merge is requested without any group to reconcile."""
