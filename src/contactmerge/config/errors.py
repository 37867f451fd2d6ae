"""Errors raised while resolving contactmerge settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, such as an unknown backend name.

    The CLI reports these as usage errors (exit code 2).
    """


class MissingConfigurationError(ConfigurationError):
    """One or more required environment variables are unset or blank."""
