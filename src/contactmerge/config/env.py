"""Read required settings from the process environment."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


def require_env_vars(names: Iterable[str]) -> dict[str, str]:
    """Return the stripped value of every variable in ``names``.

    All blank or unset names are collected first so a single error lists
    everything the user still has to put in ``.env``.
    """

    values = {name: (os.getenv(name) or "").strip() for name in names}
    missing = sorted(name for name, value in values.items() if not value)
    if missing:
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(missing)}")
    return values


def require_env_var(name: str) -> str:
    return require_env_vars((name,))[name]
