from __future__ import annotations

from contactmerge.ui.cli import run

run()
