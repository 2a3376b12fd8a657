"""Mini README: Calendar helper standing in for the clock collaborator."""

from __future__ import annotations

from datetime import date


def today() -> date:
    """Return the local calendar date; ``isoformat()`` gives ``YYYY-MM-DD``."""

    return date.today()
