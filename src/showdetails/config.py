"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionConfig:
    """Knobs for a ShowDetailsSession.

    refresh_on_start: submit Refresh(from_user=False) when the session is
        built. Eager refresh is the default; turn it off only when a cache
        layer upstream already decides freshness.
    report_source_errors: when an observed source's stream raises, emit a
        ShowError for it (the binding keeps its last value either way).
    """

    refresh_on_start: bool = True
    report_source_errors: bool = True
