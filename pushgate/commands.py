"""Command affordances a component exposes to the UI's command bar."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandInfo:
    """One command hint.

    ``enabled`` means the command is actionable right now; ``available``
    means it should be shown at all.
    """

    text: str
    enabled: bool = True
    available: bool = True
