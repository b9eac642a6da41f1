"""Shared reusable UI components for PushGate."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from pushgate.events import InternalEvent, InternalEventKind

_DARK_FG = "#c7d5e0"
_DARK_ERROR = "#e05c5c"


class StatusBar(ttk.Frame):
    """Persistent status bar displayed at the bottom of the main window."""

    def __init__(self, master: tk.Widget, **kwargs) -> None:
        """Create the status bar with an initial ready message."""
        super().__init__(master, **kwargs)
        self._var = tk.StringVar(value="Ready")
        ttk.Separator(self, orient=tk.HORIZONTAL).pack(side=tk.TOP, fill=tk.X)
        self._label = ttk.Label(
            self,
            textvariable=self._var,
            anchor=tk.W,
            padding=(6, 2),
        )
        self._label.pack(side=tk.LEFT, fill=tk.X, expand=True)

    def set(self, message: str, error: bool = False) -> None:
        """Update the status bar text."""
        self._var.set(message)
        self._label.configure(foreground=_DARK_ERROR if error else _DARK_FG)

    def show_event(self, event: InternalEvent) -> None:
        """Display a queued event; multi-line messages are folded onto one line."""
        message = " ".join(event.message.split())
        self.set(message, error=event.kind is InternalEventKind.PUSH_FAILED)
