"""Push progress popup for PushGate."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from pushgate import strings
from pushgate.push import PushController

_DARK_MUTED = "#6b7a8a"
_DARK_HINT = "#a8b5c2"


class PushPopup(ttk.Frame):
    """Overlay that renders a :class:`PushController`.

    Holds no state of its own. Call :meth:`refresh_view` after anything
    that may have changed the controller.
    """

    def __init__(self, master: tk.Widget, controller: PushController, **kwargs) -> None:
        super().__init__(master, padding=12, relief=tk.RIDGE, borderwidth=2, **kwargs)
        self._controller = controller
        self._build()

    def _build(self) -> None:
        ttk.Label(self, text=strings.PUSH_POPUP_MSG, font=("TkDefaultFont", 12, "bold")).pack(
            anchor=tk.W
        )

        self._state_label = ttk.Label(self, text=strings.PUSH_POPUP_PROGRESS_NONE, anchor=tk.W)
        self._state_label.pack(fill=tk.X, pady=(6, 2))
        self._gauge = ttk.Progressbar(
            self, orient=tk.HORIZONTAL, length=300, mode="determinate", maximum=100
        )
        self._gauge.pack(fill=tk.X)

        # Credential entry, packed only while the prompt is visible
        self._cred_frame = ttk.Frame(self)
        ttk.Label(self._cred_frame, text=strings.CRED_POPUP_TITLE).pack(anchor=tk.W)
        self._cred_field = ttk.Label(self._cred_frame, text="", anchor=tk.W)
        self._cred_field.pack(fill=tk.X)

        self._commands_row = ttk.Frame(self)
        self._commands_row.pack(fill=tk.X, pady=(10, 0))

    def refresh_view(self) -> None:
        """Show, hide and update the overlay from the controller state."""
        if not self._controller.is_visible():
            self.place_forget()
            return

        label, percent = self._controller.get_progress()
        self._state_label.configure(text=label)
        self._gauge.configure(value=percent)

        prompt = self._controller.cred_prompt
        if prompt.is_visible():
            self._cred_field.configure(text=f"{prompt.input_label}: {prompt.display_text}▏")
            self._cred_frame.pack(fill=tk.X, pady=(10, 0), before=self._commands_row)
        else:
            self._cred_frame.pack_forget()

        for child in self._commands_row.winfo_children():
            child.destroy()
        for command in self._controller.commands():
            if not command.available:
                continue
            ttk.Label(
                self._commands_row,
                text=command.text,
                foreground=_DARK_HINT if command.enabled else _DARK_MUTED,
            ).pack(side=tk.LEFT, padx=(0, 12))

        self.place(relx=0.5, rely=0.5, anchor=tk.CENTER)
        self.lift()
