"""PushGate application frame — wires the push controller to Tk."""

from __future__ import annotations

import logging
import queue
import tkinter as tk
from tkinter import ttk

import git

from pushgate.config import ConfigManager
from pushgate.credentials import CredentialError, CredentialStore
from pushgate.engine import Notification, PushEngine, PushEngineError
from pushgate.events import EventQueue
from pushgate.keys import KeyConfig, KeyEvent
from pushgate.push import PushController
from pushgate.ui.components import StatusBar
from pushgate.ui.push_popup import PushPopup

logger = logging.getLogger(__name__)

_PUSH_KEY = "p"


class App(ttk.Frame):
    """Root frame: branch summary, push button, status bar and push popup.

    Background work reports through two queues that are drained on the Tk
    thread via ``after``: engine notifications and user-facing events.
    """

    def __init__(
        self,
        master: tk.Tk,
        repo: git.Repo,
        branch: str,
        config: ConfigManager | None = None,
    ) -> None:
        super().__init__(master, padding=12)
        self.master = master
        self.pack(fill=tk.BOTH, expand=True)

        self._config = config or ConfigManager()
        self._repo = repo
        self._branch = branch
        self._poll_ms = int(self._config.get("notification_poll_ms", 50))

        self._notifications: queue.Queue[Notification] = queue.Queue()
        self._events = EventQueue()
        self._engine = PushEngine(repo.working_tree_dir or repo.git_dir, self._notifications)
        self._controller = PushController(
            engine=self._engine,
            credentials=CredentialStore(repo, self._config.get("keyring_service")),
            events=self._events,
            key_config=KeyConfig.from_config(self._config),
            default_remote=self._config.get("default_remote"),
            remember_credentials=bool(self._config.get("remember_credentials")),
        )

        self._build()
        master.bind("<Key>", self._on_key)
        self.after(self._poll_ms, self._poll)
        logger.info("Ready to push %s from %s", branch, self._repo.working_tree_dir)

    def _build(self) -> None:
        remote = self._config.get("default_remote")
        ttk.Label(
            self,
            text=f"Branch: {self._branch}    Remote: {remote}",
            anchor=tk.W,
        ).pack(fill=tk.X)

        ttk.Button(self, text=f"Push [{_PUSH_KEY}]", command=self._start_push).pack(
            anchor=tk.W, pady=(8, 0)
        )

        self._status_bar = StatusBar(self)
        self._status_bar.pack(side=tk.BOTTOM, fill=tk.X)

        self._popup = PushPopup(self, self._controller)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _start_push(self) -> None:
        self._status_bar.set(f"Pushing {self._branch}…")
        try:
            self._controller.push(self._branch)
        except (CredentialError, PushEngineError) as exc:
            logger.error("Could not start push: %s", exc)
            self._status_bar.set(f"Could not start push: {exc}", error=True)
            self._controller.hide()
        self._popup.refresh_view()

    def _on_key(self, event: tk.Event) -> str | None:  # type: ignore[type-arg]
        ev = KeyEvent(event.keysym, event.char)
        try:
            consumed = self._controller.event(ev)
        except PushEngineError as exc:
            logger.error("Could not start push: %s", exc)
            self._status_bar.set(f"Could not start push: {exc}", error=True)
            self._controller.hide()
            consumed = True

        if consumed:
            self._popup.refresh_view()
            return "break"
        if ev.char == _PUSH_KEY:
            self._start_push()
            return "break"
        return None

    # ------------------------------------------------------------------
    # Queue draining
    # ------------------------------------------------------------------

    def _poll(self) -> None:
        """Drain both queues on the Tk thread, then reschedule."""
        try:
            was_visible = self._controller.is_visible()
            changed = False
            while True:
                try:
                    notification = self._notifications.get_nowait()
                except queue.Empty:
                    break
                try:
                    self._controller.on_notification(notification)
                except CredentialError as exc:
                    logger.warning("Push succeeded but password was not saved: %s", exc)
                changed = True

            events = self._events.drain()
            for internal_event in events:
                self._status_bar.show_event(internal_event)

            if changed:
                if was_visible and not self._controller.is_visible() and not events:
                    self._status_bar.set(f"Pushed {self._branch}")
                self._popup.refresh_view()
        finally:
            self.after(self._poll_ms, self._poll)

    def destroy(self) -> None:
        self._engine.shutdown()
        super().destroy()
