"""Push controller: one user-initiated push, its credential flow and its end.

The controller never blocks.  All network work happens inside the
:class:`~pushgate.engine.PushEngine`; the controller submits a request and
then polls the engine each time a ``PUSH`` notification arrives.  Closing the
popup only stops tracking; the engine keeps pushing in the background.
"""

from __future__ import annotations

import logging

from pushgate import strings
from pushgate.commands import CommandInfo
from pushgate.cred_prompt import CredentialPrompt
from pushgate.credentials import BasicAuthCredential, CredentialError, CredentialStore
from pushgate.engine import (
    Notification,
    NotificationKind,
    ProgressSnapshot,
    PushEngine,
    PushPhase,
    PushRequest,
)
from pushgate.events import EventQueue, InternalEvent, InternalEventKind
from pushgate.keys import KeyConfig, KeyEvent

logger = logging.getLogger(__name__)

_PHASE_LABELS: dict[PushPhase, str] = {
    PushPhase.ADDING_OBJECTS: strings.PUSH_POPUP_STATES_ADDING,
    PushPhase.COMPUTING_DELTAS: strings.PUSH_POPUP_STATES_DELTAS,
    PushPhase.TRANSFERRING: strings.PUSH_POPUP_STATES_PUSHING,
}


def progress_label(progress: ProgressSnapshot | None) -> tuple[str, int]:
    """Map a progress snapshot to a ``(label, percent)`` pair for display."""
    if progress is None:
        return strings.PUSH_POPUP_PROGRESS_NONE, 0
    label = _PHASE_LABELS.get(progress.phase, strings.PUSH_POPUP_PROGRESS_NONE)
    return label, max(0, min(100, int(progress.percent)))


class PushController:
    """Drives a single push of a branch to the default remote.

    States: idle (hidden), awaiting credentials (prompt visible, nothing
    pending) and active (request submitted, polling on notifications).
    """

    def __init__(
        self,
        engine: PushEngine,
        credentials: CredentialStore,
        events: EventQueue,
        key_config: KeyConfig | None = None,
        default_remote: str = "origin",
        remember_credentials: bool = False,
    ) -> None:
        self._engine = engine
        self._credentials = credentials
        self._events = events
        self._key_config = key_config or KeyConfig()
        self._default_remote = default_remote
        self._remember_credentials = remember_credentials

        self._visible = False
        self._pending = False
        self._branch = ""
        self._progress: ProgressSnapshot | None = None
        self._request_id: str | None = None
        self._prompted_cred: BasicAuthCredential | None = None
        self.cred_prompt = CredentialPrompt(self._key_config)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def branch(self) -> str:
        return self._branch

    @property
    def progress(self) -> ProgressSnapshot | None:
        return self._progress

    @property
    def request_id(self) -> str | None:
        """Id of the request being tracked, or None when nothing is."""
        return self._request_id

    def is_visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        self._visible = True

    def hide(self) -> None:
        """Stop tracking and displaying; does not cancel the engine."""
        self._visible = False
        self._pending = False
        self._request_id = None
        self._prompted_cred = None
        self.cred_prompt.hide()

    # ------------------------------------------------------------------
    # Push flow
    # ------------------------------------------------------------------

    def push(self, branch: str) -> None:
        """Start pushing *branch*, prompting for credentials if needed.

        Raises:
            CredentialError: The remote could not be inspected.
        """
        self._branch = branch
        self._pending = False
        self._progress = None
        self._request_id = None
        self._prompted_cred = None
        self.cred_prompt.hide()
        self.show()

        if not self._credentials.needs_authentication(self._default_remote):
            self.request_push(None)
            return

        try:
            cred = self._credentials.extract(self._default_remote)
        except CredentialError as exc:
            logger.warning("Could not read stored credential (%s) — prompting", exc)
            cred = BasicAuthCredential()

        if cred.is_complete():
            self.request_push(cred)
        else:
            self.cred_prompt.set_cred(cred)
            self.cred_prompt.show()

    def request_push(self, cred: BasicAuthCredential | None) -> None:
        """Submit the push for the current branch.

        On failure nothing is left pending and the error propagates.
        """
        self._pending = True
        self._progress = None
        request = PushRequest(remote=self._default_remote, branch=self._branch, credential=cred)
        try:
            self._engine.submit(request)
        except Exception:
            self._pending = False
            self._request_id = None
            raise
        self._request_id = request.id
        logger.info("Push of %s to %s started", self._branch, self._default_remote)

    def on_notification(self, notification: Notification) -> None:
        """React to a background change; only our own push is of interest."""
        if not self._visible or notification.kind is not NotificationKind.PUSH:
            return
        if notification.request_id is not None and notification.request_id != self._request_id:
            logger.debug("Ignoring stale push notification %s", notification.request_id)
            return
        self._update()

    def _update(self) -> None:
        self._pending = self._engine.is_pending()
        self._progress = self._engine.progress()

        if self._pending:
            return

        error = self._engine.last_result()
        if error is not None:
            self._events.push(
                InternalEvent(
                    InternalEventKind.PUSH_FAILED,
                    strings.PUSH_FAILED_MSG.format(error=error),
                )
            )
        prompted = self._prompted_cred
        self.hide()
        if error is None and self._remember_credentials and prompted is not None:
            self._credentials.store(self._default_remote, prompted)

    def get_progress(self) -> tuple[str, int]:
        return progress_label(self._progress)

    # ------------------------------------------------------------------
    # Commands & events
    # ------------------------------------------------------------------

    def commands(self, force_all: bool = False) -> list[CommandInfo]:
        """Command hints; while visible these replace everyone else's."""
        if self.cred_prompt.is_visible():
            return self.cred_prompt.commands(force_all)
        if not self._visible and not force_all:
            return []
        return [CommandInfo(strings.close_msg(self._key_config), not self._pending, self._visible)]

    def event(self, ev: KeyEvent) -> bool:
        """Handle a key press; every key is consumed while visible."""
        if not self._visible:
            return False

        if ev == self._key_config.exit_popup:
            self.hide()

        if self.cred_prompt.event(ev):
            return True

        if ev == self._key_config.enter:
            cred = self.cred_prompt.get_cred()
            if self.cred_prompt.is_visible() and cred.is_complete():
                try:
                    self.request_push(cred)
                finally:
                    self.cred_prompt.hide()
                self._prompted_cred = cred
            else:
                self.hide()
        return True
