"""Interactive username/password prompt used when a push needs credentials."""

from __future__ import annotations

import logging
from enum import Enum, auto

from pushgate import strings
from pushgate.commands import CommandInfo
from pushgate.credentials import BasicAuthCredential
from pushgate.keys import KeyConfig, KeyEvent

logger = logging.getLogger(__name__)


class InputStage(Enum):
    """Which field the prompt is currently editing."""

    USERNAME = auto()
    PASSWORD = auto()


class CredentialPrompt:
    """Collects the missing half (or both halves) of a credential.

    The prompt asks for the username first unless one is already known, then
    for the password.  Confirming the password is deliberately *not*
    consumed, so the owning controller sees the same key press and can start
    the push.
    """

    def __init__(self, key_config: KeyConfig | None = None) -> None:
        self._key_config = key_config or KeyConfig()
        self._visible = False
        self._cred = BasicAuthCredential()
        self._stage: InputStage | None = None
        self._buffer = ""

    # ------------------------------------------------------------------
    # Credential
    # ------------------------------------------------------------------

    def set_cred(self, cred: BasicAuthCredential) -> None:
        self._cred = BasicAuthCredential(cred.username, cred.password)

    def get_cred(self) -> BasicAuthCredential:
        return self._cred

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    @property
    def stage(self) -> InputStage | None:
        return self._stage

    @property
    def input_label(self) -> str:
        if self._stage is InputStage.USERNAME:
            return strings.CRED_USERNAME_LABEL
        if self._stage is InputStage.PASSWORD:
            return strings.CRED_PASSWORD_LABEL
        return ""

    @property
    def display_text(self) -> str:
        """Current input, with the password masked."""
        if self._stage is InputStage.PASSWORD:
            return "*" * len(self._buffer)
        return self._buffer

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def is_visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        self._visible = True
        self._buffer = ""
        self._stage = InputStage.PASSWORD if self._cred.username else InputStage.USERNAME
        logger.debug("Credential prompt shown at %s stage", self._stage.name)

    def hide(self) -> None:
        self._visible = False
        self._stage = None
        self._buffer = ""

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def commands(self, force_all: bool = False) -> list[CommandInfo]:
        if not self._visible and not force_all:
            return []
        return [
            CommandInfo(strings.validate_msg(self._key_config), True, self._visible),
            CommandInfo(strings.close_msg(self._key_config), True, self._visible),
        ]

    def event(self, ev: KeyEvent) -> bool:
        """Handle *ev*; return True if it was consumed."""
        if not self._visible:
            return False

        if ev == self._key_config.exit_popup:
            self.hide()
            return True

        if ev == self._key_config.enter:
            return self._confirm_stage()

        if ev == self._key_config.backspace:
            self._buffer = self._buffer[:-1]
        elif ev.is_printable and self._stage is not None:
            self._buffer += ev.char
        return True

    def _confirm_stage(self) -> bool:
        if self._stage is InputStage.USERNAME:
            self._cred = BasicAuthCredential(self._buffer or None, None)
            self._buffer = ""
            self._stage = InputStage.PASSWORD
            return True

        if self._stage is InputStage.PASSWORD:
            self._cred = BasicAuthCredential(self._cred.username, self._buffer or None)
            self._buffer = ""
            self._stage = None
            return False

        self.hide()
        return True
