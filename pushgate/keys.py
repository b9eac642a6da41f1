"""Key events and key bindings, independent of any UI toolkit.

Key names follow Tk keysyms (``Escape``, ``Return``, ``BackSpace`` ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pushgate.config import DEFAULT_CONFIG


@dataclass(frozen=True)
class KeyEvent:
    """A key press; equality only looks at the key name."""

    key: str
    char: str = field(default="", compare=False)

    @property
    def is_printable(self) -> bool:
        return len(self.char) == 1 and self.char.isprintable()


@dataclass(frozen=True)
class KeyConfig:
    exit_popup: KeyEvent = KeyEvent(DEFAULT_CONFIG["key_exit_popup"])
    enter: KeyEvent = KeyEvent(DEFAULT_CONFIG["key_enter"])
    backspace: KeyEvent = KeyEvent(DEFAULT_CONFIG["key_backspace"])

    @classmethod
    def from_config(cls, config) -> KeyConfig:
        """Build bindings from a :class:`~pushgate.config.ConfigManager`."""
        return cls(
            exit_popup=KeyEvent(config.get("key_exit_popup", DEFAULT_CONFIG["key_exit_popup"])),
            enter=KeyEvent(config.get("key_enter", DEFAULT_CONFIG["key_enter"])),
            backspace=KeyEvent(config.get("key_backspace", DEFAULT_CONFIG["key_backspace"])),
        )


def key_hint(key: KeyEvent) -> str:
    """Short label of *key* for command hints, e.g. ``esc``."""
    return {"Escape": "esc", "Return": "enter", "BackSpace": "backspace"}.get(
        key.key, key.key.lower()
    )
