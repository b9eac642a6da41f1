"""PushGate — entry point.

Configures logging, parses the command line, applies the dark ttk theme,
creates the root window, and starts the Tkinter main loop.
"""

from __future__ import annotations

import argparse
import logging
import sys
import tkinter as tk
from tkinter import ttk

import git

from pushgate.config import ConfigManager
from pushgate.credentials import CredentialError, CredentialStore

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
_DATE_FORMAT = "%H:%M:%S"

_DARK_BG = "#1b2838"
_DARK_FG = "#c7d5e0"
_DARK_ACCENT = "#1a9fff"
_DARK_BUTTON = "#2a3f5f"
_DARK_SELECT = "#2a475e"
_DARK_BORDER = "#374e6a"

DEFAULT_WIDTH = 520
DEFAULT_HEIGHT = 260


def _configure_logging(level: str) -> None:
    """Set up root logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
        stream=sys.stderr,
    )
    # Quieten noisy third-party loggers
    logging.getLogger("git").setLevel(logging.WARNING)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pushgate", description=__doc__.splitlines()[0])
    parser.add_argument("--repo", default=".", help="repository to push from (default: cwd)")
    parser.add_argument("--branch", help="branch to push (default: the checked-out branch)")
    parser.add_argument(
        "--forget-password",
        metavar="USERNAME",
        help="remove the stored password for USERNAME on the default remote and exit",
    )
    parser.add_argument(
        "--remember-credentials",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="save passwords typed at the prompt to the keyring (persisted)",
    )
    return parser.parse_args(argv)


def _apply_settings(args: argparse.Namespace, config: ConfigManager) -> None:
    """Persist settings given on the command line."""
    if args.remember_credentials is not None:
        config.set("remember_credentials", args.remember_credentials)


def _apply_dark_theme(root: tk.Tk) -> None:
    """Apply a dark theme to the handful of ttk widgets PushGate uses."""
    style = ttk.Style(root)
    style.theme_use("clam")
    style.configure(
        ".",
        background=_DARK_BG,
        foreground=_DARK_FG,
        bordercolor=_DARK_BORDER,
        troughcolor=_DARK_BG,
        font=("TkDefaultFont", 11),
    )
    style.configure("TFrame", background=_DARK_BG)
    style.configure("TLabel", background=_DARK_BG, foreground=_DARK_FG)
    style.configure("TButton", background=_DARK_BUTTON, foreground=_DARK_FG, padding=(8, 4))
    style.map("TButton", background=[("active", _DARK_SELECT), ("pressed", _DARK_ACCENT)])
    style.configure("TProgressbar", background=_DARK_ACCENT, troughcolor=_DARK_BG)
    style.configure("TSeparator", background=_DARK_BORDER)
    root.configure(background=_DARK_BG)


def main(argv: list[str] | None = None) -> int:
    """Bootstrap and run PushGate."""
    args = _parse_args(argv)
    config = ConfigManager()
    _apply_settings(args, config)
    _configure_logging(config.get("log_level", "INFO"))
    log = logging.getLogger(__name__)

    try:
        repo = git.Repo(args.repo, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        log.error("Not a git repository: %s", exc)
        return 1

    if args.forget_password:
        store = CredentialStore(repo, config.get("keyring_service"))
        try:
            store.forget(config.get("default_remote"), args.forget_password)
        except CredentialError as exc:
            log.error("%s", exc)
            return 1
        return 0

    branch = args.branch
    if branch is None:
        try:
            branch = repo.active_branch.name
        except TypeError:
            log.error("HEAD is detached — pass --branch")
            return 1

    log.info("Starting PushGate")
    root = tk.Tk()
    root.title("PushGate")
    root.geometry(f"{DEFAULT_WIDTH}x{DEFAULT_HEIGHT}")
    _apply_dark_theme(root)

    from pushgate.ui.app import App

    app = App(root, repo=repo, branch=branch, config=config)  # noqa: F841

    log.info("Entering main loop")
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
