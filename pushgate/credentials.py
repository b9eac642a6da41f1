"""Credential lookup for push remotes.

Usernames come from the remote URL or ``credential.username`` in git config.
Passwords are kept in the OS keyring, keyed by ``user@host`` under the
configured service name; they are never written to disk by PushGate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

import git
import keyring
import keyring.errors

logger = logging.getLogger(__name__)

_AUTH_SCHEMES = ("http", "https")


class CredentialError(Exception):
    """Raised when a remote cannot be inspected or the keyring fails."""


@dataclass
class BasicAuthCredential:
    """A username/password pair; either half may still be missing."""

    username: str | None = None
    password: str | None = None

    def is_complete(self) -> bool:
        """True when both fields are present and non-empty."""
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        masked = "***" if self.password else None
        return f"BasicAuthCredential(username={self.username!r}, password={masked!r})"


class CredentialStore:
    """Answers the two questions a push needs before it can start.

    * does the remote want a username/password at all?
    * what do we already know about that username/password?
    """

    def __init__(self, repo: git.Repo, service: str = "PushGate") -> None:
        self._repo = repo
        self._service = service

    def _remote_url(self, remote: str) -> str:
        try:
            return self._repo.remote(remote).url
        except ValueError as exc:
            raise CredentialError(f"Unknown remote {remote!r}") from exc

    def needs_authentication(self, remote: str) -> bool:
        """Return True if *remote* is reached over HTTP(S)."""
        scheme = urlsplit(self._remote_url(remote)).scheme.lower()
        return scheme in _AUTH_SCHEMES

    def extract(self, remote: str) -> BasicAuthCredential:
        """Collect whatever credential is stored for *remote*.

        The result may be incomplete; that is not an error.

        Raises:
            CredentialError: Unknown remote or keyring backend failure.
        """
        parts = urlsplit(self._remote_url(remote))
        username = parts.username or self._configured_username()
        password = parts.password

        if username and not password and parts.hostname:
            try:
                password = keyring.get_password(
                    self._service, _account(username, parts.hostname)
                )
            except keyring.errors.KeyringError as exc:
                raise CredentialError(f"Keyring lookup failed: {exc}") from exc

        logger.debug(
            "Stored credential for %s: username=%s, password=%s",
            remote,
            "yes" if username else "no",
            "yes" if password else "no",
        )
        return BasicAuthCredential(username or None, password or None)

    def store(self, remote: str, cred: BasicAuthCredential) -> None:
        """Save the password of a complete *cred* in the keyring."""
        host = urlsplit(self._remote_url(remote)).hostname
        if not host or not cred.is_complete():
            return
        try:
            keyring.set_password(self._service, _account(cred.username, host), cred.password)
        except keyring.errors.KeyringError as exc:
            raise CredentialError(f"Keyring write failed: {exc}") from exc
        logger.info("Password stored in keyring for %s@%s", cred.username, host)

    def forget(self, remote: str, username: str) -> None:
        """Remove the stored password for *username* on *remote*."""
        host = urlsplit(self._remote_url(remote)).hostname
        if not host:
            return
        try:
            keyring.delete_password(self._service, _account(username, host))
        except keyring.errors.PasswordDeleteError:
            pass
        logger.debug("Password deleted from keyring for %s@%s", username, host)

    def _configured_username(self) -> str | None:
        reader = self._repo.config_reader()
        value = reader.get_value("credential", "username", default="")
        return str(value) or None


def _account(username: str, host: str) -> str:
    """Keyring account key for a remote login (user@host)."""
    return f"{username}@{host}"
