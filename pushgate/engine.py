"""Asynchronous push engine for PushGate.

Runs ``git push`` through GitPython on a single daemon worker thread:
- One request in flight at a time (``submit`` while busy raises)
- Progress snapshots parsed from git's sideband output
- Change notifications posted to a shared ``queue.Queue``
- Poll-style queries that are safe from any thread
"""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum, auto

import git
from git import PushInfo, RemoteProgress

from pushgate.credentials import BasicAuthCredential

logger = logging.getLogger(__name__)

_REJECTED_FLAGS = PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED

# One-shot credential helper.  The first empty value resets any helpers from
# the user's git config; the second answers ``get`` from the child env only.
_CREDENTIAL_HELPER = (
    "!f() { test \"$1\" = get && "
    "printf 'username=%s\\npassword=%s\\n' "
    "\"$PUSHGATE_USERNAME\" \"$PUSHGATE_PASSWORD\"; }; f"
)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class PushEngineError(Exception):
    """Base class for engine failures."""


class EngineBusyError(PushEngineError):
    """Raised by ``submit`` when a push is already in flight."""


class PushError(PushEngineError):
    """Raised inside the worker when the remote rejects a ref update."""


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class PushPhase(Enum):
    """Ordered stages of a push as reported by git."""

    ADDING_OBJECTS = auto()
    COMPUTING_DELTAS = auto()
    TRANSFERRING = auto()


@dataclass(frozen=True)
class ProgressSnapshot:
    """Latest known stage and percentage of a running push."""

    phase: PushPhase
    percent: int


class NotificationKind(Enum):
    """Subsystems that post to the notification channel."""

    PUSH = auto()
    FETCH = auto()
    STATUS = auto()


@dataclass(frozen=True)
class Notification:
    """Something changed in a background subsystem."""

    kind: NotificationKind
    request_id: str | None = None


@dataclass
class PushRequest:
    """One push of *branch* to *remote*."""

    remote: str
    branch: str
    credential: BasicAuthCredential | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def refspec(self) -> str:
        return f"refs/heads/{self.branch}:refs/heads/{self.branch}"


# ---------------------------------------------------------------------------
# Progress parsing
# ---------------------------------------------------------------------------

_OP_PHASES: dict[int, PushPhase] = {
    RemoteProgress.COUNTING: PushPhase.ADDING_OBJECTS,
    RemoteProgress.COMPRESSING: PushPhase.COMPUTING_DELTAS,
    RemoteProgress.WRITING: PushPhase.TRANSFERRING,
}


class _PushProgress(RemoteProgress):
    """Forwards git's progress lines to the engine as snapshots."""

    def __init__(self, engine: PushEngine, request: PushRequest) -> None:
        super().__init__()
        self._engine = engine
        self._request = request

    def update(self, op_code, cur_count, max_count=None, message="") -> None:
        phase = _OP_PHASES.get(op_code & self.OP_MASK)
        if phase is None:
            return
        percent = int(float(cur_count) * 100 / float(max_count)) if max_count else 0
        self._engine._set_progress(self._request, ProgressSnapshot(phase, percent))


# ---------------------------------------------------------------------------
# PushEngine
# ---------------------------------------------------------------------------


class PushEngine:
    """Pushes branches on a background worker thread.

    The owner thread calls :meth:`submit` and then polls :meth:`is_pending`,
    :meth:`progress` and :meth:`last_result` whenever a
    :class:`Notification` of kind ``PUSH`` arrives on *notifications*.
    """

    def __init__(self, repo_path: str, notifications: queue.Queue[Notification]) -> None:
        """Initialise the engine and start the worker thread.

        Args:
            repo_path: Working tree (or bare repository) to push from.
            notifications: Channel that receives a ``PUSH`` notification on
                every progress change and once when a request finishes.
        """
        self._repo_path = repo_path
        self._notifications = notifications

        self._lock = threading.Lock()
        self._pending = False
        self._progress: ProgressSnapshot | None = None
        self._last_result: str | None = None

        self._requests: queue.Queue[PushRequest | None] = queue.Queue()
        self._shutdown_event = threading.Event()
        self._worker = threading.Thread(
            target=self._worker_loop,
            name="push-worker",
            daemon=True,
        )
        self._worker.start()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, request: PushRequest) -> None:
        """Start pushing *request* in the background.

        Raises:
            EngineBusyError: A previous request has not finished yet.
            PushEngineError: The engine has been shut down.
        """
        if self._shutdown_event.is_set():
            raise PushEngineError("Push engine is shut down")
        with self._lock:
            if self._pending:
                raise EngineBusyError("A push is already in progress")
            self._pending = True
            self._progress = None
            self._last_result = None
        self._requests.put(request)
        logger.info("Queued push of %s to %s (%s)", request.branch, request.remote, request.id)

    def is_pending(self) -> bool:
        with self._lock:
            return self._pending

    def progress(self) -> ProgressSnapshot | None:
        with self._lock:
            return self._progress

    def last_result(self) -> str | None:
        """Error message of the last finished push, or None on success."""
        with self._lock:
            return self._last_result

    def shutdown(self) -> None:
        """Signal the worker to exit after the current request."""
        self._shutdown_event.set()
        self._requests.put(None)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    def _worker_loop(self) -> None:
        logger.debug("Push worker started")
        while not self._shutdown_event.is_set():
            try:
                request = self._requests.get(timeout=0.5)
            except queue.Empty:
                continue

            if request is None:
                break  # Shutdown sentinel

            self._process(request)
            self._requests.task_done()

        logger.debug("Push worker exiting")

    def _process(self, request: PushRequest) -> None:
        error: str | None = None
        try:
            self._push(request)
            logger.info("Push complete: %s → %s", request.branch, request.remote)
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            logger.error("Push of %s to %s failed: %s", request.branch, request.remote, error)
        finally:
            with self._lock:
                self._pending = False
                self._last_result = error
            self._notify(request)

    def _push(self, request: PushRequest) -> None:
        """Run the push; raises on any failure."""
        repo = git.Repo(self._repo_path)
        try:
            remote = repo.remote(request.remote)
            infos = remote.push(
                request.refspec,
                progress=_PushProgress(self, request),
                env=_push_env(request.credential),
            )
            infos.raise_if_error()
            for info in infos:
                if info.flags & _REJECTED_FLAGS:
                    raise PushError(info.summary.strip() or f"{info.remote_ref_string} rejected")
        finally:
            repo.close()

    def _set_progress(self, request: PushRequest, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            if snapshot == self._progress:
                return
            self._progress = snapshot
        self._notify(request)

    def _notify(self, request: PushRequest) -> None:
        self._notifications.put(Notification(NotificationKind.PUSH, request.id))


def _push_env(cred: BasicAuthCredential | None) -> dict[str, str]:
    """Environment for the git child process; never prompts on a terminal."""
    env = {"GIT_TERMINAL_PROMPT": "0"}
    if cred is not None and cred.is_complete():
        env.update(
            {
                "GIT_CONFIG_COUNT": "2",
                "GIT_CONFIG_KEY_0": "credential.helper",
                "GIT_CONFIG_VALUE_0": "",
                "GIT_CONFIG_KEY_1": "credential.helper",
                "GIT_CONFIG_VALUE_1": _CREDENTIAL_HELPER,
                "PUSHGATE_USERNAME": cred.username or "",
                "PUSHGATE_PASSWORD": cred.password or "",
            }
        )
    return env
