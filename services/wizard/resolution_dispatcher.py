# -*- coding: utf-8 -*-
"""
Resolution dispatch and last-request-wins tracking.

ConstraintResolver calls and the final create call are blocking I/O. A
dispatcher runs such a job and reports the outcome through callbacks on the
controller's thread:

- ImmediateDispatcher runs the job inline (tests, scripted use)
- QThreadDispatcher runs each job in a ResolutionWorker QThread and relays
  the worker's signals back to the thread that owns the dispatcher

RequestTracker decides whether an arriving result is still wanted: every
request gets a ticket, and only the newest ticket of a channel is current.
"""

from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Dict, Hashable, List, Optional

from PyQt5.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from utils.logger import get_logger

logger = get_logger(__name__)

Job = Callable[[], Any]
SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


# ==================== Tickets ====================

@dataclass(frozen=True)
class ResolutionTicket:
    """Identity of one resolution request."""
    channel: str
    key: Hashable
    token: int


class RequestTracker:
    """
    Last-request-wins bookkeeping per channel.

    Issuing a ticket supersedes every earlier ticket of the same channel;
    invalidating a channel supersedes the in-flight one without issuing a
    new request.
    """

    def __init__(self):
        self._tokens = count(1)
        self._current: Dict[str, int] = {}
        self._pending: Dict[str, ResolutionTicket] = {}
        self._last_keys: Dict[str, Hashable] = {}

    def issue(self, channel: str, key: Hashable = None) -> ResolutionTicket:
        ticket = ResolutionTicket(channel=channel, key=key, token=next(self._tokens))
        self._current[channel] = ticket.token
        self._pending[channel] = ticket
        self._last_keys[channel] = key
        logger.debug(f"Issued {channel} request #{ticket.token} for {key!r}")
        return ticket

    def is_current(self, ticket: ResolutionTicket) -> bool:
        return self._current.get(ticket.channel) == ticket.token

    def complete(self, ticket: ResolutionTicket) -> bool:
        """
        Mark a request finished.

        Returns:
            True if the result should be applied, False if it is stale
        """
        if not self.is_current(ticket):
            logger.debug(f"Dropping stale {ticket.channel} result #{ticket.token} for {ticket.key!r}")
            return False
        self._pending.pop(ticket.channel, None)
        return True

    def invalidate(self, channel: str):
        """Supersede the in-flight request of a channel, if any."""
        if channel in self._pending:
            logger.debug(f"Invalidated in-flight {channel} request #{self._pending[channel].token}")
        self._current[channel] = next(self._tokens)
        self._pending.pop(channel, None)

    def is_pending(self, channel: str) -> bool:
        return channel in self._pending

    def pending_channels(self) -> List[str]:
        return list(self._pending)

    def last_key(self, channel: str) -> Optional[Hashable]:
        return self._last_keys.get(channel)


# ==================== Dispatchers ====================

class ResolutionDispatcher:
    """Runs a blocking job and reports its outcome through callbacks."""

    def dispatch(self, job: Job, on_success: SuccessCallback, on_error: ErrorCallback):
        """Run job; call on_success(result) or on_error(exception) exactly once."""
        raise NotImplementedError(f"{self.__class__.__name__} does not implement dispatch()")

    def shutdown(self, timeout_ms: int = 5000):
        """Wait for outstanding jobs. No-op for synchronous dispatchers."""


class ImmediateDispatcher(ResolutionDispatcher):
    """Runs jobs inline; callbacks fire before dispatch() returns."""

    def dispatch(self, job: Job, on_success: SuccessCallback, on_error: ErrorCallback):
        try:
            result = job()
        except Exception as e:
            on_error(e)
            return
        on_success(result)


class ResolutionWorker(QThread):
    """Background worker for one resolution job."""

    succeeded = pyqtSignal(object)  # job result
    failed = pyqtSignal(object)  # exception

    def __init__(self, job: Job):
        super().__init__()
        self.job = job

    def run(self):
        """Run the job in background."""
        try:
            result = self.job()
        except Exception as e:
            logger.debug(f"Resolution job failed in worker: {e}")
            self.failed.emit(e)
            return
        self.succeeded.emit(result)


class QThreadDispatcher(QObject, ResolutionDispatcher):
    """
    Runs each job in its own ResolutionWorker.

    Worker signals are connected to slots of this object, so callbacks run on
    the thread the dispatcher lives in (the controller's thread), never on the
    worker thread.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._callbacks: Dict[ResolutionWorker, tuple] = {}

    def dispatch(self, job: Job, on_success: SuccessCallback, on_error: ErrorCallback):
        worker = ResolutionWorker(job)
        self._callbacks[worker] = (on_success, on_error)
        worker.succeeded.connect(self._on_worker_succeeded)
        worker.failed.connect(self._on_worker_failed)
        worker.finished.connect(self._on_worker_finished)
        worker.start()

    @property
    def active_count(self) -> int:
        return len(self._callbacks)

    @pyqtSlot(object)
    def _on_worker_succeeded(self, result):
        callbacks = self._callbacks.get(self.sender())
        if callbacks:
            callbacks[0](result)

    @pyqtSlot(object)
    def _on_worker_failed(self, error):
        callbacks = self._callbacks.get(self.sender())
        if callbacks:
            callbacks[1](error)

    @pyqtSlot()
    def _on_worker_finished(self):
        worker = self.sender()
        self._callbacks.pop(worker, None)
        if worker is not None:
            worker.deleteLater()

    def shutdown(self, timeout_ms: int = 5000):
        for worker in list(self._callbacks):
            worker.wait(timeout_ms)


def create_dispatcher(mode: str) -> ResolutionDispatcher:
    """Build the dispatcher for a RESOLUTION_MODE setting ("thread" or "immediate")."""
    if mode == "immediate":
        return ImmediateDispatcher()
    if mode != "thread":
        logger.warning(f"Unknown resolution mode {mode!r}, using background threads")
    return QThreadDispatcher()
