"""
Background workers and the scheduler that owns them.

Workers never touch the vault model. They compute on a snapshot and hand
their result back through a signal; the receiver applies it.
"""

import logging
import threading
from typing import List, Sequence, Tuple

from PyQt5.QtCore import Qt, QThread, pyqtSignal

from . import config
from .breach import BreachChecker
from .errors import BreachCheckFailure
from .models import Entry
from .search import fuzzy_search
from .strength import PasswordStrengthCalculator

logger = logging.getLogger(__name__)


class TaskScheduler:
    """
    Owns every running background worker.

    Created by the composition root and passed to the components that start
    workers; shutdown() stops them all before the process exits.
    """

    def __init__(self, shutdown_timeout_ms: int = config.WORKER_SHUTDOWN_TIMEOUT_MS):
        self.shutdown_timeout_ms = shutdown_timeout_ms
        self._lock = threading.Lock()
        self._workers: List[QThread] = []

    def start(self, worker: QThread) -> QThread:
        """Track and start *worker*."""
        with self._lock:
            self._workers.append(worker)
        worker.finished.connect(lambda: self._forget(worker), Qt.DirectConnection)
        worker.start()
        return worker

    def _forget(self, worker: QThread) -> None:
        with self._lock:
            if worker in self._workers:
                self._workers.remove(worker)

    def active_workers(self) -> List[QThread]:
        with self._lock:
            return list(self._workers)

    def shutdown(self) -> None:
        """Interrupt every worker and wait for it to finish."""
        for worker in self.active_workers():
            worker.requestInterruption()
            if not worker.wait(self.shutdown_timeout_ms):
                logger.warning(f"Worker {type(worker).__name__} did not stop in time, terminating it")
                worker.terminate()
                worker.wait()
            self._forget(worker)


class SearchWorker(QThread):
    """Worker thread for fuzzy search."""

    result = pyqtSignal(list)
    error = pyqtSignal(object)

    def __init__(self, query: str, candidates: Sequence[Entry]):
        super().__init__()
        self.query = query
        self.candidates = list(candidates)

    def run(self):
        """Run the search."""
        try:
            self.result.emit(fuzzy_search(self.query, self.candidates))
        except Exception as e:
            logger.error(f"Search failed: {e}", exc_info=True)
            self.error.emit(e)


class StrengthWorker(QThread):
    """Worker thread for password strength scoring."""

    result = pyqtSignal(object)
    error = pyqtSignal(object)

    def __init__(self, password: str, calculator: PasswordStrengthCalculator):
        super().__init__()
        self.password = password
        self.calculator = calculator

    def run(self):
        """Score the password."""
        try:
            self.result.emit(self.calculator.calculate_strength(self.password))
        except Exception as e:
            logger.error(f"Strength scoring failed: {e}", exc_info=True)
            self.error.emit(e)


class BreachCheckWorker(QThread):
    """
    Worker thread for breach lookups.

    Emits result with a list of (entry, checked_password, count) tuples for
    every breached password. A failed lookup for one entry is reported on
    error and does not stop the others.
    """

    result = pyqtSignal(list)
    error = pyqtSignal(object)

    def __init__(self, entries: Sequence[Entry], checker: BreachChecker):
        super().__init__()
        self.targets: List[Tuple[Entry, str]] = [(e, e.password) for e in entries if e.password]
        self.checker = checker

    def run(self):
        """Check every password in the snapshot."""
        breached = []
        for entry, password in self.targets:
            if self.isInterruptionRequested():
                break
            try:
                count = self.checker.check(password)
            except BreachCheckFailure as e:
                logger.warning(f"Breach check failed for entry '{entry.title}': {e}")
                self.error.emit(e)
                continue
            if count > 0:
                breached.append((entry, password, count))
        self.result.emit(breached)
