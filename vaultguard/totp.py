"""
Time-based one-time password display.

A TotpGenerator runs at most one stream at a time. Each stream is a worker
thread that computes the current code and the seconds left in its time step
once per tick. Ticks are relayed to the consumer on the generator's thread;
ticks of a stream that was stopped or replaced are dropped there.
"""

import binascii
import logging
import time
from typing import Callable, Optional, Tuple

import pyotp
from PyQt5.QtCore import QObject, Qt, QThread, pyqtSignal, pyqtSlot

from . import config
from .errors import InvalidSeed

logger = logging.getLogger(__name__)

_SLEEP_SLICE_MS = 50


def make_totp(seed: str) -> pyotp.TOTP:
    """
    Build a TOTP for a base32 seed, validating it once.

    Raises:
        InvalidSeed: If the seed is empty or not base32
    """
    normalized = (seed or "").replace(" ", "")
    if not normalized:
        raise InvalidSeed("One-time password seed is empty")
    try:
        totp = pyotp.TOTP(normalized, digits=config.TOTP_DIGITS, interval=config.TOTP_INTERVAL_SECONDS)
        totp.now()
    except (binascii.Error, ValueError) as e:
        raise InvalidSeed("One-time password seed is not valid base32") from e
    return totp


def current_code(seed: str, now: Optional[float] = None) -> Tuple[str, int]:
    """Return the code for *seed* at *now* and the seconds left in its step."""
    return code_at(make_totp(seed), time.time() if now is None else now)


def code_at(totp: pyotp.TOTP, now: float) -> Tuple[str, int]:
    """
    Return the code at *now* and the whole seconds left in its time step.

    The remainder is computed in milliseconds and truncated, so it counts
    down from 29 to 0 within a step and is 30 only at the exact instant a
    step begins.
    """
    step_ms = totp.interval * 1000
    remaining = (step_ms - int(now * 1000) % step_ms) // 1000
    return totp.at(int(now)), remaining


class TotpWorker(QThread):
    """Worker thread emitting one code per tick until interrupted."""

    tick = pyqtSignal(int, str, int)

    def __init__(self, totp: pyotp.TOTP, stream: int, tick_ms: int = config.TOTP_TICK_MILLISECONDS):
        super().__init__()
        self.totp = totp
        self.stream = stream
        self.tick_ms = tick_ms

    def run(self):
        while not self.isInterruptionRequested():
            code, remaining = code_at(self.totp, time.time())
            self.tick.emit(self.stream, code, remaining)
            self._wait_for_next_tick()

    def _wait_for_next_tick(self):
        deadline = time.monotonic() + self.tick_ms / 1000
        while not self.isInterruptionRequested() and time.monotonic() < deadline:
            self.msleep(_SLEEP_SLICE_MS)


class TotpGenerator(QObject):
    """
    Publishes one-time codes to a single consumer.

    Attaching a new consumer detaches the previous one and stops its stream.
    code_changed is emitted on the thread the generator lives in, so ticks
    are delivered while that thread runs its event loop.
    """

    code_changed = pyqtSignal(str, int)

    def __init__(self, scheduler=None, parent=None):
        super().__init__(parent)
        self.scheduler = scheduler
        self._worker: Optional[TotpWorker] = None
        self._stream = 0
        self._consumer: Optional[Callable[[str, int], None]] = None

    def subscribe(self, consumer: Callable[[str, int], None], connection_type=Qt.AutoConnection) -> None:
        """Attach *consumer*, detaching and stopping any previous one."""
        if self._consumer is not None:
            self.unsubscribe()
        self.code_changed.connect(consumer, connection_type)
        self._consumer = consumer

    def unsubscribe(self) -> None:
        """Detach the current consumer and stop its stream."""
        if self._consumer is not None:
            self.code_changed.disconnect(self._consumer)
            self._consumer = None
        self.stop()

    def start(self, seed: str) -> None:
        """
        Start a stream for *seed*, replacing any running stream.

        Raises:
            InvalidSeed: If the seed cannot produce codes
        """
        totp = make_totp(seed)
        self.stop()
        self._stream += 1
        worker = TotpWorker(totp, self._stream)
        worker.tick.connect(self._relay, Qt.QueuedConnection)
        self._worker = worker
        if self.scheduler is not None:
            self.scheduler.start(worker)
        else:
            worker.start()
        logger.debug("TOTP stream started")

    def stop(self) -> None:
        """Stop the running stream; no tick is published after this returns."""
        worker, self._worker = self._worker, None
        # Ticks already queued carry the old stream number and are dropped
        self._stream += 1
        if worker is None:
            return
        worker.requestInterruption()
        worker.tick.disconnect()
        worker.wait()
        logger.debug("TOTP stream stopped")

    def is_running(self) -> bool:
        return self._worker is not None and self._worker.isRunning()

    @pyqtSlot(int, str, int)
    def _relay(self, stream: int, code: str, remaining: int) -> None:
        if self._worker is not None and stream == self._stream:
            self.code_changed.emit(code, remaining)
