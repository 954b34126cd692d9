"""Waiting for asynchronous engine jobs."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from enum import Enum

COMPLETE = 100


class WaitOutcome(str, Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class ScanIncompleteError(RuntimeError):
    """A scan job did not reach 100% progress."""

    def __init__(self, scan_id: str, outcome: WaitOutcome):
        super().__init__(f"Scan {scan_id} did not complete: {outcome.value}")
        self.scan_id = scan_id
        self.outcome = outcome


def wait_for_completion(
    read_progress: Callable[[], int],
    interval: float,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    on_progress: Callable[[int], None] | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> WaitOutcome:
    """Poll ``read_progress`` every ``interval`` seconds until it reports 100.

    ``timeout`` of None waits forever. Setting ``cancel`` aborts the wait at
    the next sleep.
    """
    token = cancel or threading.Event()
    deadline = None if timeout is None else clock() + timeout
    while True:
        progress = read_progress()
        if on_progress:
            on_progress(progress)
        if progress >= COMPLETE:
            return WaitOutcome.COMPLETED
        if token.is_set():
            return WaitOutcome.CANCELLED

        wait = interval
        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                return WaitOutcome.TIMED_OUT
            wait = min(interval, remaining)
        if token.wait(wait):
            return WaitOutcome.CANCELLED
