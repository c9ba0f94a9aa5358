"""Critical-section guard shared by every purchase.

A single non-blocking lock: whoever holds it is the only transaction in
flight.  A second entry, whether nested inside a payment callback on the
same thread or racing in from another thread, is rejected immediately
rather than queued.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from market.domain.exceptions import ReentrancyRejectedError


class ReentrancyGuard:

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the guard for the duration of the block.

        Raises ReentrancyRejectedError if it is already held.  Released on
        every exit path, including exceptions.
        """
        if not self._lock.acquire(blocking=False):
            raise ReentrancyRejectedError("Another purchase is already in progress")
        try:
            yield
        finally:
            self._lock.release()
