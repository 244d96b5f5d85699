"""Failed screenshot tests recorded during a run."""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from src.models.screenshot import ScreenshotTest

logger = logging.getLogger(__name__)


class FailureLog:
    """Append-only, ordered record of failed screenshot tests.

    A test name is recorded at most once. Appends are serialized so tests
    running on several threads can share one log.
    """

    def __init__(self) -> None:
        self._failures: list[ScreenshotTest] = []
        self._names: set[str] = set()
        self._lock = threading.Lock()

    def append(self, test: ScreenshotTest) -> bool:
        """Record a failed test. Returns False if it was already recorded."""
        with self._lock:
            if test.name in self._names:
                logger.debug("Failure for %s already recorded", test.name)
                return False
            self._names.add(test.name)
            self._failures.append(test)
        return True

    @property
    def failures(self) -> tuple[ScreenshotTest, ...]:
        with self._lock:
            return tuple(self._failures)

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)

    def __iter__(self) -> Iterator[ScreenshotTest]:
        return iter(self.failures)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._names
