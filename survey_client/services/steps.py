from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class StepCounter(Protocol):
    """Step counting collaborator, switched on once the user grants permission."""

    @property
    def is_running(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class StepsManager(StepCounter):
    """In-process on/off switch for step counting."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
        logger.info("Step counter started")

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
        logger.info("Step counter stopped")
