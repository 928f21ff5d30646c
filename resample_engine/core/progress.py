from __future__ import annotations

"""Progress reporting primitives.

The engine stays runnable without any specific UI. The orchestrator optionally
accepts a progress callback to report per-iteration progress; callers can adapt
their own progress bars or registries to this protocol.
"""

import logging
from typing import Optional, Protocol


class ProgressCallback(Protocol):
    """A minimal progress reporting interface."""

    def init(self, *, total: int, label: Optional[str] = None) -> None:  # pragma: no cover
        ...

    def update(self, *, current: int, label: Optional[str] = None) -> None:  # pragma: no cover
        ...

    def finalize(self, *, label: Optional[str] = None) -> None:  # pragma: no cover
        ...


class LoggingProgress:
    """Report progress through a logger (used for ``show_progress=True``)."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger or logging.getLogger("resample_engine.progress")
        self._level = level
        self._total = 0

    def init(self, *, total: int, label: Optional[str] = None) -> None:
        self._total = int(total)
        self._logger.log(self._level, "%s (0/%d)", label or "Resampling", self._total)

    def update(self, *, current: int, label: Optional[str] = None) -> None:
        self._logger.log(self._level, "%s (%d/%d)", label or "Resampling", current, self._total)

    def finalize(self, *, label: Optional[str] = None) -> None:
        self._logger.log(self._level, "%s", label or "Resampling done")
