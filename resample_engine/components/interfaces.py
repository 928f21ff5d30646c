from __future__ import annotations
from typing import Any, Literal, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

TaskKind = Literal["classification", "regression"]


class DataView(Protocol):
    """Rows of a task restricted to an index set (read-only)."""

    X: Any
    y: np.ndarray
    indices: np.ndarray


@runtime_checkable
class Task(Protocol):
    id: str
    kind: TaskKind

    @property
    def size(self) -> int:
        ...

    @property
    def block_labels(self) -> Optional[np.ndarray]:
        """Block/group label per observation, or None if the task has no blocking."""
        ...

    def strata_labels(self, *, target: bool = False, cols: Sequence[str] = ()) -> np.ndarray:
        """Return one stratum label per observation.

        ``target`` stratifies on the target; ``cols`` on the named columns.
        """
        ...

    def restrict(self, indices: np.ndarray) -> DataView:
        """Return the rows at ``indices`` (repetitions allowed)."""
        ...


@runtime_checkable
class Learner(Protocol):
    id: str

    def fit(self, data: DataView) -> Any:
        """Fit on ``data`` and return a new fitted model; must not mutate shared state."""
        ...

    def predict(self, model: Any, data: DataView) -> np.ndarray:
        """Return one prediction (response) per row of ``data``."""
        ...
