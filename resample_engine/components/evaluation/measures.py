from __future__ import annotations

"""Performance measure definitions.

A :class:`Measure` wraps a ``fun(truth, response) -> float`` together with its
optimization direction and its active aggregation. Measures are frozen: use
:func:`resample_engine.registries.aggregators.bind` (or
:meth:`Measure.with_aggregation`) to get a differently aggregated copy.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

import numpy as np

from resample_engine.components.aggregation.types import Aggregation
from resample_engine.core.errors import AggregationError
from resample_engine.core.shapes import check_len, coerce_1d

MeasureFn = Callable[[np.ndarray, np.ndarray], float]


def _default_aggregation() -> Aggregation:
    from resample_engine.registries.aggregators import get_aggregation

    return get_aggregation("test.mean")


@dataclass(frozen=True)
class Measure:
    id: str
    fun: MeasureFn = field(compare=False)
    minimize: bool = True
    best: float = 0.0
    worst: float = float("inf")
    # task kinds this measure applies to (None = any)
    kind: Optional[str] = None
    aggregation: Aggregation = field(default_factory=_default_aggregation, compare=False)
    note: str = ""

    @property
    def key(self) -> str:
        """Result key, e.g. ``"mmce.test.mean"``."""
        return f"{self.id}.{self.aggregation.id}"

    def evaluate(self, truth, response) -> float:
        """Score ``response`` against ``truth``.

        Raises
        ------
        AggregationError
            If the split is empty (the value is undefined for that iteration).
        """
        truth = coerce_1d(truth)
        response = coerce_1d(response)
        check_len(truth, response, "response")
        if truth.shape[0] == 0:
            raise AggregationError(f"Measure {self.id!r} is undefined on an empty split.")
        return float(self.fun(truth, response))

    def with_aggregation(self, aggregation: Aggregation) -> "Measure":
        return replace(self, aggregation=aggregation)

    def __repr__(self) -> str:
        return f"Measure({self.key})"
