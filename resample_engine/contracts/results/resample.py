from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from .common import JSONDict, ResultModel

SCHEMA_VERSION = "1"


class ResampleInstancePayload(ResultModel):
    """Serialized form of a resample instance.

    Train/test sets are stored as ordered lists of 0-based row indices; bootstrap
    train sets keep their repetitions and draw order.
    """

    schema_version: str = SCHEMA_VERSION
    size: int
    desc: Optional[JSONDict] = None
    train_sets: List[List[int]]
    test_sets: List[List[int]]
    group: Optional[List[Any]] = None


class ResampleSummary(ResultModel):
    """JSON-friendly digest of a :class:`ResampleResult`."""

    learner_id: str
    task_id: str
    resampling: str
    iterations: int
    aggr: Dict[str, Optional[float]] = Field(default_factory=dict)
    measures_test: Dict[str, List[Optional[float]]] = Field(default_factory=dict)
    measures_train: Optional[Dict[str, List[Optional[float]]]] = None
    runtime: float = 0.0
    notes: List[str] = Field(default_factory=list)
