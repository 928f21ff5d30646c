from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from resample_engine.components.aggregation.types import AggregationInputs
from resample_engine.components.evaluation.measures import Measure

from .types import IterationResult


def _per_iteration(iterations: Sequence[IterationResult], measure_id: str, split: str) -> np.ndarray:
    attr = "measures_test" if split == "test" else "measures_train"
    return np.asarray(
        [getattr(it, attr).get(measure_id, float("nan")) for it in iterations],
        dtype=float,
    )


def aggregate_measures(
    measures: Sequence[Measure],
    iterations: Sequence[IterationResult],
    *,
    predict_on: str,
) -> Dict[str, float]:
    """Reduce per-iteration values to one scalar per (measure, aggregation)."""
    predictions = [it.predictions for it in iterations]
    out: Dict[str, float] = {}
    for m in measures:
        inputs = AggregationInputs(
            measure=m,
            test=_per_iteration(iterations, m.id, "test") if predict_on in ("test", "both") else None,
            train=_per_iteration(iterations, m.id, "train") if predict_on in ("train", "both") else None,
            predictions=predictions if all(p is not None for p in predictions) else None,
        )
        out[m.key] = m.aggregation(inputs)
    return out


def measures_frame(
    measures: Sequence[Measure],
    iterations: Sequence[IterationResult],
    *,
    split: str,
) -> pd.DataFrame:
    """One row per iteration, one column per distinct measure id."""
    data: Dict[str, object] = {"iter": [it.iteration for it in iterations]}
    for m in measures:
        if m.id not in data:
            data[m.id] = _per_iteration(iterations, m.id, split)
    return pd.DataFrame(data)


def pool_predictions(iterations: Sequence[IterationResult]) -> Optional[pd.DataFrame]:
    """Concatenate per-iteration predictions into a long table."""
    frames: List[pd.DataFrame] = []
    for it in iterations:
        if it.predictions is None:
            continue
        for set_name in ("test", "train"):
            part = getattr(it.predictions, set_name)
            if part is None or len(part) == 0:
                continue
            frames.append(
                pd.DataFrame(
                    {
                        "id": part.ids,
                        "truth": part.truth,
                        "response": part.response,
                        "iter": it.iteration,
                        "set": set_name,
                    }
                )
            )
    if not frames:
        return None
    return pd.concat(frames, ignore_index=True)
