"""Literal choice sets shared by contracts, registries and use-cases."""

from __future__ import annotations

from typing import Literal, Tuple

ResampleMethod = Literal["Holdout", "CV", "RepCV", "LOO", "Subsample", "Bootstrap"]
PredictOn = Literal["test", "train", "both"]
BlockingMode = Literal["none", "respect_blocks", "fixed_groups"]
ParallelBackend = Literal["loky", "threading", "multiprocessing"]

RESAMPLE_METHODS: Tuple[str, ...] = ("Holdout", "CV", "RepCV", "LOO", "Subsample", "Bootstrap")

# Default number of iterations when the caller does not pass one.
DEFAULT_ITERS = {
    "Holdout": 1,
    "CV": 10,
    "RepCV": 10,
    "LOO": 1,
    "Subsample": 30,
    "Bootstrap": 30,
}

__all__ = [
    "ResampleMethod",
    "PredictOn",
    "BlockingMode",
    "ParallelBackend",
    "RESAMPLE_METHODS",
    "DEFAULT_ITERS",
]
