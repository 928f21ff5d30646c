from __future__ import annotations

"""Shape and index coercion helpers.

Conventions
-----------
- X is 2D: (n_samples, n_features) or a pandas DataFrame
- y is 1D: (n_samples,)
- index sets are 1D integer arrays of 0-based row positions
"""

from typing import Any

import numpy as np

from resample_engine.core.errors import ConfigurationError


def coerce_1d(a: Any) -> np.ndarray:
    """Return ``a`` as a 1D array; column vectors (n, 1) are flattened."""
    arr = np.asarray(a)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1D array; got shape {arr.shape}.")
    return arr


def check_len(y_true: np.ndarray, y_pred_like: np.ndarray, name: str) -> None:
    if y_true.shape[0] != y_pred_like.shape[0]:
        raise ValueError(
            f"Length mismatch: y_true({y_true.shape[0]}) vs {name}({y_pred_like.shape[0]})."
        )


def as_index_array(idx: Any, *, size: int, name: str = "indices") -> np.ndarray:
    """Coerce ``idx`` to a read-only int64 array and check it lies in ``[0, size)``."""
    arr = np.asarray(idx)
    if arr.size == 0:
        arr = np.zeros(0, dtype=np.int64)
    if arr.ndim != 1:
        raise ConfigurationError(f"{name} must be 1D; got shape {arr.shape}.")
    if arr.dtype.kind not in "iu":
        if arr.dtype.kind == "f" and np.all(np.mod(arr, 1) == 0):
            arr = arr.astype(np.int64)
        else:
            raise ConfigurationError(f"{name} must contain integers; got dtype {arr.dtype}.")
    arr = np.ascontiguousarray(arr, dtype=np.int64)
    if arr.size and (arr.min() < 0 or arr.max() >= size):
        raise ConfigurationError(f"{name} out of range for size={size}: [{arr.min()}, {arr.max()}].")
    arr.setflags(write=False)
    return arr


__all__ = ["coerce_1d", "check_len", "as_index_array"]
