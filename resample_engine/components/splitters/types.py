from __future__ import annotations

"""Partitioner return contract.

Partitioners produce a single, stable fold payload shape: positional train and
test index arrays into the original dataset.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass(frozen=True)
class Split:
    """A single train/test split (fold).

    Notes
    -----
    - Indices are 0-based row positions into the dataset the split was drawn for.
    - Bootstrap train sets may contain repeated indices; test sets never do.
    - ``group`` is the held-out group label for fixed-group folds, else None.
    """

    train_idx: np.ndarray
    test_idx: np.ndarray
    group: Optional[Any] = None

    @property
    def n_train(self) -> int:
        return int(self.train_idx.shape[0])

    @property
    def n_test(self) -> int:
        return int(self.test_idx.shape[0])
