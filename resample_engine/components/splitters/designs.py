from __future__ import annotations

"""Base resampling designs over ``n`` exchangeable units.

Each design maps ``(n, desc, rng)`` to a list of :class:`Split`. Units are
observations for plain and stratified resampling, and block identities when
blocks are respected; :mod:`.partition` maps units back to rows.

Fold generation uses the scikit-learn splitters (``KFold``, ``RepeatedKFold``,
``LeaveOneOut``, ``ShuffleSplit``), seeded from ``rng``. Non-bootstrap index
sets are returned sorted. Bootstrap train sets keep the draw order (with
repetitions).
"""

from typing import Iterable, List, Tuple

import numpy as np
from numpy.random import Generator
from sklearn.model_selection import KFold, LeaveOneOut, RepeatedKFold, ShuffleSplit

from resample_engine.contracts.resample_configs import ResampleDescription

from .types import Split

_MAX_SEED = 2**32 - 1


def _seed(rng: Generator) -> int:
    """Draw a ``random_state`` for a scikit-learn splitter from ``rng``."""
    return int(rng.integers(0, _MAX_SEED))


def _units(n: int) -> np.ndarray:
    # splitters only look at the number of rows
    return np.zeros((n, 1))


def _sorted(a: np.ndarray) -> np.ndarray:
    return np.sort(np.asarray(a, dtype=np.int64), kind="stable")


def _to_splits(pairs: Iterable[Tuple[np.ndarray, np.ndarray]]) -> List[Split]:
    return [Split(train_idx=_sorted(tr), test_idx=_sorted(te)) for tr, te in pairs]


def train_size(n: int, split: float) -> int:
    """Number of training units: ``split * n`` rounded half up (2.5 -> 3)."""
    return int(np.floor(split * n + 0.5))


def holdout_split(n: int, split: float, rng: Generator, *, n_splits: int = 1) -> List[Split]:
    """``n_splits`` independent random splits with :func:`train_size` training units.

    When every unit falls on one side (tiny strata) no shuffling is needed and
    the other side is empty; :func:`.partition.partition` rejects that for
    unstratified designs.
    """
    n_train = train_size(n, split)
    if n_train in (0, n):
        idx = np.arange(n, dtype=np.int64)
        empty = idx[:0]
        one = Split(train_idx=idx, test_idx=empty) if n_train else Split(train_idx=empty, test_idx=idx)
        return [one] * n_splits
    splitter = ShuffleSplit(
        n_splits=n_splits,
        train_size=n_train,
        test_size=n - n_train,
        random_state=_seed(rng),
    )
    return _to_splits(splitter.split(_units(n)))


def cv_folds(n: int, k: int, rng: Generator) -> List[Split]:
    """Shuffled K-fold partition; fold sizes differ by at most one.

    ``KFold`` puts the ``n % k`` larger folds first, which the stratified
    merge relies on when rotating folds.
    """
    return _to_splits(KFold(n_splits=k, shuffle=True, random_state=_seed(rng)).split(_units(n)))


def holdout(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    return holdout_split(n, desc.split, rng)


def cv(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    return cv_folds(n, desc.iters, rng)


def repcv(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    # rep-major: iterations [r*folds, (r+1)*folds) belong to repetition r
    splitter = RepeatedKFold(n_splits=desc.folds, n_repeats=desc.reps, random_state=_seed(rng))
    return _to_splits(splitter.split(_units(n)))


def loo(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    return _to_splits(LeaveOneOut().split(_units(n)))


def subsample(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    return holdout_split(n, desc.split, rng, n_splits=desc.iters)


def bootstrap(n: int, desc: ResampleDescription, rng: Generator) -> List[Split]:
    out: List[Split] = []
    for _ in range(desc.iters):
        train = rng.integers(0, n, size=n, dtype=np.int64)
        drawn = np.zeros(n, dtype=bool)
        drawn[train] = True
        out.append(Split(train_idx=train, test_idx=np.flatnonzero(~drawn).astype(np.int64)))
    return out


def min_units(desc: ResampleDescription) -> int:
    """Smallest number of units the design can be applied to."""
    if desc.method == "CV":
        return desc.iters
    if desc.method == "RepCV":
        return desc.folds
    if desc.method in ("LOO", "Holdout", "Subsample"):
        return 2
    return 1


__all__ = [
    "train_size",
    "holdout_split",
    "cv_folds",
    "holdout",
    "cv",
    "repcv",
    "loo",
    "subsample",
    "bootstrap",
    "min_units",
]
