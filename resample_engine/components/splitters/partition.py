from __future__ import annotations

"""Index partitioning under a resampling design.

:func:`partition` turns a :class:`ResampleDescription` and a dataset size into
the list of train/test splits of an instance. The base design comes from the
partitioner registry; stratification, block-respecting resampling and fixed
groups are applied here so that every registered design gets them for free.
"""

from typing import Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from numpy.random import Generator
from sklearn.model_selection import LeaveOneGroupOut

from resample_engine.contracts.resample_configs import ResampleDescription
from resample_engine.core.errors import ConfigurationError
from resample_engine.registries.partitioners import get_partitioner
from resample_engine.runtime.random.shuffle import as_generator

from .designs import min_units
from .types import Split

_CV_METHODS = ("CV", "RepCV")


def _factorize(labels: Any, *, size: int, what: str) -> tuple[np.ndarray, np.ndarray]:
    """Return (codes, levels) with levels in order of first appearance."""
    arr = labels.to_numpy() if isinstance(labels, (pd.Series, pd.Index)) else np.asarray(labels, dtype=object)
    if arr.ndim != 1:
        raise ConfigurationError(f"{what} must be 1D; got shape {arr.shape}.")
    if arr.shape[0] != size:
        raise ConfigurationError(f"{what} has {arr.shape[0]} entries but the dataset size is {size}.")
    codes, levels = pd.factorize(arr, use_na_sentinel=False)
    return codes.astype(np.int64), np.asarray(levels, dtype=object)


def _merge(parts: Sequence[np.ndarray], *, keep_order: bool) -> np.ndarray:
    if not parts:
        return np.zeros(0, dtype=np.int64)
    merged = np.concatenate([np.asarray(p, dtype=np.int64) for p in parts])
    return merged if keep_order else np.sort(merged, kind="stable")


def _rotate_folds(splits: List[Split], k: int, offset: int) -> List[Split]:
    """Shift fold assignment by ``offset`` within each block of ``k`` folds."""
    if offset % k == 0:
        return splits
    out: List[Split] = []
    for start in range(0, len(splits), k):
        block = splits[start : start + k]
        out.extend(block[(j - offset) % k] for j in range(k))
    return out


def _n_folds(desc: ResampleDescription) -> int:
    return desc.folds if desc.method == "RepCV" else desc.iters


def _check_units(desc: ResampleDescription, n: int, what: str) -> None:
    need = min_units(desc)
    if n < need:
        if desc.method in _CV_METHODS:
            raise ConfigurationError(
                f"{what} ({n}) is smaller than the number of requested folds ({need})."
            )
        raise ConfigurationError(f"{what} ({n}) is too small for {desc.method} (need at least {need}).")


def _fixed_group_splits(codes: np.ndarray, levels: np.ndarray) -> List[Split]:
    if levels.shape[0] < 2:
        raise ConfigurationError(
            f"Fixed groups need at least 2 distinct group labels, got {levels.shape[0]}."
        )
    # codes follow first appearance, and LeaveOneGroupOut walks them in sorted order
    folds = LeaveOneGroupOut().split(np.zeros((codes.shape[0], 1)), groups=codes)
    return [
        Split(
            train_idx=np.asarray(train, dtype=np.int64),
            test_idx=np.asarray(test, dtype=np.int64),
            group=levels[codes[test[0]]],
        )
        for train, test in folds
    ]


def _blocked_splits(
    desc: ResampleDescription,
    codes: np.ndarray,
    n_blocks: int,
    rng: Generator,
) -> List[Split]:
    _check_units(desc, n_blocks, "Number of blocks")
    members = [np.flatnonzero(codes == b).astype(np.int64) for b in range(n_blocks)]
    unit_splits = get_partitioner(desc.method)(n_blocks, desc, rng)
    keep_order = desc.is_bootstrap
    return [
        Split(
            train_idx=_merge([members[u] for u in s.train_idx], keep_order=keep_order),
            test_idx=_merge([members[u] for u in s.test_idx], keep_order=False),
        )
        for s in unit_splits
    ]


def _stratified_splits(
    desc: ResampleDescription,
    codes: np.ndarray,
    n_strata: int,
    rng: Generator,
) -> List[Split]:
    fn = get_partitioner(desc.method)
    k = _n_folds(desc)
    per_stratum: List[List[Split]] = []
    offset = 0
    for s in range(n_strata):
        members = np.flatnonzero(codes == s).astype(np.int64)
        if desc.method in _CV_METHODS:
            _check_units(desc, members.shape[0], f"Stratum {s} size")
        local = fn(members.shape[0], desc, rng)
        if desc.method in _CV_METHODS:
            # spread the larger chunks of successive strata over different folds
            local = _rotate_folds(local, k, offset)
            offset = (offset + members.shape[0] % k) % k
        per_stratum.append(
            [Split(train_idx=members[sp.train_idx], test_idx=members[sp.test_idx]) for sp in local]
        )

    n_iter = len(per_stratum[0])
    keep_order = desc.is_bootstrap
    return [
        Split(
            train_idx=_merge([ps[i].train_idx for ps in per_stratum], keep_order=keep_order),
            test_idx=_merge([ps[i].test_idx for ps in per_stratum], keep_order=False),
        )
        for i in range(n_iter)
    ]


def partition(
    desc: ResampleDescription,
    size: int,
    *,
    rng: Union[None, int, Generator] = None,
    group_labels: Optional[Any] = None,
    strata_labels: Optional[Any] = None,
) -> List[Split]:
    """Partition ``range(size)`` into train/test splits according to ``desc``.

    Parameters
    ----------
    desc : ResampleDescription
        Resampling design.
    size : int
        Number of observations.
    rng : None | int | numpy.random.Generator
        Randomness source; unused for LOO and fixed groups.
    group_labels : array-like of shape (size,), optional
        Block/group label per observation. Required when ``desc.blocking`` is
        ``"respect_blocks"`` or ``"fixed_groups"``.
    strata_labels : array-like of shape (size,), optional
        Stratum label per observation. Required when ``desc`` is stratified.

    Returns
    -------
    list of Split

    Raises
    ------
    ConfigurationError
        Missing labels, or too few observations/strata members/blocks for the
        requested number of folds, or a split leaving train or test empty.
    """
    size = int(size)
    if size < 1:
        raise ConfigurationError(f"Dataset size must be positive, got {size}.")
    gen = as_generator(rng)

    if desc.blocking != "none":
        if group_labels is None:
            raise ConfigurationError(f"blocking={desc.blocking!r} requires block labels.")
        codes, levels = _factorize(group_labels, size=size, what="Block labels")
        if desc.blocking == "fixed_groups":
            return _fixed_group_splits(codes, levels)
        splits = _blocked_splits(desc, codes, levels.shape[0], gen)
    elif desc.is_stratified:
        if strata_labels is None:
            raise ConfigurationError("Stratified resampling requires stratification labels.")
        codes, levels = _factorize(strata_labels, size=size, what="Stratification labels")
        splits = _stratified_splits(desc, codes, levels.shape[0], gen)
    else:
        _check_units(desc, size, "Dataset size")
        splits = get_partitioner(desc.method)(size, desc, gen)

    if desc.method in ("Holdout", "Subsample"):
        for s in splits:
            if s.n_train == 0 or s.n_test == 0:
                raise ConfigurationError(
                    f"split={desc.split:.3g} on {size} observations leaves an empty "
                    f"{'train' if s.n_train == 0 else 'test'} set."
                )
    return splits


__all__ = ["partition"]
