from __future__ import annotations

"""Materialized resampling instances.

A :class:`ResampleInstance` fixes the train/test index sets of every iteration
for one dataset size. It is immutable once built and can be reused across
learners: two instances holding identical index sequences are *paired*, which
is what makes a learner comparison paired.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from resample_engine.components.interfaces import Task
from resample_engine.components.splitters.partition import partition
from resample_engine.components.splitters.types import Split
from resample_engine.contracts.resample_configs import ResampleDescription
from resample_engine.contracts.results.resample import ResampleInstancePayload
from resample_engine.core.errors import ConfigurationError
from resample_engine.core.shapes import as_index_array
from resample_engine.runtime.random.rng import RngManager

logger = logging.getLogger(__name__)


class ResampleInstance:
    """Train/test index sets for every resampling iteration.

    Use :func:`make_resample_instance` or :meth:`fixed` rather than calling the
    constructor directly.
    """

    __slots__ = ("_desc", "_size", "_train", "_test", "_group", "_seed")

    def __init__(
        self,
        desc: ResampleDescription,
        size: int,
        train_sets: Sequence[Any],
        test_sets: Sequence[Any],
        *,
        group: Optional[Sequence[Any]] = None,
        seed: Optional[int] = None,
    ):
        size = int(size)
        if len(train_sets) != len(test_sets):
            raise ConfigurationError(
                f"train_sets ({len(train_sets)}) and test_sets ({len(test_sets)}) differ in length."
            )
        if len(train_sets) == 0:
            raise ConfigurationError("A resample instance needs at least one iteration.")
        if group is not None and len(group) != len(train_sets):
            raise ConfigurationError("group must have one label per iteration.")

        self._desc = desc
        self._size = size
        self._train: Tuple[np.ndarray, ...] = tuple(
            as_index_array(t, size=size, name=f"train_sets[{i}]") for i, t in enumerate(train_sets)
        )
        self._test: Tuple[np.ndarray, ...] = tuple(
            as_index_array(t, size=size, name=f"test_sets[{i}]") for i, t in enumerate(test_sets)
        )
        self._group = None if group is None else tuple(group)
        self._seed = seed

    # --- constructors ------------------------------------------------------
    @classmethod
    def from_splits(
        cls,
        desc: ResampleDescription,
        size: int,
        splits: Sequence[Split],
        *,
        seed: Optional[int] = None,
    ) -> "ResampleInstance":
        groups = [s.group for s in splits]
        return cls(
            desc,
            size,
            [s.train_idx for s in splits],
            [s.test_idx for s in splits],
            group=groups if any(g is not None for g in groups) else None,
            seed=seed,
        )

    @classmethod
    def fixed(cls, train_idx: Any, test_idx: Any, size: int) -> "ResampleInstance":
        """Fixed holdout instance from explicit, disjoint train/test indices.

        No randomness is involved, so the same call always yields the same
        (paired) instance.
        """
        size = int(size)
        tr = as_index_array(train_idx, size=size, name="train_idx")
        te = as_index_array(test_idx, size=size, name="test_idx")
        if tr.size == 0 or te.size == 0:
            raise ConfigurationError("A fixed holdout instance needs non-empty train and test sets.")
        if np.intersect1d(tr, te).size:
            raise ConfigurationError("Fixed holdout train and test indices must be disjoint.")
        if np.unique(tr).size != tr.size or np.unique(te).size != te.size:
            raise ConfigurationError("Fixed holdout indices must not contain duplicates.")
        desc = ResampleDescription(method="Holdout", split=float(tr.size) / float(tr.size + te.size))
        return cls(desc, size, [tr], [te])

    # --- accessors ---------------------------------------------------------
    @property
    def desc(self) -> ResampleDescription:
        return self._desc

    @property
    def size(self) -> int:
        return self._size

    @property
    def train_sets(self) -> Tuple[np.ndarray, ...]:
        return self._train

    @property
    def test_sets(self) -> Tuple[np.ndarray, ...]:
        return self._test

    @property
    def group(self) -> Optional[Tuple[Any, ...]]:
        return self._group

    @property
    def seed(self) -> Optional[int]:
        """Root seed the instance was drawn with (None for fixed/loaded instances)."""
        return self._seed

    @property
    def iterations(self) -> int:
        return len(self._train)

    def __len__(self) -> int:
        return self.iterations

    def __iter__(self) -> Iterator[Split]:
        for i in range(self.iterations):
            yield self[i]

    def __getitem__(self, i: int) -> Split:
        return Split(
            train_idx=self._train[i],
            test_idx=self._test[i],
            group=None if self._group is None else self._group[i],
        )

    # --- pairing -----------------------------------------------------------
    def is_paired_with(self, other: "ResampleInstance") -> bool:
        """True if both instances hold identical index sequences."""
        if not isinstance(other, ResampleInstance):
            return False
        if self._size != other._size or self.iterations != other.iterations:
            return False
        return all(np.array_equal(a, b) for a, b in zip(self._train, other._train)) and all(
            np.array_equal(a, b) for a, b in zip(self._test, other._test)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResampleInstance):
            return NotImplemented
        return self.is_paired_with(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ResampleInstance({self._desc.describe()}, size={self._size}, iterations={self.iterations})"

    # --- serialization -----------------------------------------------------
    def to_payload(self) -> ResampleInstancePayload:
        group = None
        if self._group is not None:
            group = [g.item() if isinstance(g, np.generic) else g for g in self._group]
        return ResampleInstancePayload(
            size=self._size,
            desc=self._desc.to_config_dict(),
            train_sets=[t.tolist() for t in self._train],
            test_sets=[t.tolist() for t in self._test],
            group=group,
        )

    @classmethod
    def from_payload(cls, payload: ResampleInstancePayload) -> "ResampleInstance":
        if payload.desc is not None:
            desc = ResampleDescription.model_validate(payload.desc)
        else:
            desc = ResampleDescription(method="Holdout")
        return cls(
            desc,
            payload.size,
            [np.asarray(t, dtype=np.int64) for t in payload.train_sets],
            [np.asarray(t, dtype=np.int64) for t in payload.test_sets],
            group=payload.group,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_payload().model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResampleInstance":
        return cls.from_payload(ResampleInstancePayload.model_validate(data))


def make_resample_instance(
    desc: ResampleDescription,
    size: Optional[int] = None,
    *,
    task: Optional[Task] = None,
    seed: Optional[int] = None,
) -> ResampleInstance:
    """Apply ``desc`` to a dataset and materialize the index sets.

    Either ``size`` or ``task`` must be given. Block labels (for blocking) and
    stratification labels are taken from ``task``.
    """
    if task is None and size is None:
        raise ConfigurationError("Either size or task must be given to instantiate a resampling.")
    if task is not None:
        if size is not None and int(size) != int(task.size):
            raise ConfigurationError(f"size={size} does not match task size {task.size}.")
        size = int(task.size)

    group_labels = None
    strata_labels = None
    if desc.blocking != "none":
        group_labels = None if task is None else task.block_labels
        if group_labels is None:
            raise ConfigurationError(
                f"blocking={desc.blocking!r} needs a task with block labels."
            )
    elif desc.is_stratified:
        if task is None:
            raise ConfigurationError("Stratified resampling needs a task to take labels from.")
        strata_labels = task.strata_labels(target=desc.stratify, cols=desc.stratify_cols)

    rngm = RngManager(seed)
    splits = partition(
        desc,
        int(size),
        rng=rngm.child_generator(f"instance/{desc.method}"),
        group_labels=group_labels,
        strata_labels=strata_labels,
    )
    inst = ResampleInstance.from_splits(desc, int(size), splits, seed=rngm.root)
    logger.debug("Instantiated %r (seed=%d)", inst, rngm.root)
    return inst


__all__ = ["ResampleInstance", "make_resample_instance"]
