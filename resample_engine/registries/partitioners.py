from __future__ import annotations

from typing import Callable, List

from numpy.random import Generator

from resample_engine.components.splitters.types import Split
from resample_engine.contracts.resample_configs import ResampleDescription
from resample_engine.registries.base import Registry

PartitionFn = Callable[[int, ResampleDescription, Generator], List[Split]]

_PARTITIONERS: Registry[PartitionFn] = Registry(_kind="resampling method")

_BUILTINS_LOADED = False


def register_partitioner(method: str) -> Callable[[PartitionFn], PartitionFn]:
    return _PARTITIONERS.register(method)


def _ensure_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    from resample_engine.registries.builtins import partitioners as _  # noqa: F401
    _BUILTINS_LOADED = True


def get_partitioner(method: str) -> PartitionFn:
    _ensure_builtins()
    return _PARTITIONERS.get(method)


def list_partition_methods() -> list[str]:
    _ensure_builtins()
    return _PARTITIONERS.names()
