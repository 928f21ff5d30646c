from __future__ import annotations

from typing import Literal

from resample_engine.components.evaluation.measures import Measure
from resample_engine.core.errors import ConfigurationError
from resample_engine.registries.base import Registry

_MEASURES: Registry[Measure] = Registry(_kind="measure")

_BUILTINS_LOADED = False

_DEFAULTS = {"classification": "mmce", "regression": "mse"}


def register_measure(measure: Measure) -> Measure:
    return _MEASURES.add(measure.id, measure)


def _ensure_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    from resample_engine.registries.builtins import measures as _  # noqa: F401
    _BUILTINS_LOADED = True


def get_measure(name: str) -> Measure:
    _ensure_builtins()
    return _MEASURES.get(name)


def list_measures(kind: Literal["classification", "regression", None] = None) -> list[str]:
    _ensure_builtins()
    return sorted(k for k, m in _MEASURES.items() if kind is None or m.kind in (None, kind))


def default_measure(kind: str) -> Measure:
    """Default measure for a task kind (mmce for classification, mse for regression)."""
    try:
        return get_measure(_DEFAULTS[kind])
    except KeyError:
        raise ConfigurationError(f"No default measure for task kind {kind!r}") from None

