from __future__ import annotations

"""Aggregation registry.

Maps aggregation names (``"test.mean"``, ``"b632"``, ...) to
:class:`~resample_engine.components.aggregation.types.Aggregation` objects and
binds them to measures. Binding never mutates a measure: it returns a copy
carrying the new aggregation, so other holders of the base measure are
unaffected.
"""

from typing import TYPE_CHECKING, Callable, Optional, Tuple, Union

from resample_engine.components.aggregation.types import Aggregation, AggregationFn
from resample_engine.registries.base import Registry

if TYPE_CHECKING:  # pragma: no cover
    from resample_engine.components.evaluation.measures import Measure
    from resample_engine.contracts.resample_configs import ResampleDescription
    from resample_engine.runtime.instance import ResampleInstance

_AGGREGATIONS: Registry[Aggregation] = Registry(_kind="aggregation")

_BUILTINS_LOADED = False


def _ensure_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    from resample_engine.registries.builtins import aggregators as _  # noqa: F401
    _BUILTINS_LOADED = True


def register_aggregation(
    name: str,
    *,
    requires_train: bool = False,
    requires_test: bool = True,
    methods: Optional[Tuple[str, ...]] = None,
    note: str = "",
) -> Callable[[AggregationFn], AggregationFn]:
    """Register ``fn(inputs) -> float`` under ``name``.

    Registering an existing name replaces it.
    """

    def deco(fn: AggregationFn) -> AggregationFn:
        _AGGREGATIONS.add(
            name,
            Aggregation(
                id=name,
                fun=fn,
                requires_train=requires_train,
                requires_test=requires_test,
                methods=methods,
                note=note,
            ),
        )
        return fn

    return deco


def get_aggregation(name: str) -> Aggregation:
    _ensure_builtins()
    return _AGGREGATIONS.get(name)


def list_aggregations() -> list[str]:
    _ensure_builtins()
    return _AGGREGATIONS.names()


def bind(
    measure: "Measure",
    aggregation: Union[str, Aggregation],
    resampling: Union[None, "ResampleDescription", "ResampleInstance"] = None,
) -> "Measure":
    """Return a copy of ``measure`` aggregated with ``aggregation``.

    With ``resampling`` given, incompatible pairings (e.g. ``b632`` with CV, or
    a train aggregation without train predictions) fail here rather than at
    run time.
    """
    aggr = aggregation if isinstance(aggregation, Aggregation) else get_aggregation(aggregation)
    if resampling is not None:
        desc = getattr(resampling, "desc", resampling)
        aggr.check_compatible(method=desc.method, predict_on=desc.predict)
    return measure.with_aggregation(aggr)


set_aggregation = bind
