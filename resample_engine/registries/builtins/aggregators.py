"""Built-in aggregation registrations."""

from __future__ import annotations

from resample_engine.components.aggregation.bootstrap632 import b632, b632plus
from resample_engine.components.aggregation.reductions import REDUCERS, make_reduction, pooled_test
from resample_engine.registries.aggregators import register_aggregation

for _reducer in REDUCERS:
    register_aggregation(f"test.{_reducer}")(make_reduction("test", _reducer))
    register_aggregation(f"train.{_reducer}", requires_train=True, requires_test=False)(
        make_reduction("train", _reducer)
    )

register_aggregation(
    "test.join",
    note="Measure on the pooled test predictions of all iterations.",
)(pooled_test)

register_aggregation(
    "b632",
    requires_train=True,
    methods=("Bootstrap",),
    note="0.368 * train + 0.632 * out-of-bag, averaged over iterations.",
)(b632)

register_aggregation(
    "b632plus",
    requires_train=True,
    methods=("Bootstrap",),
    note="b632 adjusted by the relative overfitting rate (no-information value from all truth/response pairs).",
)(b632plus)
