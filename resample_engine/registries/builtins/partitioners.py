"""Built-in resampling design registrations."""

from __future__ import annotations

from resample_engine.components.splitters import designs
from resample_engine.registries.partitioners import register_partitioner

register_partitioner("Holdout")(designs.holdout)
register_partitioner("CV")(designs.cv)
register_partitioner("RepCV")(designs.repcv)
register_partitioner("LOO")(designs.loo)
register_partitioner("Subsample")(designs.subsample)
register_partitioner("Bootstrap")(designs.bootstrap)
