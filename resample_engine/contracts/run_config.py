from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .choices import ParallelBackend, PredictOn


class ResampleOptions(BaseModel):
    """
    Run options for one orchestrated resampling.

    ``predict_on`` of None means "inherit from the resampling description".
    """

    model_config = ConfigDict(extra="forbid")

    predict_on: Optional[PredictOn] = None
    keep_predictions: bool = True
    keep_models: bool = False
    show_progress: bool = False
    # Worker pool: 1 runs iterations in the calling thread, -1 uses all cores.
    n_jobs: int = 1
    backend: ParallelBackend = "loky"
    # Seed for instantiating a description; ignored when an instance is passed.
    seed: Optional[int] = None

    @field_validator("n_jobs")
    @classmethod
    def _check_n_jobs(cls, v: int) -> int:
        if v == 0:
            raise ValueError("n_jobs must be a positive worker count or negative (-1 = all cores), not 0.")
        return v
