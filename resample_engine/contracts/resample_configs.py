from __future__ import annotations

"""Resampling description contract.

A :class:`ResampleDescription` captures a resampling design and its parameters.
It is frozen once constructed and carries no data-dependent state; applying it
to a concrete dataset size happens in :mod:`resample_engine.runtime.instance`.

Use :func:`resample_engine.api.make_resample_desc` to build one with errors
reported as :class:`~resample_engine.core.errors.ConfigurationError`.
"""

import warnings
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .choices import BlockingMode, DEFAULT_ITERS, PredictOn, RESAMPLE_METHODS, ResampleMethod

_METHOD_LOOKUP = {m.lower(): m for m in RESAMPLE_METHODS}


class ResampleDescription(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    method: ResampleMethod
    iters: int = Field(default=10, ge=1)
    folds: int = Field(default=10, ge=2)
    reps: int = Field(default=10, ge=1)
    split: float = Field(default=2.0 / 3.0, gt=0.0, lt=1.0)
    predict: PredictOn = "test"
    stratify: bool = False
    stratify_cols: Tuple[str, ...] = ()
    blocking: BlockingMode = "none"

    @field_validator("method", mode="before")
    @classmethod
    def _canonical_method(cls, v):
        """Accept method names case-insensitively ("cv", "bootstrap", ...)."""
        if isinstance(v, str):
            key = v.strip().lower()
            if key in _METHOD_LOOKUP:
                return _METHOD_LOOKUP[key]
        raise ValueError(f"Unknown resampling method {v!r}. Supported: {list(RESAMPLE_METHODS)}")

    @field_validator("stratify_cols", mode="before")
    @classmethod
    def _cols_to_tuple(cls, v):
        if v is None or v == "":
            return ()
        if isinstance(v, str):
            return (v,)
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError(
                f"stratify_cols must be a column name or a sequence of names, got {type(v).__name__}."
            )
        return tuple(str(c) for c in v)

    @model_validator(mode="before")
    @classmethod
    def _normalize_iters(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        method = str(data.get("method", "")).strip().lower()
        canonical = _METHOD_LOOKUP.get(method)

        if data.get("blocking") == "fixed_groups" and "iters" in data:
            # The number of folds comes from the group levels.
            warnings.warn(
                "blocking='fixed_groups' derives the number of iterations from the "
                f"number of group levels; ignoring iters={data['iters']!r}.",
                UserWarning,
                stacklevel=2,
            )
            data.pop("iters")

        if canonical is not None and "iters" not in data:
            data["iters"] = DEFAULT_ITERS[canonical]
        return data

    @model_validator(mode="after")
    def _check_consistency(self) -> "ResampleDescription":
        active = [
            name
            for name, on in (
                ("stratify", self.stratify),
                ("stratify_cols", bool(self.stratify_cols)),
                ("blocking", self.blocking != "none"),
            )
            if on
        ]
        if len(active) > 1:
            raise ValueError(
                f"Options {active} cannot be combined: stratification and blocking are mutually exclusive."
            )
        if self.method == "CV" and self.blocking != "fixed_groups" and self.iters < 2:
            raise ValueError(f"CV needs at least 2 folds, got iters={self.iters}.")
        if self.blocking == "fixed_groups":
            if self.method == "RepCV":
                raise ValueError("RepCV cannot be used with fixed groups: folds cannot be reshuffled.")
            if self.method != "CV":
                raise ValueError(f"blocking='fixed_groups' is only available for CV, not {self.method}.")
        if self.method == "LOO" and (self.stratify or self.stratify_cols):
            raise ValueError("Stratification is not supported for LOO.")
        return self

    # --- derived -----------------------------------------------------------
    @property
    def iterations(self) -> Optional[int]:
        """Number of iterations when it is known without data, else None."""
        if self.blocking == "fixed_groups" or self.method == "LOO":
            return None
        if self.method == "Holdout":
            return 1
        if self.method == "RepCV":
            return self.folds * self.reps
        return self.iters

    @property
    def is_bootstrap(self) -> bool:
        return self.method == "Bootstrap"

    @property
    def predict_train(self) -> bool:
        return self.predict in ("train", "both")

    @property
    def predict_test(self) -> bool:
        return self.predict in ("test", "both")

    @property
    def is_stratified(self) -> bool:
        return self.stratify or bool(self.stratify_cols)

    def describe(self) -> str:
        """Short human-readable label, e.g. ``"CV (iters=10)"``."""
        if self.method == "RepCV":
            core = f"RepCV (folds={self.folds}, reps={self.reps})"
        elif self.method in ("Holdout", "Subsample"):
            core = f"{self.method} (split={self.split:.3g}" + (
                f", iters={self.iters})" if self.method == "Subsample" else ")"
            )
        elif self.method == "LOO" or self.blocking == "fixed_groups":
            core = self.method
        else:
            core = f"{self.method} (iters={self.iters})"
        extras = []
        if self.stratify:
            extras.append("stratified")
        if self.stratify_cols:
            extras.append(f"stratified on {list(self.stratify_cols)}")
        if self.blocking != "none":
            extras.append(self.blocking)
        return core + (f" [{', '.join(extras)}]" if extras else "")

    def to_config_dict(self) -> Dict[str, Any]:
        """Minimal dict that rebuilds this description (defaults omitted)."""
        out = self.model_dump(exclude_defaults=True, mode="json")
        out["method"] = self.method
        # per-method iters defaults differ from the field default
        if self.blocking != "fixed_groups":
            out["iters"] = self.iters
        return out


PRESETS: Dict[str, ResampleDescription] = {
    "hout": ResampleDescription(method="Holdout"),
    "cv2": ResampleDescription(method="CV", iters=2),
    "cv3": ResampleDescription(method="CV", iters=3),
    "cv5": ResampleDescription(method="CV", iters=5),
    "cv10": ResampleDescription(method="CV", iters=10),
    "loo": ResampleDescription(method="LOO"),
    "bootstrap30": ResampleDescription(method="Bootstrap", iters=30),
}


def get_preset(name: str) -> ResampleDescription:
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown resampling preset {name!r}. Available: {sorted(PRESETS)}") from None
