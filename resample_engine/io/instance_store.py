"""Resample instance persistence.

Instances are stored as a JSON document:

{
  "schema_version": "1",
  "size": <int>,
  "desc": <resampling description, defaults omitted>,
  "train_sets": [[...], ...],
  "test_sets": [[...], ...],
  "group": null | [...]
}

Index lists keep their order (and bootstrap repetitions), so a stored instance
reloads to an instance paired with the original.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from resample_engine.contracts.results.resample import SCHEMA_VERSION, ResampleInstancePayload
from resample_engine.core.errors import ConfigurationError
from resample_engine.runtime.instance import ResampleInstance

PathLike = Union[str, Path]


def dumps_instance(instance: ResampleInstance, *, indent: int | None = None) -> str:
    return instance.to_payload().model_dump_json(indent=indent)


def loads_instance(text: Union[str, bytes]) -> ResampleInstance:
    try:
        payload = ResampleInstancePayload.model_validate_json(text)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resample instance document: {e}") from e
    if payload.schema_version != SCHEMA_VERSION:
        raise ConfigurationError(
            f"Unsupported resample instance schema_version {payload.schema_version!r} (expected {SCHEMA_VERSION!r})."
        )
    try:
        return ResampleInstance.from_payload(payload)
    except ValueError as e:
        raise ConfigurationError(f"Invalid resample instance document: {e}") from e


def save_instance(instance: ResampleInstance, path: PathLike) -> Path:
    """Write ``instance`` as JSON next to a dataset; returns the path written."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dumps_instance(instance), encoding="utf-8")
    return p


def load_instance(path: PathLike) -> ResampleInstance:
    return loads_instance(Path(path).read_text(encoding="utf-8"))


