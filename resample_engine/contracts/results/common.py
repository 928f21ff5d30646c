from __future__ import annotations

"""Result contracts.

JSON-friendly field types at the contract boundary and strict top-level
validation (extra fields forbidden) to prevent silent drift.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ResultModel(BaseModel):
    """Base class for result contracts (strict by default)."""

    model_config = ConfigDict(extra="forbid")


JSONDict = Dict[str, Any]
