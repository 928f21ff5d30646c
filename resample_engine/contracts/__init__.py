"""Configuration and payload contracts (pydantic models)."""

from .choices import BlockingMode, PredictOn, ResampleMethod, RESAMPLE_METHODS
from .resample_configs import ResampleDescription, PRESETS, get_preset
from .run_config import ResampleOptions
