from .rng import RngManager
from .shuffle import permute_indices

__all__ = ["RngManager", "permute_indices"]
