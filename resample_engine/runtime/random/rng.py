from __future__ import annotations
import hashlib
from typing import Optional

import numpy as np
from numpy.random import Generator


class RngManager:
    """
    Single source of truth for randomness.
    Creates named, order-independent child seeds/streams by hashing:
      child_seed(name)       -> stable int seed
      child_generator(name)  -> np.random.Generator seeded from that int

    With ``seed=None`` a fresh root seed is drawn from OS entropy; it is exposed
    as ``root`` so that an unseeded run can still be reproduced.
    """
    def __init__(self, seed: Optional[int]):
        if seed is None:
            seed = int(np.random.SeedSequence().entropy)
        # Keep a small, well-defined representation
        self._root = int(seed) & 0xFFFFFFFF

    @property
    def root(self) -> int:
        return self._root

    def _mix(self, name: str) -> int:
        # Stable across runs and Python versions
        h = hashlib.sha256(f"{self._root}:{name}".encode("utf-8")).digest()
        # Use 32 bits for compatibility with libraries expecting uint32 seeds
        return int.from_bytes(h[:4], "little", signed=False)

    def child_seed(self, name: str) -> int:
        return self._mix(name)

    def child_generator(self, name: str) -> Generator:
        return np.random.default_rng(self._mix(name))
