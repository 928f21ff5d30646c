from __future__ import annotations

from typing import Union

import numpy as np


__all__ = ["permute_indices", "as_generator"]


def as_generator(rng: Union[None, int, np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` if it is a Generator, else a new Generator seeded with it."""
    return rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)


def permute_indices(
    n: int,
    rng: Union[None, int, np.random.Generator] = None,
) -> np.ndarray:
    """
    Return a random permutation of ``0..n-1``.

    Parameters
    ----------
    n : int
        Number of positions.
    rng : None | int | numpy.random.Generator, optional
        Random generator or seed.
        - If int: a new Generator is created with that seed (reproducible).
        - If Generator: it will be used directly.
        - If None: uses np.random.default_rng().

    Returns
    -------
    np.ndarray of shape (n,), dtype int64
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}.")
    return np.ascontiguousarray(as_generator(rng).permutation(int(n)), dtype=np.int64)
