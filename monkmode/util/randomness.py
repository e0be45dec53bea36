from __future__ import annotations

"""Randomness helpers for session shuffling and seeding."""

import os
import random
from typing import Optional

import numpy as np


def seed_if_needed() -> Optional[int]:
    """Seed RNGs if SEED env var is set; returns the seed used."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        s = int(seed)
    except ValueError:
        print(f"WARNING: ignoring non-integer SEED={seed!r}")
        return None
    random.seed(s)
    np.random.seed(s)
    return s


def make_rng(seed: Optional[int] = None) -> random.Random:
    """A dedicated RNG for one session so shuffles are reproducible per seed."""
    return random.Random(seed)
