"""Deterministic per-dataset seeds derived from one master seed."""

from __future__ import annotations

import hashlib
import random
from typing import Any, Optional


class SeedManager:
    """Derives independent, reproducible seeds from a master seed.

    Each consumer (for example one generated dataset) asks for a seed keyed by
    its own identifiers, so the values it receives do not depend on how many
    other consumers drew random numbers before it.

    Usage:
        seeds = SeedManager(42)
        rng = seeds.create_random_state("dataset", "small_dag_1")
    """

    def __init__(self, master_seed: Optional[int] = None) -> None:
        """Initialize the seed manager.

        Args:
            master_seed: Master seed. If None, derived seeds are None and
                random states are seeded from system entropy.
        """
        self.master_seed = master_seed

    def derive_seed(self, *components: Any) -> Optional[int]:
        """Return a positive 31-bit seed for ``components``, or None.

        The seed is the first four bytes of
        ``sha256("<master>:<c1>:<c2>...")``.
        """
        if self.master_seed is None:
            return None

        seed_input = f"{self.master_seed}:" + ":".join(str(c) for c in components)
        digest = hashlib.sha256(seed_input.encode()).digest()
        return int.from_bytes(digest[:4], byteorder="big") & 0x7FFFFFFF

    def create_random_state(self, *components: Any) -> random.Random:
        """Return a new ``random.Random`` seeded for ``components``."""
        derived_seed = self.derive_seed(*components)
        rng = random.Random()
        if derived_seed is not None:
            rng.seed(derived_seed)
        return rng
