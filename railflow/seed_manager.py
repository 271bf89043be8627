"""Deterministic seed derivation for random rail-failure selection."""

from __future__ import annotations

import hashlib
import random
from typing import Any, Optional


class SeedManager:
    """Derives independent, reproducible random streams from one master seed.

    Each consumer names itself with component identifiers, so adding another
    random draw elsewhere never shifts the sequence a given consumer sees.

    Usage:
        seeds = SeedManager(42)
        rng = seeds.create_random_state("failure", "random_rails", 3)
    """

    def __init__(self, master_seed: Optional[int] = None) -> None:
        """Initialize the seed manager.

        Args:
            master_seed: Master seed. If None, derived streams are unseeded
                (non-deterministic).
        """
        self.master_seed = master_seed

    def derive_seed(self, *components: Any) -> Optional[int]:
        """Derive a positive 31-bit seed from the master seed and components.

        Returns:
            Derived seed, or None if no master seed is set.
        """
        if self.master_seed is None:
            return None

        seed_input = f"{self.master_seed}:" + ":".join(str(c) for c in components)
        hash_digest = hashlib.sha256(seed_input.encode()).digest()

        seed_value = int.from_bytes(hash_digest[:4], byteorder="big")
        return seed_value & 0x7FFFFFFF

    def create_random_state(self, *components: Any) -> random.Random:
        """Create a Random instance seeded for the given components."""
        derived_seed = self.derive_seed(*components)
        rng = random.Random()
        if derived_seed is not None:
            rng.seed(derived_seed)
        return rng
