# eco_sim/sim/rng.py
import random

class RNG:
    """Seedable random source. One instance lives on each World."""
    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)

    def symmetric(self, half_width: float) -> float:
        return self._rng.uniform(-half_width, half_width)
