"""
Alea pseudo random number generator.

Johannes Baagøe's Alea algorithm: a small, fast, string-seeded generator.
Used as the injectable random source for point sampling, so a render can be
replayed exactly when a seed is given.
"""


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _make_mash():
    """Build a Mash hash closure; each call folds more data into its state."""
    n = 0xEFC8249D

    def mash(data):
        nonlocal n
        for char in str(data):
            n = n + ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * 0x100000000  # 2^32
        return _uint32(n) * 2.3283064365386963e-10  # 2^-32

    return mash


class AleaPRNG:
    """
    Seedable generator returning floats in [0, 1).

    Two instances built from the same seed produce the same sequence.
    """

    def __init__(self, seed):
        """Initialize with a seed string, number or sequence of those."""
        self.seed = seed
        self.draws = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _make_mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 -= mash(part)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(part)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(part)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.draws += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + (high - low) * self.random()

    def bernoulli(self, probability: float) -> bool:
        """True with the given probability; probabilities >= 1 always succeed."""
        return self.random() < probability
