"""
Random source construction.

Every render owns its own generator. There is no shared module-level
instance, so concurrent or repeated renders never disturb each other's
sequences.
"""

import secrets
from typing import Optional

from ..core.alea_prng import AleaPRNG


def new_seed() -> str:
    """Draw a fresh seed string from the OS entropy pool."""
    return secrets.token_hex(8)


def new_prng(seed: Optional[str] = None) -> AleaPRNG:
    """
    Create a generator for one render pass.

    Args:
        seed: Seed string for a reproducible render. When omitted a random
            seed is drawn, giving a different mosaic on every call.

    Returns:
        AleaPRNG instance
    """
    return AleaPRNG(seed if seed is not None else new_seed())
