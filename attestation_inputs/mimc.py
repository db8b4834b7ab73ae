"""
MiMC permutations over the BN254 scalar field.

These reproduce circomlib's MiMC7 and MiMCSponge exactly: round constants
are chained keccak-256 digests starting from the seed string, reduced
into the field, with the first (and for the sponge, also the last)
constant forced to zero.

The permutations are wrapped in a Primitives capability object. It is
prepared once per process with load_primitives() and then passed
explicitly to every component that hashes; there is no module-level
singleton.
"""

import logging

from .errors import PrimitiveInitError
from .field import SNARK_SCALAR_FIELD, keccak_256, to_field

logger = logging.getLogger(__name__)

p = SNARK_SCALAR_FIELD


def round_constants(seed, n_rounds):
    constants = [0] * n_rounds
    c = keccak_256(seed.encode("utf-8"))
    for i in range(1, n_rounds):
        c = keccak_256(c)
        constants[i] = int.from_bytes(c, "big") % p
    return constants


class Mimc7:
    SEED = "mimc"
    ROUNDS = 91

    def __init__(self):
        self.constants = None

    def prepare(self):
        self.constants = round_constants(self.SEED, self.ROUNDS)
        return self

    def hash(self, x_in, k):
        """Single MiMC7 permutation of x_in under key k."""
        x_in = x_in % p
        k = k % p
        r = 0
        for i in range(self.ROUNDS):
            t = (x_in + k) % p if i == 0 else (r + k + self.constants[i]) % p
            t2 = t * t % p
            t4 = t2 * t2 % p
            r = t4 * t2 % p * t % p
        return (r + k) % p

    def multi_hash(self, elements, key=0):
        r = key % p
        for element in elements:
            x = to_field(element)
            r = (r + x + self.hash(x, r)) % p
        return r


class MimcSponge:
    SEED = "mimcsponge"
    ROUNDS = 220

    def __init__(self):
        self.constants = None

    def prepare(self):
        constants = round_constants(self.SEED, self.ROUNDS)
        constants[-1] = 0
        self.constants = constants
        return self

    def hash(self, xl, xr, k):
        """One Feistel permutation; returns the (xL, xR) pair."""
        xl = xl % p
        xr = xr % p
        k = k % p
        last = self.ROUNDS - 1
        for i in range(self.ROUNDS):
            t = (xl + k) % p if i == 0 else (xl + k + self.constants[i]) % p
            t2 = t * t % p
            t4 = t2 * t2 % p
            t5 = t4 * t % p
            if i < last:
                xl, xr = (xr + t5) % p, xl
            else:
                xr = (xr + t5) % p
        return xl, xr

    def multi_hash(self, elements, key=0, outputs=1):
        r = 0
        c = 0
        for element in elements:
            r = (r + to_field(element)) % p
            r, c = self.hash(r, c, key)
        squeezed = [r]
        for _ in range(1, outputs):
            r, c = self.hash(r, c, key)
            squeezed.append(r)
        return squeezed[0] if outputs == 1 else squeezed


class Primitives:
    """Prepared hash permutations, immutable after prepare()."""

    def __init__(self):
        self.mimc7 = None
        self.mimc_sponge = None

    @property
    def ready(self):
        return self.mimc7 is not None and self.mimc_sponge is not None

    def prepare(self):
        if self.ready:
            return self
        try:
            mimc7 = Mimc7().prepare()
            mimc_sponge = MimcSponge().prepare()
        except (ValueError, TypeError, OSError) as e:
            raise PrimitiveInitError(f"could not derive MiMC round constants: {e}") from e
        self.mimc7 = mimc7
        self.mimc_sponge = mimc_sponge
        return self


def load_primitives(attempts=3):
    """
    Prepare the hash permutations, retrying transient failures with a
    fresh instance each time.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            return Primitives().prepare()
        except PrimitiveInitError as e:
            last_error = e
            logger.warning("primitive initialization failed (attempt %d/%d): %s", attempt, attempts, e)
    raise last_error
