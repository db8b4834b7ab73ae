"""
Stable hashing interface over the prepared MiMC permutations.

Two profiles are exposed:

- "compress": MiMC7 multiHash. Used for message digests, EdDSA challenge
  hashes, Merkle nodes and identity commitments.
- "sponge": MiMCSponge multiHash (absorb many, squeeze one or more). Used
  for nullifiers over variable-length secret material.

Raw bytes are promoted element-wise, one field element per byte, which is
how the circuits absorb UTF-8 message bytes.
"""

from .field import to_field

COMPRESS = "compress"
SPONGE = "sponge"


def _elements(elements):
    if isinstance(elements, (bytes, bytearray)):
        return list(elements)
    return [to_field(element) for element in elements]


class Hasher:
    def __init__(self, primitives):
        if not primitives.ready:
            raise ValueError("primitives must be prepared before hashing")
        self.primitives = primitives

    def compress(self, elements):
        return self.primitives.mimc7.multi_hash(_elements(elements))

    def sponge(self, elements, outputs=1):
        return self.primitives.mimc_sponge.multi_hash(_elements(elements), outputs=outputs)

    def hash(self, elements, profile=COMPRESS):
        if profile == COMPRESS:
            return self.compress(elements)
        if profile == SPONGE:
            return self.sponge(elements)
        raise ValueError(f"unknown hash profile: {profile!r}")
