"""
Shared fixtures.

Preparing the MiMC round constants and deriving keys is the slow part of
every test, so the primitives, keys and builder are session scoped.
"""

import pytest

from attestation_inputs import (
    AttestationBuilder,
    EdDSASigner,
    Hasher,
    NullifierDeriver,
    load_primitives,
)
from attestation_inputs import ecdsa

ATTESTOR_SEED = b"attestation test seed"

# secp256k1 identity key of the claimant in the social identity tests
IDENTITY_KEY = 0x4C0883A69102937D6231471B5DBB6204FE5129617082792AE468D01A3F362318

SUBJECT = "0xbf74483DB914192bb0a9577f3d8Fb29a6d4c08eE"
TOKEN = "0x722B0676F457aFe13e479eB2a8A4De88BA15B2c6"
OWNERS = [
    "0x8ac28b06fC1eEAA8646c0d8A5e835B96e93D6799",
    "0x0b2bE1C4F0c1d3bF42eDb5dF04E3a7e4d3cB5C1a",
    "0xD0a11b1B6f4d3C0E7e22F0b9aA3b6c1D9E4f2A70",
]


@pytest.fixture(scope="session")
def primitives():
    return load_primitives()


@pytest.fixture(scope="session")
def hasher(primitives):
    return Hasher(primitives)


@pytest.fixture(scope="session")
def signer(hasher):
    return EdDSASigner(hasher)


@pytest.fixture(scope="session")
def attestor_key(signer):
    return signer.key_from_seed(ATTESTOR_SEED)


@pytest.fixture(scope="session")
def nullifiers(hasher):
    return NullifierDeriver(hasher)


@pytest.fixture(scope="session")
def builder(primitives, attestor_key):
    return AttestationBuilder(primitives, attestor_key)


@pytest.fixture(scope="session")
def identity_key():
    return IDENTITY_KEY


@pytest.fixture(scope="session")
def identity_address(identity_key):
    return ecdsa.public_key_to_address(ecdsa.public_key(identity_key))
