"""
Deterministic EdDSA over Baby Jubjub with a MiMC7 challenge hash.

Signatures produced here verify under circomlib's EdDSAMiMCVerifier:

    S * Base8 == R8 + (8 * H(R8.x, R8.y, A.x, A.y, M)) * A

where A = private * Base8 is the public key and H is the compression
profile. The nonce is derived with HMAC-SHA256 in the RFC6979 manner,
so the same key and message always give the same signature and fixtures
are reproducible.
"""

import hashlib
import hmac
from dataclasses import dataclass

from . import babyjub
from .errors import InvalidScalar
from .field import to_field


@dataclass(frozen=True)
class EdDSAKey:
    private: int
    public: tuple


@dataclass(frozen=True)
class EdDSASignature:
    R8: tuple
    S: int


def _check_private(private):
    if not isinstance(private, int) or not 0 < private < babyjub.SUB_ORDER:
        raise InvalidScalar("private scalar must be in [1, subgroup order)")


def generate_k(private, msg_hash):
    """
    RFC6979 style deterministic nonce with protection against k=0
    """
    v = b'\x01' * 32
    k = b'\x00' * 32
    priv_bytes = private.to_bytes(32, 'big')
    msg_hash_bytes = msg_hash.to_bytes(32, 'big')

    k = hmac.new(k, v + b'\x00' + priv_bytes + msg_hash_bytes, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()
    k = hmac.new(k, v + b'\x01' + priv_bytes + msg_hash_bytes, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()

    k_int = int.from_bytes(v, 'big') % babyjub.SUB_ORDER
    return k_int if k_int != 0 else 1


class EdDSASigner:
    def __init__(self, hasher):
        self.hasher = hasher

    def key_from_seed(self, seed):
        """Derive a key pair from seed bytes (or a hex string)."""
        if isinstance(seed, str):
            seed = bytes.fromhex(seed[2:] if seed.startswith("0x") else seed)
        digest = hashlib.sha512(seed).digest()
        private = int.from_bytes(digest[:32], 'little') % babyjub.SUB_ORDER
        _check_private(private)
        return EdDSAKey(private, self.public_key(private))

    def public_key(self, private):
        _check_private(private)
        return babyjub.multiply(babyjub.BASE8, private)

    def challenge(self, R8, public, msg_hash):
        return self.hasher.compress([R8[0], R8[1], public[0], public[1], msg_hash])

    def sign_digest(self, private, msg_hash):
        _check_private(private)
        msg_hash = to_field(msg_hash)
        public = babyjub.multiply(babyjub.BASE8, private)
        r = generate_k(private, msg_hash)
        R8 = babyjub.multiply(babyjub.BASE8, r)
        h = self.challenge(R8, public, msg_hash)
        S = (r + 8 * h * private) % babyjub.SUB_ORDER
        return EdDSASignature(R8, S)

    def sign(self, private, message):
        return self.sign_digest(private, self.hasher.compress(message))

    def verify_digest(self, public, msg_hash, signature):
        R8 = tuple(int(c) for c in signature.R8)
        public = tuple(int(c) for c in public)
        S = int(signature.S)
        if not babyjub.in_curve(R8) or not babyjub.in_curve(public):
            return False
        if not 0 <= S < babyjub.SUB_ORDER:
            return False
        h = self.challenge(R8, public, to_field(msg_hash))
        left = babyjub.multiply(babyjub.BASE8, S)
        right = babyjub.point_add(R8, babyjub.multiply(public, 8 * h))
        return left == right

    def verify(self, public, message, signature):
        return self.verify_digest(public, self.hasher.compress(message), signature)
