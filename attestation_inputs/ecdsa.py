"""
secp256k1 signatures prepared for circuits without native secp256k1 field
support.

The efficient verification trick: for a signature (r, s) over digest z with
signature point R, let

    T = r^-1 * R
    U = -(r^-1 * z) * G

then s*T + U == Q (the public key). The circuit only needs one scalar
multiplication and one addition, and never computes a modular inverse.
U depends on (r, z) only, never on s, and is handed to the circuit in
64-bit x 4 registers.

A single mistake in the sign convention or the inverse here produces a
witness that looks valid and never verifies, so check_recovered() re-runs
the equation before anything is emitted.
"""

import logging
from dataclasses import dataclass

from py_ecc.secp256k1 import secp256k1

from .errors import NotInvertible, OutOfRange, WitnessInconsistent
from .field import keccak_256, modinv
from .limbs import encode_64x4, encode_86x3, point_to_registers

logger = logging.getLogger(__name__)

N = secp256k1.N
P = secp256k1.P
G = secp256k1.G


def multiply(point, n):
    return secp256k1.from_jacobian(secp256k1.jacobian_multiply(secp256k1.to_jacobian(point), n))


def add(a, b):
    return secp256k1.from_jacobian(
        secp256k1.jacobian_add(secp256k1.to_jacobian(a), secp256k1.to_jacobian(b))
    )


@dataclass(frozen=True)
class EcdsaSignature:
    v: int
    r: int
    s: int


def private_key_bytes(private_key):
    """Accept a private key as 32 raw bytes, a hex string or an int."""
    if isinstance(private_key, int):
        value = private_key
    elif isinstance(private_key, str):
        value = int(private_key, 16)
    else:
        value = int.from_bytes(bytes(private_key), 'big')
    if not 0 < value < N:
        raise OutOfRange("secp256k1 private key must be in [1, N)")
    return value.to_bytes(32, 'big')


def public_key(private_key):
    return secp256k1.privtopub(private_key_bytes(private_key))


def public_key_to_address(public_key):
    x, y = public_key
    digest = keccak_256(x.to_bytes(32, 'big') + y.to_bytes(32, 'big'))
    return "0x" + digest[12:].hex()


def hash_personal_message(message):
    if isinstance(message, str):
        message = message.encode("utf-8")
    prefix = f"\x19Ethereum Signed Message:\n{len(message)}".encode("utf-8")
    return keccak_256(prefix + message)


def sign_digest(private_key, digest):
    """Deterministic (RFC6979) low-s signature over a 32-byte digest."""
    v, r, s = secp256k1.ecdsa_raw_sign(digest, private_key_bytes(private_key))
    return EcdsaSignature(v, r, s)


def sign_message(private_key, message):
    """personal_sign: returns (digest, signature)."""
    digest = hash_personal_message(message)
    return digest, sign_digest(private_key, digest)


def recover(r, digest, curve_order=N, generator=G):
    """
    Compute U = w*G with w = -(r^-1 * digest) mod n.
    """
    if isinstance(digest, (bytes, bytearray)):
        digest = int.from_bytes(digest, 'big')
    if r % curve_order == 0:
        raise NotInvertible("signature r is not invertible modulo the curve order")
    r_inv = modinv(r, curve_order)
    w = (-(r_inv * digest)) % curve_order
    return multiply(generator, w)


def signature_point(r, v):
    """Lift r back to the signature point R, picking y by the parity in v."""
    x = r % P
    beta = pow((x * x * x + secp256k1.A * x + secp256k1.B) % P, (P + 1) // 4, P)
    if beta * beta % P != (x * x * x + secp256k1.A * x + secp256k1.B) % P:
        raise NotInvertible("r is not the x coordinate of a curve point")
    y = beta if (v - 27) % 2 == beta % 2 else P - beta
    return (x, y)


def check_recovered(public_key, r, s, v, digest, U):
    """Re-run s*(r^-1 * R) + U == Q exactly as the circuit will."""
    if r % N == 0:
        raise NotInvertible("signature r is not invertible modulo the curve order")
    R = signature_point(r, v)
    T = multiply(R, modinv(r, N))
    Q = add(multiply(T, s), tuple(U))
    return tuple(Q) == tuple(public_key)


def signature_inputs(private_key, message):
    """
    Efficient-ECDSA inputs for a personal_sign over `message`, all values
    as 64x4 registers: U, s, r and the signer's public key.
    """
    digest, signature = sign_message(private_key, message)
    U = recover(signature.r, digest)
    pub = public_key(private_key)
    if not check_recovered(pub, signature.r, signature.s, signature.v, digest, U):
        raise WitnessInconsistent("ecdsa_recovery", "s*T + U does not reproduce the public key")
    logger.debug("prepared efficient ECDSA inputs for %s", public_key_to_address(pub))
    return {
        "U": point_to_registers(U),
        "s": [encode_64x4(signature.s)],
        "r": [encode_64x4(signature.r)],
        "pubKey": point_to_registers(pub),
    }


def verify_inputs(private_key, message):
    """
    Inputs for the full in-circuit ECDSA verifier: r, s, the raw keccak-256
    digest of `message` and the public key, all as 86x3 limbs.
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    digest = keccak_256(message)
    signature = sign_digest(private_key, digest)
    x, y = public_key(private_key)
    return {
        "r": [str(limb) for limb in encode_86x3(signature.r)],
        "s": [str(limb) for limb in encode_86x3(signature.s)],
        "msghash": [str(limb) for limb in encode_86x3(int.from_bytes(digest, 'big'))],
        "pubkey": [
            [str(limb) for limb in encode_86x3(x)],
            [str(limb) for limb in encode_86x3(y)],
        ],
    }
