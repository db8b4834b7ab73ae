"""
Native field helpers.

Every circuit targeted by this package runs over the BN254 scalar field,
so "field element" below always means an integer reduced mod
SNARK_SCALAR_FIELD. Circom uses the scalar field (curve order), not the
base field, for all of its arithmetic.
"""

from Crypto.Hash import keccak
from py_ecc.bn128 import curve_order

SNARK_SCALAR_FIELD = curve_order

UINT256_MAX = 2**256 - 1


def modinv(a, modulus):
    return pow(a, -1, modulus)


def to_int(value):
    """
    Coerce an int, a decimal / 0x-hex string or big-endian bytes to an int.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not field elements")
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")
    if isinstance(value, str):
        return int(value, 0) if value.lower().startswith("0x") else int(value)
    raise TypeError(f"cannot interpret {type(value).__name__} as an integer")


def to_field(value):
    return to_int(value) % SNARK_SCALAR_FIELD


def to_hex(value):
    """Render an int as even-length 0x-hex, "0x00" for zero."""
    digits = format(to_int(value), "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def keccak_256(data):
    h = keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def utf8_bytes(text):
    return list(text.encode("utf-8"))
