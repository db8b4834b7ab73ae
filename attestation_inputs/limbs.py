"""
Limb ("register") decomposition for non-native field arithmetic.

secp256k1 values do not fit the circuit's native field, so the circuits
receive them split into fixed-width limbs. Two layouts are in use and both
must be reproduced exactly:

- 86 bits x 3 limbs, plain integers, least significant limb first.
  Used by the full in-circuit ECDSA verifier (r, s, msghash, pubkey).
- 64 bits x 4 registers, decimal strings. The value is rendered as a
  64-digit big-endian hex string, cut into 16-digit slices and the slice
  order reversed, which again puts the least significant limb first.
  Used by the efficient ECDSA inputs (U, s, r, pubKey).
"""

from .errors import OutOfRange


def encode(value, n, k):
    """Split `value` into `k` limbs of `n` bits, limb 0 least significant."""
    if value < 0 or value >= 1 << (n * k):
        raise OutOfRange(f"{value} does not fit in {k} limbs of {n} bits")
    mask = (1 << n) - 1
    return [(value >> (i * n)) & mask for i in range(k)]


def decode(limbs, n):
    value = 0
    for i, limb in enumerate(limbs):
        limb = int(limb)
        if limb < 0 or limb >= 1 << n:
            raise OutOfRange(f"limb {i} ({limb}) is wider than {n} bits")
        value |= limb << (i * n)
    return value


def encode_86x3(value):
    return encode(value, 86, 3)


def decode_86x3(limbs):
    if len(limbs) != 3:
        raise OutOfRange(f"expected 3 limbs, got {len(limbs)}")
    return decode(limbs, 86)


REGISTERS = 4


def encode_64x4(value):
    if value is None:
        return ["0"] * REGISTERS
    if isinstance(value, str):
        value = int(value, 16)
    if value < 0 or value >= 1 << 256:
        raise OutOfRange(f"{value} does not fit in {REGISTERS} registers of 64 bits")
    digits = format(value, "x").rjust(64, "0")
    registers = []
    for k in range(REGISTERS):
        # 64 bits = 16 hex chars
        registers.insert(0, int(digits[k * 16:(k + 1) * 16], 16))
    return [str(register) for register in registers]


def decode_64x4(registers):
    if len(registers) != REGISTERS:
        raise OutOfRange(f"expected {REGISTERS} registers, got {len(registers)}")
    return decode(registers, 64)


def point_to_registers(point):
    x, y = point
    return [encode_64x4(int(x)), encode_64x4(int(y))]


def registers_to_point(registers):
    return (decode_64x4(registers[0]), decode_64x4(registers[1]))


# Names used by the circuit documentation.
encode_signed_86x3 = encode_86x3
encode_bytes_64x4 = encode_64x4
