"""
Baby Jubjub twisted Edwards curve embedded in the BN254 scalar field.

    a*x^2 + y^2 = 1 + d*x^2*y^2   (mod p)

Points are (x, y) tuples of ints; the neutral element is (0, 1).
"""

from .field import SNARK_SCALAR_FIELD, modinv

p = SNARK_SCALAR_FIELD
A = 168700
D = 168696

GENERATOR = (
    995203441582195749578291179787384436505546430278305826713579947235728471134,
    5472060717959818805561601436314318772137091100104008585924551046643952123905,
)
BASE8 = (
    5299619240641551281634865583518297030282874472190772894086521144482721001553,
    16950150798460657717958625567821834550301663161624707787222815936182638968203,
)
ORDER = 21888242871839275222246405745257275088614511777268538073601725287587578984328
SUB_ORDER = ORDER >> 3

IDENTITY = (0, 1)


def point_add(P1, P2):
    x1, y1 = P1
    x2, y2 = P2
    beta = x1 * y2 % p
    gamma = y1 * x2 % p
    delta = (y1 - A * x1) * (x2 + y2) % p
    dtau = D * beta % p * gamma % p
    x3 = (beta + gamma) * modinv((1 + dtau) % p, p) % p
    y3 = (delta + A * beta - gamma) * modinv((1 - dtau) % p, p) % p
    return (x3, y3)


def multiply(P, k):
    """Double-and-add; k is used as given (no reduction)."""
    result = IDENTITY
    addend = P
    while k:
        if k & 1:
            result = point_add(result, addend)
        addend = point_add(addend, addend)
        k >>= 1
    return result


def in_curve(P):
    x, y = P
    x2 = x * x % p
    y2 = y * y % p
    return (A * x2 + y2) % p == (1 + D * x2 % p * y2) % p
