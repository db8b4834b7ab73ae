"""
Nullifier derivation over the sponge profile.

Two conventions are in use and are not interchangeable:

- session: sponge(nonce) over a fresh random pair [r2, s2]. Unique per
  session, unlinkable across sessions, so it does not detect a repeated
  claim by the same identity.
- identity: sponge(s || U.x || U.y || address || domain) over the
  claimant's efficient-ECDSA registers. The same key always yields the
  same value for the same claim kind, which is what makes duplicate
  claims detectable.
"""

import secrets

from . import ecdsa
from .field import SNARK_SCALAR_FIELD, to_int

IDENTITY_DOMAIN = (69, 420)

NONCE_MESSAGE = "For attestation\nnonce: 0x{entropy}"


class NullifierDeriver:
    def __init__(self, hasher):
        self.hasher = hasher

    def derive(self, secret_components, domain_constant=(), context=None):
        if isinstance(domain_constant, (int, str)):
            domain_constant = [domain_constant]
        elements = [to_int(component) for component in secret_components]
        if context is not None:
            elements.append(to_int(context))
        elements.extend(to_int(constant) for constant in domain_constant)
        return self.hasher.sponge(elements)

    def session_nullifier(self, nonce):
        return self.derive(nonce)

    def identity_nullifier(self, s_registers, u_registers, address, domain=IDENTITY_DOMAIN):
        secret = list(s_registers) + list(u_registers[0]) + list(u_registers[1])
        return self.derive(secret, domain, context=address)


def new_session_nonce(private_key=None):
    """
    A fresh [r2, s2] pair of field elements: uniform below the scalar field
    modulus, or the (r, s) of a signature over a random nonce message,
    reduced into the field, when a key is supplied.
    """
    if private_key is None:
        return [secrets.randbelow(SNARK_SCALAR_FIELD) for _ in range(2)]
    message = NONCE_MESSAGE.format(entropy=secrets.token_hex(32))
    _, signature = ecdsa.sign_message(private_key, message)
    return [signature.r % SNARK_SCALAR_FIELD, signature.s % SNARK_SCALAR_FIELD]
