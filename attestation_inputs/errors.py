"""
Error taxonomy for witness preparation.

Encoding errors are raised for malformed or out-of-domain numeric input.
Consistency errors are raised by the self-checks that run before a witness
is handed to the external prover. Neither kind is ever retried; only
PrimitiveInitError (loading the hash permutations) is.
"""


class AttestationError(Exception):
    """Base class for all errors raised by this package."""


class EncodingError(AttestationError):
    pass


class OutOfRange(EncodingError):
    """A value does not fit the requested limb layout or field."""


class NotInvertible(EncodingError):
    """A scalar has no inverse modulo the curve order."""


class InvalidScalar(EncodingError):
    """A private scalar is not reduced into the signing subgroup."""


class ConsistencyError(AttestationError):
    pass


class WitnessInconsistent(ConsistencyError):
    """
    A witness failed its local self-check.

    `check` names the sub-check that failed (e.g. "balance_signature",
    "owners_root") so the failure can be diagnosed without re-deriving
    any secret material.
    """

    def __init__(self, check, detail=""):
        self.check = check
        self.detail = detail
        message = f"witness self-check failed: {check}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class IndexOutOfRange(ConsistencyError):
    """A leaf index is not part of the Merkle tree."""


class ProofFormatError(AttestationError):
    """An externally generated proof or public-signal list is malformed."""


class PrimitiveInitError(AttestationError):
    """Preparing the hash permutations failed; safe to retry."""
