"""
Witness preparation and validation for zero-knowledge attestation circuits.

Usage:
    from attestation_inputs import (
        AttestationBuilder, BalanceThresholdClaim, EdDSASigner, Hasher,
        load_primitives,
    )

    primitives = load_primitives()
    attestor = EdDSASigner(Hasher(primitives)).key_from_seed(b"attestor seed")
    builder = AttestationBuilder(primitives, attestor)

    witness = builder.build(BalanceThresholdClaim(
        subject_address="0xbf74483DB914192bb0a9577f3d8Fb29a6d4c08eE",
        token_address="0x722B0676F457aFe13e479eB2a8A4De88BA15B2c6",
        network="g",
        threshold=1,
        balance=5,
        owners=["0x8ac28b06fC1eEAA8646c0d8A5e835B96e93D6799"],
    ))
    witness.write("input-balance.json")
"""

from .builder import AttestationBuilder
from .claims import (
    BalanceThresholdClaim,
    Claim,
    ClaimKind,
    EmailDomainClaim,
    Erc721OwnershipClaim,
    SocialIdentityClaim,
)
from .config import DEFAULT_CONFIG, AttestationConfig
from .eddsa import EdDSAKey, EdDSASignature, EdDSASigner
from .errors import (
    AttestationError,
    ConsistencyError,
    EncodingError,
    IndexOutOfRange,
    InvalidScalar,
    NotInvertible,
    OutOfRange,
    PrimitiveInitError,
    ProofFormatError,
    WitnessInconsistent,
)
from .export import solidity_call_data, write_call_data
from .hashing import Hasher
from .merkle import IncrementalMerkleTree, MerkleProof, build_membership_tree
from .mimc import Primitives, load_primitives
from .nullifier import NullifierDeriver, new_session_nonce
from .witness import Witness

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "AttestationBuilder",
    "AttestationConfig",
    "DEFAULT_CONFIG",
    "Witness",
    # Claims
    "Claim",
    "ClaimKind",
    "BalanceThresholdClaim",
    "Erc721OwnershipClaim",
    "EmailDomainClaim",
    "SocialIdentityClaim",
    # Primitives
    "Primitives",
    "load_primitives",
    "Hasher",
    "EdDSAKey",
    "EdDSASignature",
    "EdDSASigner",
    "IncrementalMerkleTree",
    "MerkleProof",
    "build_membership_tree",
    "NullifierDeriver",
    "new_session_nonce",
    # Export
    "solidity_call_data",
    "write_call_data",
    # Errors
    "AttestationError",
    "EncodingError",
    "OutOfRange",
    "NotInvertible",
    "InvalidScalar",
    "ConsistencyError",
    "WitnessInconsistent",
    "IndexOutOfRange",
    "ProofFormatError",
    "PrimitiveInitError",
]
