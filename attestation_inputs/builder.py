"""
Witness assembly per claim kind.

Data flows strictly forward: claim -> canonical message -> digest ->
signature / point recovery -> Merkle proof -> witness -> nullifier. Every
witness is self-checked before it is returned; a witness that fails here
would also fail the external circuit's assertions, after an expensive
proof generation.

Layouts (field names are the circuits' input names):

BalanceThreshold
    address, address{PubKeyX,PubKeyY,R8x,R8y,S}   signature over H([address])
    balanceMessage = [tag, ownersRoot, token, networkByte, threshold]
    balance{PubKeyX,PubKeyY,R8x,R8y,S}            signature over H(balanceMessage)
    pathIndices, siblings                         address in the owners tree
    nonce                                         session nullifier
Erc721Ownership
    message = utf8("<address>owns<token>"), tokenAddress = utf8(token),
    pubKeyX, pubKeyY, R8x, R8y, S, M
EmailDomain
    message = utf8(domain) zero-padded on the right, pubKeyX, pubKeyY,
    R8x, R8y, S, nonce                            session nullifier
SocialIdentity
    <service>Message = [tag, ownersRoot, ...utf8(service)],
    <service>{PubKeyX,PubKeyY,R8x,R8y,S}, ownersPathIndices, ownersSiblings,
    sealHubU, sealHubS, sealHubAddress,           identity-bound nullifier
    sealHubPathIndices, sealHubSiblings           commitment in the identity set
"""

import logging

from . import ecdsa, merkle
from .claims import (
    BalanceThresholdClaim,
    ClaimKind,
    EmailDomainClaim,
    Erc721OwnershipClaim,
    SocialIdentityClaim,
)
from .config import DEFAULT_CONFIG
from .eddsa import EdDSASignature, EdDSASigner
from .errors import ConsistencyError, EncodingError, OutOfRange, WitnessInconsistent
from .field import to_int, utf8_bytes
from .hashing import Hasher
from .limbs import decode_64x4, encode_64x4, point_to_registers, registers_to_point
from .nullifier import NullifierDeriver, new_session_nonce
from .witness import Witness

logger = logging.getLogger(__name__)

NETWORK_BYTES = (ord("m"), ord("g"))


def _signal(prefix, name):
    if prefix:
        return prefix + name
    return "pubKey" + name[len("PubKey"):] if name.startswith("PubKey") else name


def _registers(values):
    return [int(value) for value in values]


class AttestationBuilder:
    """
    Builds self-checked witnesses. The attestor's EdDSA key and the
    deployment config are explicit; nothing is held in module state.
    """

    def __init__(self, primitives, attestor_key, config=DEFAULT_CONFIG):
        self.hasher = Hasher(primitives)
        self.signer = EdDSASigner(self.hasher)
        self.nullifiers = NullifierDeriver(self.hasher)
        self.attestor_key = attestor_key
        self.config = config

    def build(self, claim, identity_key=None, nonce=None):
        if isinstance(claim, BalanceThresholdClaim):
            return self.build_balance_threshold(claim, nonce=nonce)
        if isinstance(claim, Erc721OwnershipClaim):
            return self.build_erc721_ownership(claim)
        if isinstance(claim, EmailDomainClaim):
            return self.build_email_domain(claim, nonce=nonce)
        if isinstance(claim, SocialIdentityClaim):
            if identity_key is None:
                raise ValueError("a SocialIdentity claim needs the claimant's identity key")
            return self.build_social_identity(claim, identity_key)
        raise TypeError(f"unsupported claim: {type(claim).__name__}")

    # Signing

    def _sign(self, prefix, msg_hash):
        signature = self.signer.sign_digest(self.attestor_key.private, msg_hash)
        public = self.attestor_key.public
        return {
            _signal(prefix, "PubKeyX"): public[0],
            _signal(prefix, "PubKeyY"): public[1],
            _signal(prefix, "R8x"): signature.R8[0],
            _signal(prefix, "R8y"): signature.R8[1],
            _signal(prefix, "S"): signature.S,
        }

    def _membership(self, identities, subject):
        tree, members = merkle.build_membership_tree(
            self.hasher,
            identities,
            self.config.owners_tree_depth,
            self.config.zero_value,
        )
        return merkle.membership_proof(tree, members, subject)

    # Claim kinds

    def build_balance_threshold(self, claim, nonce=None):
        proof = self._membership(claim.owners, claim.subject_address)
        address = int(claim.subject_address, 16)
        message = [
            self.config.attestation_type_tag,
            proof.root,
            int(claim.token_address, 16),
            claim.network_byte,
            claim.threshold,
        ]
        nonce = list(nonce) if nonce is not None else new_session_nonce()
        signals = {"address": address}
        signals.update(self._sign("address", self.hasher.compress([address])))
        signals["balanceMessage"] = message
        signals.update(self._sign("balance", self.hasher.compress(message)))
        signals["pathIndices"] = proof.path_indices
        signals["siblings"] = proof.siblings
        signals["nonce"] = nonce
        witness = Witness(
            ClaimKind.BALANCE_THRESHOLD,
            signals,
            nullifier=self.nullifiers.session_nullifier(nonce),
            aux={"balance": claim.balance},
        )
        return self._finish(witness)

    def build_erc721_ownership(self, claim):
        message = utf8_bytes(claim.claim_string)
        msg_hash = self.hasher.compress(message)
        signals = {
            "message": message,
            "tokenAddress": utf8_bytes(claim.token_address),
        }
        signals.update(self._sign("", msg_hash))
        signals["M"] = msg_hash
        return self._finish(Witness(ClaimKind.ERC721_OWNERSHIP, signals))

    def build_email_domain(self, claim, nonce=None):
        domain = utf8_bytes(claim.domain)
        max_length = self.config.max_domain_length
        if len(domain) > max_length:
            raise OutOfRange(f"domain is {len(domain)} bytes, the circuit takes at most {max_length}")
        message = domain + [0] * (max_length - len(domain))
        nonce = list(nonce) if nonce is not None else new_session_nonce()
        signals = {"message": message}
        signals.update(self._sign("", self.hasher.compress(message)))
        signals["nonce"] = nonce
        witness = Witness(
            ClaimKind.EMAIL_DOMAIN,
            signals,
            nullifier=self.nullifiers.session_nullifier(nonce),
        )
        return self._finish(witness)

    def build_social_identity(self, claim, identity_key):
        public_key = ecdsa.public_key(identity_key)
        address = ecdsa.public_key_to_address(public_key)
        if address != claim.subject_address.lower():
            raise WitnessInconsistent("address_binding", "identity key does not control the subject address")

        # Address-hiding identity: efficient-ECDSA registers and commitment
        digest, signature = ecdsa.sign_message(
            identity_key, self.config.identity_message_template.format(address=address)
        )
        U = ecdsa.recover(signature.r, digest)
        u_registers = [_registers(coordinate) for coordinate in point_to_registers(U)]
        s_registers = _registers(encode_64x4(signature.s))
        pub_registers = [_registers(coordinate) for coordinate in point_to_registers(public_key)]
        commitment = self.identity_commitment(s_registers, u_registers, pub_registers)

        commitments = list(claim.commitments)
        if commitment not in commitments:
            commitments.append(commitment)
        commitments_tree = merkle.build(
            self.hasher, commitments, self.config.commitments_tree_depth, self.config.zero_value
        )
        commitment_proof = commitments_tree.prove_inclusion(commitments_tree.index_of(commitment))

        # Service attestation over the owners set
        owners_proof = self._membership(claim.owners, claim.subject_address)
        service = self.config.service_name
        message = [self.config.attestation_type_tag, owners_proof.root] + utf8_bytes(service)

        address_int = int(address, 16)
        signals = {
            "sealHubPathIndices": commitment_proof.path_indices,
            "sealHubSiblings": commitment_proof.siblings,
            "sealHubU": u_registers,
            "sealHubS": s_registers,
            "sealHubAddress": address_int,
            f"{service}Message": message,
        }
        signals.update(self._sign(service, self.hasher.compress(message)))
        signals["ownersPathIndices"] = owners_proof.path_indices
        signals["ownersSiblings"] = owners_proof.siblings

        nullifier = self.nullifiers.identity_nullifier(
            s_registers, u_registers, address_int, self.config.identity_nullifier_domain
        )
        witness = Witness(
            ClaimKind.SOCIAL_IDENTITY,
            signals,
            nullifier=nullifier,
            aux={
                "pubKey": pub_registers,
                "commitmentsRoot": commitment_proof.root,
                "r": signature.r,
                "v": signature.v,
                "digest": int.from_bytes(digest, 'big'),
            },
        )
        return self._finish(witness)

    def identity_commitment(self, s_registers, u_registers, pub_registers):
        return self.hasher.compress(
            list(s_registers)
            + list(u_registers[0])
            + list(u_registers[1])
            + list(pub_registers[0])
            + list(pub_registers[1])
        )

    def _finish(self, witness):
        self.self_check(witness)
        logger.debug("built %s witness with %d signals", witness.kind.value, len(witness.signals))
        return witness

    # Self-check

    def self_check(self, witness):
        """
        Recompute everything the circuit will assert from the witness alone
        and raise WitnessInconsistent naming the first failing check.
        """
        checks = {
            ClaimKind.BALANCE_THRESHOLD: self._check_balance_threshold,
            ClaimKind.ERC721_OWNERSHIP: self._check_erc721_ownership,
            ClaimKind.EMAIL_DOMAIN: self._check_email_domain,
            ClaimKind.SOCIAL_IDENTITY: self._check_social_identity,
        }
        try:
            checks[witness.kind](witness.signals, witness)
        except KeyError as e:
            raise WitnessInconsistent("missing_signal", str(e)) from e
        except (EncodingError, ValueError, TypeError, IndexError) as e:
            raise WitnessInconsistent("malformed_signal", str(e)) from e

    def _check_signature(self, signals, prefix, msg_hash, check):
        public = (to_int(signals[_signal(prefix, "PubKeyX")]), to_int(signals[_signal(prefix, "PubKeyY")]))
        signature = EdDSASignature(
            (to_int(signals[_signal(prefix, "R8x")]), to_int(signals[_signal(prefix, "R8y")])),
            to_int(signals[_signal(prefix, "S")]),
        )
        if public != tuple(self.attestor_key.public):
            raise WitnessInconsistent(check, "public key is not the attestor's")
        if not self.signer.verify_digest(public, msg_hash, signature):
            raise WitnessInconsistent(check, "EdDSA signature does not verify")

    def _check_root(self, leaf, siblings, path_indices, root, check):
        depth = len(siblings)
        try:
            computed = merkle.compute_root(self.hasher, leaf, siblings, path_indices)
        except ConsistencyError as e:
            raise WitnessInconsistent(check, str(e)) from e
        if computed != to_int(root):
            raise WitnessInconsistent(check, f"recomputed root over {depth} levels does not match")

    def _check_session_nullifier(self, signals, witness):
        if self.nullifiers.session_nullifier(signals["nonce"]) != witness.nullifier:
            raise WitnessInconsistent("nullifier", "nonce does not hash to the nullifier")

    def _check_balance_threshold(self, signals, witness):
        message = [to_int(element) for element in signals["balanceMessage"]]
        if len(message) != 5:
            raise WitnessInconsistent("balance_message", f"expected 5 elements, got {len(message)}")
        address = to_int(signals["address"])
        self._check_signature(signals, "address", self.hasher.compress([address]), "address_signature")
        self._check_signature(signals, "balance", self.hasher.compress(message), "balance_signature")
        if message[0] != self.config.attestation_type_tag:
            raise WitnessInconsistent("attestation_type")
        if message[3] not in NETWORK_BYTES:
            raise WitnessInconsistent("network_byte", f"{message[3]:#x} is not 'm' or 'g'")
        if len(signals["siblings"]) != self.config.owners_tree_depth:
            raise WitnessInconsistent("owners_root", "proof depth does not match the owners tree")
        self._check_root(address, signals["siblings"], signals["pathIndices"], message[1], "owners_root")
        self._check_session_nullifier(signals, witness)
        balance = witness.aux.get("balance")
        if balance is None or balance < message[4]:
            raise WitnessInconsistent("threshold", "balance is below the attested threshold")

    def _check_erc721_ownership(self, signals, witness):
        message = _registers(signals["message"])
        token = _registers(signals["tokenAddress"])
        msg_hash = to_int(signals["M"])
        if self.hasher.compress(message) != msg_hash:
            raise WitnessInconsistent("message_hash", "M is not the hash of message")
        suffix = utf8_bytes("owns") + token
        if message[-len(suffix):] != suffix:
            raise WitnessInconsistent("token_address", "message does not end with owns<token>")
        self._check_signature(signals, "", msg_hash, "signature")

    def _check_email_domain(self, signals, witness):
        message = _registers(signals["message"])
        if len(message) != self.config.max_domain_length:
            raise WitnessInconsistent("message_length")
        self._check_signature(signals, "", self.hasher.compress(message), "signature")
        self._check_session_nullifier(signals, witness)

    def _check_social_identity(self, signals, witness):
        service = self.config.service_name
        message = [to_int(element) for element in signals[f"{service}Message"]]
        self._check_signature(signals, service, self.hasher.compress(message), f"{service}_signature")
        if message[0] != self.config.attestation_type_tag or message[2:] != utf8_bytes(service):
            raise WitnessInconsistent("service_message")

        address = to_int(signals["sealHubAddress"])
        if len(signals["ownersSiblings"]) != self.config.owners_tree_depth:
            raise WitnessInconsistent("owners_root", "proof depth does not match the owners tree")
        self._check_root(address, signals["ownersSiblings"], signals["ownersPathIndices"], message[1], "owners_root")

        u_registers = [_registers(coordinate) for coordinate in signals["sealHubU"]]
        s_registers = _registers(signals["sealHubS"])
        pub_registers = witness.aux["pubKey"]
        public_key = registers_to_point(pub_registers)
        if int(ecdsa.public_key_to_address(public_key), 16) != address:
            raise WitnessInconsistent("address_binding", "sealHubAddress is not derived from the public key")
        if not ecdsa.check_recovered(
            public_key,
            witness.aux["r"],
            decode_64x4(s_registers),
            witness.aux["v"],
            witness.aux["digest"],
            registers_to_point(u_registers),
        ):
            raise WitnessInconsistent("ecdsa_recovery", "s*T + U does not reproduce the public key")

        commitment = self.identity_commitment(s_registers, u_registers, pub_registers)
        if len(signals["sealHubSiblings"]) != self.config.commitments_tree_depth:
            raise WitnessInconsistent("commitment_root", "proof depth does not match the commitment tree")
        self._check_root(
            commitment,
            signals["sealHubSiblings"],
            signals["sealHubPathIndices"],
            witness.aux["commitmentsRoot"],
            "commitment_root",
        )

        nullifier = self.nullifiers.identity_nullifier(
            s_registers, u_registers, address, self.config.identity_nullifier_domain
        )
        if nullifier != witness.nullifier:
            raise WitnessInconsistent("nullifier", "identity nullifier does not match")
