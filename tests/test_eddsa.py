"""
Tests for Baby Jubjub arithmetic and EdDSA-MiMC signatures.
"""
import pytest

from attestation_inputs import babyjub
from attestation_inputs.eddsa import EdDSASignature, generate_k
from attestation_inputs.errors import InvalidScalar


class TestCurve:
    def test_base_points_in_curve(self):
        assert babyjub.in_curve(babyjub.GENERATOR)
        assert babyjub.in_curve(babyjub.BASE8)

    def test_base8_is_eight_times_generator(self):
        assert babyjub.multiply(babyjub.GENERATOR, 8) == babyjub.BASE8

    def test_base8_has_subgroup_order(self):
        assert babyjub.multiply(babyjub.BASE8, babyjub.SUB_ORDER) == babyjub.IDENTITY

    def test_identity_is_neutral(self):
        assert babyjub.point_add(babyjub.BASE8, babyjub.IDENTITY) == babyjub.BASE8

    def test_addition_agrees_with_multiplication(self):
        doubled = babyjub.point_add(babyjub.BASE8, babyjub.BASE8)
        assert doubled == babyjub.multiply(babyjub.BASE8, 2)
        assert babyjub.in_curve(doubled)

    def test_off_curve_point(self):
        assert not babyjub.in_curve((1, 1))


class TestKeys:
    def test_key_from_seed_deterministic(self, signer):
        assert signer.key_from_seed(b"seed") == signer.key_from_seed(b"seed")
        assert signer.key_from_seed(b"seed") != signer.key_from_seed(b"other seed")

    def test_hex_seed(self, signer):
        assert signer.key_from_seed("0x0102") == signer.key_from_seed(b"\x01\x02")

    def test_public_key_in_curve(self, attestor_key):
        assert 0 < attestor_key.private < babyjub.SUB_ORDER
        assert babyjub.in_curve(attestor_key.public)

    @pytest.mark.parametrize("private", [0, babyjub.SUB_ORDER, -1])
    def test_unreduced_private_rejected(self, signer, private):
        with pytest.raises(InvalidScalar):
            signer.sign_digest(private, 1)


class TestNonce:
    def test_deterministic(self):
        assert generate_k(5, 10) == generate_k(5, 10)

    def test_depends_on_message(self):
        assert generate_k(5, 10) != generate_k(5, 11)

    def test_in_subgroup_range(self):
        assert 0 < generate_k(5, 10) < babyjub.SUB_ORDER


class TestSignatures:
    def test_sign_verify(self, signer, attestor_key):
        signature = signer.sign(attestor_key.private, [1, 2, 3])
        assert signer.verify(attestor_key.public, [1, 2, 3], signature)

    def test_deterministic(self, signer, attestor_key):
        assert signer.sign_digest(attestor_key.private, 42) == signer.sign_digest(attestor_key.private, 42)

    def test_wrong_message(self, signer, attestor_key):
        signature = signer.sign(attestor_key.private, [1, 2, 3])
        assert not signer.verify(attestor_key.public, [1, 2, 4], signature)

    def test_wrong_key(self, signer, attestor_key):
        other = signer.key_from_seed(b"someone else")
        signature = signer.sign_digest(attestor_key.private, 42)
        assert not signer.verify_digest(other.public, 42, signature)

    def test_tampered_s(self, signer, attestor_key):
        signature = signer.sign_digest(attestor_key.private, 42)
        tampered = EdDSASignature(signature.R8, (signature.S + 1) % babyjub.SUB_ORDER)
        assert not signer.verify_digest(attestor_key.public, 42, tampered)

    def test_s_out_of_range(self, signer, attestor_key):
        signature = signer.sign_digest(attestor_key.private, 42)
        tampered = EdDSASignature(signature.R8, signature.S + babyjub.SUB_ORDER)
        assert not signer.verify_digest(attestor_key.public, 42, tampered)

    def test_off_curve_r8(self, signer, attestor_key):
        signature = signer.sign_digest(attestor_key.private, 42)
        tampered = EdDSASignature((signature.R8[0] + 1, signature.R8[1]), signature.S)
        assert not signer.verify_digest(attestor_key.public, 42, tampered)


class TestKnownSignature:
    """A signature accepted by the ERC721OwnershipChecker circuit."""

    MESSAGE = [
        48, 120, 98, 102, 55, 52, 52, 56, 51, 68, 66, 57, 49, 52, 49, 57, 50, 98,
        98, 48, 97, 57, 53, 55, 55, 102, 51, 100, 56, 70, 98, 50, 57, 97, 54, 100,
        52, 99, 48, 56, 101, 69, 45, 111, 119, 110, 115, 45, 48, 120, 55, 50, 50,
        66, 48, 54, 55, 54, 70, 52, 53, 55, 97, 70, 101, 49, 51, 101, 52, 55, 57,
        101, 66, 50, 97, 56, 65, 52, 68, 101, 56, 56, 66, 65, 49, 53, 66, 50, 99,
        54, 45, 55, 74, 56, 50, 78, 66, 113, 103, 114, 56, 52, 104, 109, 80,
    ]
    PUBLIC = (
        13578469780849928704623562188688413596472689853032556827882124682666588837591,
        19666119278979591965777251527504328920019005148768920573158906368334798877314,
    )
    R8 = (
        8469436916298365544043193337481098975555446453630628875174746416326023935641,
        4474299135580209683611333548207644924142161290447851023506556298859123906410,
    )
    S = 2594716379317334933636582632769435786043094629071510864134279001599598843937
    M = 18205156670498516442487553783765237156336648508932025207823817239554663865632

    def test_message_digest(self, hasher):
        assert hasher.compress(self.MESSAGE) == self.M

    def test_verifies(self, signer):
        assert babyjub.in_curve(self.PUBLIC)
        assert signer.verify_digest(self.PUBLIC, self.M, EdDSASignature(self.R8, self.S))
        assert signer.verify(self.PUBLIC, self.MESSAGE, EdDSASignature(self.R8, self.S))

    def test_other_digest_rejected(self, signer):
        assert not signer.verify_digest(self.PUBLIC, self.M + 1, EdDSASignature(self.R8, self.S))
