"""
Reformat an externally generated Groth16 proof into verifier calldata.

Input is what snarkjs writes: proof.json

    {"pi_a": [x, y, "1"], "pi_b": [[x0, x1], [y0, y1], ["1", "0"]],
     "pi_c": [x, y, "1"], "protocol": "groth16", "curve": "bn128"}

and public.json, a flat list of decimal strings. Output is the argument
shape of the pairing-check verifier contract's verifyProof(a, b, c, input),
every number as 32-byte 0x-hex. The G2 coordinates are (c1, c0) ordered on
chain, so each pair of pi_b is swapped.

This module only reshapes and sanity-checks; it never verifies a proof.
"""

import json
import os
from typing import Any, Mapping

from py_ecc.bn128 import FQ, FQ2, b, b2, field_modulus, is_on_curve

from .errors import ProofFormatError, WitnessInconsistent
from .field import SNARK_SCALAR_FIELD, to_int


def load_json(source):
    """Load JSON from a mapping (copied), a path or a JSON string."""
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, (list, tuple)):
        return list(source)
    if isinstance(source, (bytes, bytearray)):
        source = bytes(source).decode("utf-8")
    text = str(source)
    if os.path.isfile(text):
        with open(text, "r", encoding="utf-8") as f:
            return json.load(f)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ProofFormatError(f"could not load JSON from source: {e}") from e


def to_uint256_hex(value):
    return "0x" + format(value, "064x")


def _coordinate(value, what):
    try:
        value = to_int(value)
    except (TypeError, ValueError) as e:
        raise ProofFormatError(f"{what} is not a number: {value!r}") from e
    if not 0 <= value < field_modulus:
        raise ProofFormatError(f"{what} is outside the base field")
    return value


def _g1(point, what):
    if not isinstance(point, (list, tuple)) or len(point) < 2:
        raise ProofFormatError(f"{what} must be a G1 point")
    x = _coordinate(point[0], f"{what}.x")
    y = _coordinate(point[1], f"{what}.y")
    if not is_on_curve((FQ(x), FQ(y)), b):
        raise ProofFormatError(f"{what} is not on the BN254 G1 curve")
    return x, y


def _g2(point, what):
    if not isinstance(point, (list, tuple)) or len(point) < 2:
        raise ProofFormatError(f"{what} must be a G2 point")
    try:
        (x0, x1), (y0, y1) = point[0][:2], point[1][:2]
    except (TypeError, ValueError) as e:
        raise ProofFormatError(f"{what} must hold two coordinate pairs") from e
    x0, x1 = _coordinate(x0, f"{what}.x0"), _coordinate(x1, f"{what}.x1")
    y0, y1 = _coordinate(y0, f"{what}.y0"), _coordinate(y1, f"{what}.y1")
    if not is_on_curve((FQ2([x0, x1]), FQ2([y0, y1])), b2):
        raise ProofFormatError(f"{what} is not on the BN254 G2 twist")
    return (x0, x1), (y0, y1)


def solidity_call_data(proof, public_signals, witness=None):
    """
    Return {"a", "b", "c", "input"} for verifyProof(). When a witness with
    a nullifier is given, the nullifier must be among the public signals.
    """
    proof = load_json(proof)
    if "proof" in proof and isinstance(proof["proof"], Mapping):
        if public_signals is None:
            public_signals = proof.get("publicSignals")
        proof = dict(proof["proof"])
    if public_signals is None:
        raise ProofFormatError("public signals are required")
    public_signals = load_json(public_signals)
    if not isinstance(public_signals, list):
        raise ProofFormatError("public signals must be a list")

    for key in ("pi_a", "pi_b", "pi_c"):
        if key not in proof:
            raise ProofFormatError(f"proof is missing {key}")
    a = _g1(proof["pi_a"], "pi_a")
    (bx0, bx1), (by0, by1) = _g2(proof["pi_b"], "pi_b")
    c = _g1(proof["pi_c"], "pi_c")

    inputs = []
    for i, signal in enumerate(public_signals):
        try:
            value = to_int(signal)
        except (TypeError, ValueError) as e:
            raise ProofFormatError(f"public signal {i} is not a number") from e
        if not 0 <= value < SNARK_SCALAR_FIELD:
            raise ProofFormatError(f"public signal {i} is outside the scalar field")
        inputs.append(value)

    if witness is not None and witness.nullifier is not None and witness.nullifier not in inputs:
        raise WitnessInconsistent("public_signals", "the witness nullifier is not a public signal")

    return {
        "a": [to_uint256_hex(a[0]), to_uint256_hex(a[1])],
        "b": [
            [to_uint256_hex(bx1), to_uint256_hex(bx0)],
            [to_uint256_hex(by1), to_uint256_hex(by0)],
        ],
        "c": [to_uint256_hex(c[0]), to_uint256_hex(c[1])],
        "input": [to_uint256_hex(value) for value in inputs],
    }


def write_call_data(path, call_data: Any):
    with open(path, "w") as f:
        json.dump(call_data, f, indent=4)
