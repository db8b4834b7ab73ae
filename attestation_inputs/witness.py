"""
Witness objects and their JSON rendering.

`signals` maps the external circuit's input names to ints, lists of ints
or nested lists. Field names, arity and limb layout must match the
circuit exactly; a mismatch is only detected by the external prover.

`aux` holds values the self-check needs that are not circuit inputs (the
claimant's public key registers, the claimed balance). It is never
written to the witness file.
"""

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .claims import ClaimKind

# Arrays of bytes and path bits stay plain JSON numbers; everything else
# is a decimal string.
SMALL_INT_SIGNALS = frozenset({
    "message",
    "tokenAddress",
    "pathIndices",
    "ownersPathIndices",
    "sealHubPathIndices",
})


def _render(value, small):
    if isinstance(value, (list, tuple)):
        return [_render(item, small) for item in value]
    if small:
        return int(value)
    return str(int(value, 0) if isinstance(value, str) and value.startswith("0x") else value)


@dataclass
class Witness:
    kind: ClaimKind
    signals: Dict[str, Any]
    nullifier: Optional[int] = None
    aux: Dict[str, Any] = field(default_factory=dict)

    def to_json(self):
        return {
            name: _render(value, name in SMALL_INT_SIGNALS)
            for name, value in self.signals.items()
        }

    def replace(self, **signals):
        """Copy of this witness with some signals swapped out."""
        updated = copy.deepcopy(self)
        updated.signals.update(signals)
        return updated

    def write(self, path):
        with open(path, "w") as f:
            json.dump(self.to_json(), f, indent=4)
