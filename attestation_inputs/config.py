"""
Deployment configuration.

Every value here is fixed by the external circuits the witnesses are fed
to, so one AttestationConfig is chosen per deployment and passed
explicitly to the builder.
"""

import json
from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class AttestationConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    owners_tree_depth: int = Field(default=20, ge=1, le=64)
    commitments_tree_depth: int = Field(default=30, ge=1, le=64)
    zero_value: int = Field(default=0, ge=0)
    max_domain_length: int = Field(default=90, ge=1)
    attestation_type_tag: int = Field(default=0, ge=0, description='0 is the "owns" attestation')
    service_name: str = Field(default="farcaster", min_length=1)
    identity_nullifier_domain: Tuple[int, ...] = Field(default=(69, 420), min_length=1)
    identity_message_template: str = Field(default="Attesting identity for {address}")

    @classmethod
    def from_file(cls, path):
        with open(Path(path), "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))


DEFAULT_CONFIG = AttestationConfig()
