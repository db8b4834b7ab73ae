"""
Claim descriptions, one immutable model per claim kind.

Claims are validated when constructed; the builder never has to guess at
defaults or positional arguments.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .field import UINT256_MAX

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class ClaimKind(str, Enum):
    BALANCE_THRESHOLD = "BalanceThreshold"
    ERC721_OWNERSHIP = "Erc721Ownership"
    EMAIL_DOMAIN = "EmailDomain"
    SOCIAL_IDENTITY = "SocialIdentity"


def _check_address(value: str) -> str:
    if not ADDRESS_RE.match(value):
        raise ValueError(f"not a 20-byte hex address: {value!r}")
    return value


class Claim(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClaimKind


class BalanceThresholdClaim(Claim):
    kind: Literal[ClaimKind.BALANCE_THRESHOLD] = ClaimKind.BALANCE_THRESHOLD
    subject_address: str
    token_address: str
    network: Literal["m", "g"] = Field(description="m = mainnet, g = testnet")
    threshold: int = Field(ge=0, le=UINT256_MAX)
    balance: int = Field(ge=0, le=UINT256_MAX)
    owners: List[str] = Field(min_length=1, description="addresses in the owners set")

    @field_validator("subject_address", "token_address")
    @classmethod
    def _address(cls, value: str) -> str:
        return _check_address(value)

    @field_validator("owners")
    @classmethod
    def _owners(cls, value: List[str]) -> List[str]:
        return [_check_address(owner) for owner in value]

    @property
    def network_byte(self) -> int:
        return ord(self.network)


class Erc721OwnershipClaim(Claim):
    kind: Literal[ClaimKind.ERC721_OWNERSHIP] = ClaimKind.ERC721_OWNERSHIP
    subject_address: str
    token_address: str

    @field_validator("subject_address", "token_address")
    @classmethod
    def _address(cls, value: str) -> str:
        return _check_address(value)

    @property
    def claim_string(self) -> str:
        return f"{self.subject_address}owns{self.token_address}"


class EmailDomainClaim(Claim):
    kind: Literal[ClaimKind.EMAIL_DOMAIN] = ClaimKind.EMAIL_DOMAIN
    domain: str = Field(min_length=1)

    @field_validator("domain")
    @classmethod
    def _domain(cls, value: str) -> str:
        if "\x00" in value:
            raise ValueError("domain must not contain NUL bytes")
        return value


class SocialIdentityClaim(Claim):
    kind: Literal[ClaimKind.SOCIAL_IDENTITY] = ClaimKind.SOCIAL_IDENTITY
    subject_address: str
    owners: List[str] = Field(min_length=1, description="addresses authorized for the service")
    commitments: List[int] = Field(
        default_factory=list,
        description="identity commitments already in the commitment set",
    )

    @field_validator("subject_address")
    @classmethod
    def _address(cls, value: str) -> str:
        return _check_address(value)

    @field_validator("owners")
    @classmethod
    def _owners(cls, value: List[str]) -> List[str]:
        return [_check_address(owner) for owner in value]
