"""
Account state snapshot.

AccountState is a read-only view of an account as fetched from the
ledger: its sequence number, weighted signers and threshold triple. It is
fetched fresh for each coordination round and never edited in place.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AccountSigner(BaseModel):
    """One authorized identity and its weight."""
    identity: str
    weight: int = Field(ge=0, le=255)

    model_config = ConfigDict(frozen=True)


class Thresholds(BaseModel):
    """Low / medium / high threshold tiers."""
    low: int = Field(default=0, ge=0, le=255)
    medium: int = Field(default=0, ge=0, le=255)
    high: int = Field(default=0, ge=0, le=255)

    model_config = ConfigDict(frozen=True)


class AccountState(BaseModel):
    """
    Immutable snapshot of an account's authorization settings.

    Attributes:
        account_id: 'G...' identity of the account
        sequence: Current on-ledger sequence number
        signers: Authorized identities with weights, identity unique
        thresholds: Threshold triple
    """
    account_id: str
    sequence: int = Field(ge=0, lt=1 << 63)
    signers: Tuple[AccountSigner, ...] = ()
    thresholds: Thresholds = Field(default_factory=Thresholds)

    model_config = ConfigDict(frozen=True)

    @field_validator("signers", mode="before")
    @classmethod
    def coerce_signers(cls, v: Any) -> Any:
        if isinstance(v, list):
            return tuple(v)
        return v

    @model_validator(mode="after")
    def unique_identities(self) -> "AccountState":
        seen = set()
        for signer in self.signers:
            if signer.identity in seen:
                raise ValueError(f"Duplicate signer identity: {signer.identity}")
            seen.add(signer.identity)
        return self

    @classmethod
    def single_key(cls, account_id: str, sequence: int) -> AccountState:
        """Plain account: its own key with weight 1, all thresholds 0."""
        return cls(
            account_id=account_id,
            sequence=sequence,
            signers=(AccountSigner(identity=account_id, weight=1),),
            thresholds=Thresholds(),
        )

    @property
    def is_multisig(self) -> bool:
        """More than one signer and a medium threshold above 1."""
        return len(self.signers) > 1 and self.thresholds.medium > 1

    @property
    def next_sequence(self) -> int:
        """Sequence number the next transaction from this account must carry."""
        return self.sequence + 1

    def weight_of(self, identity: str) -> Optional[int]:
        """Weight of `identity`, or None if it is not a signer."""
        for signer in self.signers:
            if signer.identity == identity:
                return signer.weight
        return None

    def has_signer(self, identity: str) -> bool:
        return self.weight_of(identity) is not None

    @property
    def total_weight(self) -> int:
        return sum(s.weight for s in self.signers)

    def summary(self) -> Dict[str, Any]:
        """Signers, thresholds and multisig flag in display form."""
        return {
            "accountId": self.account_id,
            "signers": [{"publicKey": s.identity, "weight": s.weight} for s in self.signers],
            "thresholds": {
                "low": self.thresholds.low,
                "medium": self.thresholds.medium,
                "high": self.thresholds.high,
            },
            "totalSigners": len(self.signers),
            "isMultisig": self.is_multisig,
        }


__all__ = ["AccountSigner", "Thresholds", "AccountState"]
