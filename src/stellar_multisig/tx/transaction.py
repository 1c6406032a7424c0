"""
Unsigned transaction body and its parts.
"""

from __future__ import annotations
from typing import Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..runtime.strkey import encode_account_id
from .operations import Operation


MAX_OPERATIONS = 100


class TimeBounds(BaseModel):
    """Validity window in unix seconds; max_time 0 means unbounded."""
    min_time: int = Field(default=0, ge=0, lt=1 << 64)
    max_time: int = Field(default=0, ge=0, lt=1 << 64)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self) -> "TimeBounds":
        if self.max_time and self.max_time < self.min_time:
            raise ValueError("max_time must not be earlier than min_time")
        return self


class SimulationFootprint(BaseModel):
    """
    Resources a contract call declared during simulation.

    Ledger keys are kept as opaque encoded bytes. `auth` entries belong to
    the invoke operation; the rest is folded into the transaction body.
    """
    read_only: Tuple[bytes, ...] = ()
    read_write: Tuple[bytes, ...] = ()
    instructions: int = Field(default=0, ge=0, lt=1 << 32)
    read_bytes: int = Field(default=0, ge=0, lt=1 << 32)
    write_bytes: int = Field(default=0, ge=0, lt=1 << 32)
    resource_fee: int = Field(default=0, ge=0, lt=1 << 63)
    auth: Tuple[bytes, ...] = ()

    model_config = ConfigDict(frozen=True)

    def without_auth(self) -> "SimulationFootprint":
        return self.model_copy(update={"auth": ()})


class DecoratedSignature(BaseModel):
    """One signature attached to an envelope, keyed by the signer's public key."""
    public_key: bytes = Field(min_length=32, max_length=32)
    signature: bytes = Field(min_length=1, max_length=64)

    model_config = ConfigDict(frozen=True)

    @property
    def identity(self) -> str:
        """Signer account id ('G...')."""
        return encode_account_id(self.public_key)


class Transaction(BaseModel):
    """
    Immutable transaction body: everything that is hashed and signed.
    """
    source_account: str
    sequence: int = Field(ge=0, lt=1 << 63)
    fee: int = Field(ge=0, lt=1 << 32)
    time_bounds: TimeBounds = Field(default_factory=TimeBounds)
    operations: Tuple[Operation, ...]
    soroban_data: Optional[SimulationFootprint] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("operations", mode="before")
    @classmethod
    def coerce_operations(cls, v: Any) -> Any:
        if isinstance(v, list):
            return tuple(v)
        return v


__all__ = [
    "MAX_OPERATIONS",
    "TimeBounds",
    "SimulationFootprint",
    "DecoratedSignature",
    "Transaction",
]
