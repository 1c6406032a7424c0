"""
Ledger operations that can be placed in an envelope.

Operations are immutable pydantic models tagged by `type`. Each one knows
its operation class, which decides the threshold tier it must satisfy.
"""

from __future__ import annotations
import re
from enum import Enum
from typing import Annotated, Any, Optional, Tuple, Union, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .values import TypedValue


NATIVE_ASSET_CODE = "XLM"
_ASSET_CODE_RE = re.compile(r"^[A-Za-z0-9]{1,12}$")


class OperationClass(str, Enum):
    """Operation classes as the threshold rules group them."""
    PAYMENT = "payment"
    CREATE_ACCOUNT = "createAccount"
    PATH_PAYMENT = "pathPayment"
    SET_OPTIONS = "setOptions"
    MANAGE_SIGNER = "manageSigner"
    CHANGE_TRUST = "changeTrust"
    ALLOW_TRUST = "allowTrust"
    INVOKE_CONTRACT = "invokeContract"


class Asset(BaseModel):
    """
    Native lumens or a credit asset identified by code and issuer.
    """
    code: str = NATIVE_ASSET_CODE
    issuer: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not _ASSET_CODE_RE.match(v):
            raise ValueError("Asset code must be 1-12 alphanumeric characters")
        return v

    @model_validator(mode="after")
    def require_issuer(self) -> "Asset":
        if self.code != NATIVE_ASSET_CODE and not self.issuer:
            raise ValueError("Asset issuer is required for non-native assets")
        return self

    @classmethod
    def native(cls) -> "Asset":
        return cls()

    @property
    def is_native(self) -> bool:
        return self.code == NATIVE_ASSET_CODE and self.issuer is None

    def __str__(self) -> str:
        if self.is_native:
            return "native"
        return f"{self.code}:{self.issuer}"


class _Operation(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def operation_class(self) -> OperationClass:
        raise NotImplementedError


class Payment(_Operation):
    """Send `amount` stroops of `asset` to `destination`."""
    type: Literal["payment"] = "payment"
    destination: str
    asset: Asset = Field(default_factory=Asset.native)
    amount: int = Field(gt=0, lt=1 << 63)

    @property
    def operation_class(self) -> OperationClass:
        return OperationClass.PAYMENT


class CreateAccount(_Operation):
    """Fund a new account with `starting_balance` stroops."""
    type: Literal["createAccount"] = "createAccount"
    destination: str
    starting_balance: int = Field(gt=0, lt=1 << 63)

    @property
    def operation_class(self) -> OperationClass:
        return OperationClass.CREATE_ACCOUNT


class SetSigner(_Operation):
    """Add, reweight (1-255) or remove (weight 0) a signer."""
    type: Literal["setSigner"] = "setSigner"
    identity: str
    weight: int = Field(ge=0, le=255)

    @property
    def operation_class(self) -> OperationClass:
        return OperationClass.MANAGE_SIGNER


class SetThresholds(_Operation):
    """Set the low/medium/high thresholds and optionally the master key weight."""
    type: Literal["setThresholds"] = "setThresholds"
    low: int = Field(ge=0, le=255)
    medium: int = Field(ge=0, le=255)
    high: int = Field(ge=0, le=255)
    master_weight: Optional[int] = Field(default=None, ge=0, le=255)

    @property
    def operation_class(self) -> OperationClass:
        return OperationClass.SET_OPTIONS


class ContractInvoke(_Operation):
    """
    Invoke `method` on a deployed contract.

    `auth` holds the authorization entries returned by simulation; it is
    empty until the call has been simulated.
    """
    type: Literal["invokeContract"] = "invokeContract"
    contract_id: str
    method: str = Field(min_length=1, max_length=32)
    params: Tuple[TypedValue, ...] = ()
    auth: Tuple[bytes, ...] = ()

    @field_validator("params", mode="before")
    @classmethod
    def coerce_params(cls, v: Any) -> Any:
        if isinstance(v, list):
            return tuple(v)
        return v

    @property
    def operation_class(self) -> OperationClass:
        return OperationClass.INVOKE_CONTRACT


Operation = Annotated[
    Union[Payment, CreateAccount, SetSigner, SetThresholds, ContractInvoke],
    Field(discriminator="type"),
]


__all__ = [
    "NATIVE_ASSET_CODE",
    "OperationClass",
    "Asset",
    "Operation",
    "Payment",
    "CreateAccount",
    "SetSigner",
    "SetThresholds",
    "ContractInvoke",
]
