"""
Transaction models for the multisig coordinator.

Provides the immutable value types that make up an envelope:
- values.py: Explicitly typed contract call parameters
- operations.py: Operation variants and their operation classes
- transaction.py: Transaction body, time bounds, footprint, signatures
- envelope.py: Signed or unsigned envelope with content-addressed id

Building and validation live in builder.py, validation.py, thresholds.py
and contract.py, which are imported directly.
"""

from .values import (
    TypedValue, AddressValue, I128Value, U32Value, StringValue, BoolValue, BytesValue,
    parse_typed_value,
)
from .operations import (
    OperationClass, Asset, Operation, Payment, CreateAccount, SetSigner, SetThresholds,
    ContractInvoke,
)
from .transaction import (
    MAX_OPERATIONS, TimeBounds, SimulationFootprint, DecoratedSignature, Transaction,
)
from .envelope import TransactionEnvelope

__all__ = [
    "TypedValue",
    "AddressValue",
    "I128Value",
    "U32Value",
    "StringValue",
    "BoolValue",
    "BytesValue",
    "parse_typed_value",
    "OperationClass",
    "Asset",
    "Operation",
    "Payment",
    "CreateAccount",
    "SetSigner",
    "SetThresholds",
    "ContractInvoke",
    "MAX_OPERATIONS",
    "TimeBounds",
    "SimulationFootprint",
    "DecoratedSignature",
    "Transaction",
    "TransactionEnvelope",
]
