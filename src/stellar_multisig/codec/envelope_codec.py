"""
Envelope Codec

Canonical binary encoding of transactions and signed envelopes, and the
base64 text form used when envelopes are handed to external signers.
Encoding is a pure function of the values, so identical inputs always
give identical bytes and therefore identical transaction ids.
"""

from __future__ import annotations
import base64
import binascii
from enum import IntEnum
from typing import List, Sequence, Tuple

import pydantic

from ..runtime.errors import EncodingError, EnvelopeDecodeError
from ..runtime.strkey import (
    StrKeyError, decode_account_id, decode_contract_id,
    encode_account_id, encode_contract_id, is_valid_contract_id,
)
from ..tx.operations import (
    Asset, ContractInvoke, CreateAccount, Operation, Payment, SetSigner, SetThresholds,
)
from ..tx.transaction import (
    MAX_OPERATIONS, DecoratedSignature, SimulationFootprint, TimeBounds, Transaction,
)
from ..tx.values import (
    AddressValue, BoolValue, BytesValue, I128Value, StringValue, TypedValue, U32Value,
)
from .hashes import ENVELOPE_TYPE_TX
from .reader import BinaryReader
from .writer import BinaryWriter


MAX_SIGNATURES = 20
MAX_PARAMS = 64


class OperationType(IntEnum):
    CREATE_ACCOUNT = 0
    PAYMENT = 1
    SET_SIGNER = 2
    SET_THRESHOLDS = 3
    INVOKE_CONTRACT = 4


class ValueType(IntEnum):
    BOOL = 0
    U32 = 3
    I128 = 10
    BYTES = 13
    STRING = 14
    ADDRESS = 18


class AssetType(IntEnum):
    NATIVE = 0
    CREDIT_ALPHANUM4 = 1
    CREDIT_ALPHANUM12 = 2


class AddressType(IntEnum):
    ACCOUNT = 0
    CONTRACT = 1


# =============================================================================
# Encoding
# =============================================================================

def _write_account(w: BinaryWriter, account_id: str) -> None:
    w.fixed_opaque(decode_account_id(account_id), 32)


def _write_asset(w: BinaryWriter, asset: Asset) -> None:
    if asset.is_native:
        w.u32(AssetType.NATIVE)
        return
    code = asset.code.encode("ascii")
    if len(code) <= 4:
        w.u32(AssetType.CREDIT_ALPHANUM4)
        w.fixed_opaque(code.ljust(4, b"\x00"), 4)
    else:
        w.u32(AssetType.CREDIT_ALPHANUM12)
        w.fixed_opaque(code.ljust(12, b"\x00"), 12)
    _write_account(w, asset.issuer)


def _write_value(w: BinaryWriter, value: TypedValue) -> None:
    if isinstance(value, BoolValue):
        w.u32(ValueType.BOOL)
        w.boolean(value.value)
    elif isinstance(value, U32Value):
        w.u32(ValueType.U32)
        w.u32(value.value)
    elif isinstance(value, I128Value):
        w.u32(ValueType.I128)
        unsigned = value.value & ((1 << 128) - 1)
        w.u64(unsigned >> 64)
        w.u64(unsigned & 0xFFFFFFFFFFFFFFFF)
    elif isinstance(value, BytesValue):
        w.u32(ValueType.BYTES)
        w.var_opaque(value.value)
    elif isinstance(value, StringValue):
        w.u32(ValueType.STRING)
        w.string(value.value)
    elif isinstance(value, AddressValue):
        w.u32(ValueType.ADDRESS)
        if is_valid_contract_id(value.value):
            w.u32(AddressType.CONTRACT)
            w.fixed_opaque(decode_contract_id(value.value), 32)
        else:
            w.u32(AddressType.ACCOUNT)
            _write_account(w, value.value)
    else:
        raise EncodingError(f"Unsupported value type: {type(value).__name__}")


def _write_operation(w: BinaryWriter, op: Operation) -> None:
    if isinstance(op, CreateAccount):
        w.u32(OperationType.CREATE_ACCOUNT)
        _write_account(w, op.destination)
        w.i64(op.starting_balance)
    elif isinstance(op, Payment):
        w.u32(OperationType.PAYMENT)
        _write_account(w, op.destination)
        _write_asset(w, op.asset)
        w.i64(op.amount)
    elif isinstance(op, SetSigner):
        w.u32(OperationType.SET_SIGNER)
        _write_account(w, op.identity)
        w.u32(op.weight)
    elif isinstance(op, SetThresholds):
        w.u32(OperationType.SET_THRESHOLDS)
        w.u32(op.low)
        w.u32(op.medium)
        w.u32(op.high)
        w.optional_flag(op.master_weight is not None)
        if op.master_weight is not None:
            w.u32(op.master_weight)
    elif isinstance(op, ContractInvoke):
        w.u32(OperationType.INVOKE_CONTRACT)
        w.fixed_opaque(decode_contract_id(op.contract_id), 32)
        w.string(op.method)
        w.u32(len(op.params))
        for param in op.params:
            _write_value(w, param)
        w.u32(len(op.auth))
        for entry in op.auth:
            w.var_opaque(entry)
    else:
        raise EncodingError(f"Unsupported operation type: {type(op).__name__}")


def _write_footprint(w: BinaryWriter, data: SimulationFootprint) -> None:
    w.u32(len(data.read_only))
    for key in data.read_only:
        w.var_opaque(key)
    w.u32(len(data.read_write))
    for key in data.read_write:
        w.var_opaque(key)
    w.u32(data.instructions)
    w.u32(data.read_bytes)
    w.u32(data.write_bytes)
    w.i64(data.resource_fee)


def encode_transaction(tx: Transaction) -> bytes:
    """
    Encode an unsigned transaction body.

    Args:
        tx: Transaction to encode

    Returns:
        Canonical bytes; the input to the transaction id hash

    Raises:
        EncodingError: If a field cannot be represented (e.g. malformed StrKey)
    """
    w = BinaryWriter()
    try:
        _write_account(w, tx.source_account)
        w.u32(tx.fee)
        w.i64(tx.sequence)
        w.u64(tx.time_bounds.min_time)
        w.u64(tx.time_bounds.max_time)
        w.u32(len(tx.operations))
        for op in tx.operations:
            _write_operation(w, op)
        w.optional_flag(tx.soroban_data is not None)
        if tx.soroban_data is not None:
            _write_footprint(w, tx.soroban_data)
    except (StrKeyError, ValueError) as e:
        raise EncodingError(f"Cannot encode transaction: {e}", cause=e) from e
    return w.to_bytes()


def encode_envelope(tx_bytes: bytes, signatures: Sequence[DecoratedSignature]) -> bytes:
    """
    Encode a (possibly signed) envelope around an encoded transaction.

    Args:
        tx_bytes: Output of encode_transaction
        signatures: Signatures in signing order

    Returns:
        Envelope bytes
    """
    w = BinaryWriter()
    w.u32(ENVELOPE_TYPE_TX)
    w.raw(tx_bytes)
    w.u32(len(signatures))
    for sig in signatures:
        w.fixed_opaque(sig.public_key, 32)
        w.var_opaque(sig.signature)
    return w.to_bytes()


# =============================================================================
# Decoding
# =============================================================================

def _read_account(r: BinaryReader) -> str:
    return encode_account_id(r.fixed_opaque(32))


def _read_asset(r: BinaryReader) -> Asset:
    kind = r.u32()
    if kind == AssetType.NATIVE:
        return Asset.native()
    if kind == AssetType.CREDIT_ALPHANUM4:
        raw = r.fixed_opaque(4)
    elif kind == AssetType.CREDIT_ALPHANUM12:
        raw = r.fixed_opaque(12)
    else:
        raise EnvelopeDecodeError(f"Unknown asset type {kind}")
    code = raw.rstrip(b"\x00").decode("ascii", errors="replace")
    return Asset(code=code, issuer=_read_account(r))


def _read_value(r: BinaryReader) -> TypedValue:
    tag = r.u32()
    if tag == ValueType.BOOL:
        return BoolValue(value=r.boolean())
    if tag == ValueType.U32:
        return U32Value(value=r.u32())
    if tag == ValueType.I128:
        unsigned = (r.u64() << 64) | r.u64()
        if unsigned >= 1 << 127:
            unsigned -= 1 << 128
        return I128Value(value=unsigned)
    if tag == ValueType.BYTES:
        return BytesValue(value=r.var_opaque())
    if tag == ValueType.STRING:
        return StringValue(value=r.string())
    if tag == ValueType.ADDRESS:
        kind = r.u32()
        if kind == AddressType.ACCOUNT:
            return AddressValue(value=_read_account(r))
        if kind == AddressType.CONTRACT:
            return AddressValue(value=encode_contract_id(r.fixed_opaque(32)))
        raise EnvelopeDecodeError(f"Unknown address type {kind}")
    raise EnvelopeDecodeError(f"Unknown value type {tag}")


def _read_count(r: BinaryReader, limit: int, what: str) -> int:
    n = r.u32()
    if n > limit:
        raise EnvelopeDecodeError(f"Too many {what}: {n} (limit {limit})")
    return n


def _read_operation(r: BinaryReader) -> Operation:
    tag = r.u32()
    if tag == OperationType.CREATE_ACCOUNT:
        return CreateAccount(destination=_read_account(r), starting_balance=r.i64())
    if tag == OperationType.PAYMENT:
        destination = _read_account(r)
        asset = _read_asset(r)
        return Payment(destination=destination, asset=asset, amount=r.i64())
    if tag == OperationType.SET_SIGNER:
        return SetSigner(identity=_read_account(r), weight=r.u32())
    if tag == OperationType.SET_THRESHOLDS:
        low, medium, high = r.u32(), r.u32(), r.u32()
        master_weight = r.u32() if r.optional_flag() else None
        return SetThresholds(low=low, medium=medium, high=high, master_weight=master_weight)
    if tag == OperationType.INVOKE_CONTRACT:
        contract_id = encode_contract_id(r.fixed_opaque(32))
        method = r.string(max_length=32)
        params = tuple(_read_value(r) for _ in range(_read_count(r, MAX_PARAMS, "parameters")))
        auth = tuple(r.var_opaque() for _ in range(_read_count(r, MAX_PARAMS, "auth entries")))
        return ContractInvoke(contract_id=contract_id, method=method, params=params, auth=auth)
    raise EnvelopeDecodeError(f"Unknown operation type {tag}")


def _read_footprint(r: BinaryReader) -> SimulationFootprint:
    read_only = tuple(r.var_opaque() for _ in range(_read_count(r, 1024, "read-only keys")))
    read_write = tuple(r.var_opaque() for _ in range(_read_count(r, 1024, "read-write keys")))
    return SimulationFootprint(
        read_only=read_only,
        read_write=read_write,
        instructions=r.u32(),
        read_bytes=r.u32(),
        write_bytes=r.u32(),
        resource_fee=r.i64(),
    )


def _read_transaction(r: BinaryReader) -> Transaction:
    source = _read_account(r)
    fee = r.u32()
    sequence = r.i64()
    time_bounds = TimeBounds(min_time=r.u64(), max_time=r.u64())
    operations = tuple(_read_operation(r) for _ in range(_read_count(r, MAX_OPERATIONS, "operations")))
    soroban_data = _read_footprint(r) if r.optional_flag() else None
    return Transaction(
        source_account=source,
        sequence=sequence,
        fee=fee,
        time_bounds=time_bounds,
        operations=operations,
        soroban_data=soroban_data,
    )


def decode_envelope(data: bytes) -> Tuple[Transaction, bytes, List[DecoratedSignature]]:
    """
    Decode an envelope into its transaction, raw transaction bytes and signatures.

    Args:
        data: Envelope bytes

    Returns:
        Tuple of (transaction, transaction bytes, signatures in envelope order)

    Raises:
        EnvelopeDecodeError: If the bytes are not a well-formed envelope
    """
    r = BinaryReader(data)
    try:
        envelope_type = r.u32()
        if envelope_type != ENVELOPE_TYPE_TX:
            raise EnvelopeDecodeError(f"Unsupported envelope type {envelope_type}")
        start = r.offset
        tx = _read_transaction(r)
        tx_bytes = bytes(data[start:r.offset])
        signatures = []
        for _ in range(_read_count(r, MAX_SIGNATURES, "signatures")):
            public_key = r.fixed_opaque(32)
            signatures.append(DecoratedSignature(public_key=public_key, signature=r.var_opaque(64)))
        r.expect_eof()
    except pydantic.ValidationError as e:
        raise EnvelopeDecodeError(f"Envelope contains invalid values: {e}", cause=e) from e
    return tx, tx_bytes, signatures


def to_base64(data: bytes) -> str:
    """Text form of an envelope, as exchanged with wallets."""
    return base64.b64encode(data).decode("ascii")


def from_base64(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EnvelopeDecodeError("Envelope text is not valid base64", cause=e) from e


__all__ = [
    "MAX_SIGNATURES",
    "OperationType",
    "ValueType",
    "encode_transaction",
    "encode_envelope",
    "decode_envelope",
    "to_base64",
    "from_base64",
]
