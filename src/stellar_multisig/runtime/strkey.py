"""
StrKey identity encoding.

Account ids ("G...") and contract ids ("C...") are 32-byte payloads shown
as 56 base32 characters: version byte, payload, CRC16-XModem checksum.
"""

from __future__ import annotations
import base64
import binascii
from enum import IntEnum


STRKEY_LENGTH = 56
PAYLOAD_LENGTH = 32


class VersionByte(IntEnum):
    """StrKey version bytes for the identity kinds handled here."""
    ACCOUNT_ID = 6 << 3   # 'G'
    CONTRACT = 2 << 3     # 'C'


_PREFIXES = {
    VersionByte.ACCOUNT_ID: "G",
    VersionByte.CONTRACT: "C",
}


class StrKeyError(ValueError):
    """Malformed StrKey text."""
    pass


def _crc16_xmodem(data: bytes) -> int:
    crc = 0x0000
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def encode(version: VersionByte, payload: bytes) -> str:
    """
    Encode a 32-byte payload as StrKey text.

    Args:
        version: Version byte selecting the identity kind
        payload: Raw 32-byte key or contract hash

    Returns:
        56-character StrKey string
    """
    if len(payload) != PAYLOAD_LENGTH:
        raise StrKeyError(f"StrKey payload must be {PAYLOAD_LENGTH} bytes, got {len(payload)}")
    body = bytes([version]) + payload
    checksum = _crc16_xmodem(body).to_bytes(2, "little")
    return base64.b32encode(body + checksum).decode("ascii")


def decode(version: VersionByte, text: str) -> bytes:
    """
    Decode StrKey text, checking length, prefix and checksum.

    Args:
        version: Expected version byte
        text: StrKey string

    Returns:
        Raw 32-byte payload

    Raises:
        StrKeyError: If any structural check fails
    """
    if not isinstance(text, str):
        raise StrKeyError(f"StrKey must be a string, got {type(text).__name__}")
    if len(text) != STRKEY_LENGTH:
        raise StrKeyError(f"StrKey must be {STRKEY_LENGTH} characters, got {len(text)}")
    prefix = _PREFIXES[version]
    if not text.startswith(prefix):
        raise StrKeyError(f"StrKey must start with '{prefix}'")

    try:
        raw = base64.b32decode(text, casefold=False)
    except (binascii.Error, ValueError) as e:
        raise StrKeyError(f"StrKey is not valid base32: {e}") from e

    body, checksum = raw[:-2], raw[-2:]
    if body[0] != version:
        raise StrKeyError(f"Unexpected StrKey version byte {body[0]}")
    if _crc16_xmodem(body).to_bytes(2, "little") != checksum:
        raise StrKeyError("StrKey checksum mismatch")
    return body[1:]


def encode_account_id(public_key: bytes) -> str:
    """Encode an Ed25519 public key as a 'G...' account id."""
    return encode(VersionByte.ACCOUNT_ID, public_key)


def decode_account_id(account_id: str) -> bytes:
    """Decode a 'G...' account id into its Ed25519 public key."""
    return decode(VersionByte.ACCOUNT_ID, account_id)


def encode_contract_id(contract_hash: bytes) -> str:
    """Encode a contract hash as a 'C...' contract id."""
    return encode(VersionByte.CONTRACT, contract_hash)


def decode_contract_id(contract_id: str) -> bytes:
    """Decode a 'C...' contract id into its 32-byte hash."""
    return decode(VersionByte.CONTRACT, contract_id)


def is_valid_account_id(value: str) -> bool:
    try:
        decode_account_id(value)
    except StrKeyError:
        return False
    return True


def is_valid_contract_id(value: str) -> bool:
    try:
        decode_contract_id(value)
    except StrKeyError:
        return False
    return True


__all__ = [
    "STRKEY_LENGTH",
    "VersionByte",
    "StrKeyError",
    "encode",
    "decode",
    "encode_account_id",
    "decode_account_id",
    "encode_contract_id",
    "decode_contract_id",
    "is_valid_account_id",
    "is_valid_contract_id",
]
