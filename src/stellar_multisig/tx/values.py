"""
Typed contract call parameters.

Every parameter carries its wire type explicitly; nothing is inferred
from the Python type of the value, so "GABC..." is only an address when
it is wrapped as one.
"""

from __future__ import annotations
from typing import Annotated, Any, Dict, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1
U32_MAX = (1 << 32) - 1


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_native(self) -> Any:
        """Return the plain Python value."""
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form, e.g. {"type": "i128", "value": "5"}."""
        value = self.value
        if isinstance(value, bytes):
            value = value.hex()
        elif isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        return {"type": self.type, "value": value}


class AddressValue(_Value):
    """Account ('G...') or contract ('C...') identity."""
    type: Literal["address"] = "address"
    value: str


class I128Value(_Value):
    """Signed 128-bit integer, used for token amounts."""
    type: Literal["i128"] = "i128"
    value: int = Field(ge=I128_MIN, le=I128_MAX)


class U32Value(_Value):
    type: Literal["u32"] = "u32"
    value: int = Field(ge=0, le=U32_MAX)


class StringValue(_Value):
    type: Literal["string"] = "string"
    value: str


class BoolValue(_Value):
    type: Literal["bool"] = "bool"
    value: bool

    @field_validator("value", mode="before")
    @classmethod
    def parse_bool(cls, v: Any) -> Any:
        """Accept the "true"/"false" strings that form inputs produce."""
        if isinstance(v, str) and v.lower() in ("true", "false"):
            return v.lower() == "true"
        return v


class BytesValue(_Value):
    type: Literal["bytes"] = "bytes"
    value: bytes

    @field_validator("value", mode="before")
    @classmethod
    def parse_hex(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return bytes.fromhex(v)
            except ValueError as e:
                raise ValueError(f"bytes value must be hex: {e}") from e
        return v


TypedValue = Annotated[
    Union[AddressValue, I128Value, U32Value, StringValue, BoolValue, BytesValue],
    Field(discriminator="type"),
]

_typed_value_adapter: TypeAdapter = TypeAdapter(TypedValue)


def parse_typed_value(data: Union[Dict[str, Any], _Value]) -> TypedValue:
    """
    Parse a {"type": ..., "value": ...} mapping into a TypedValue.

    Args:
        data: Mapping with an explicit wire type, or an existing TypedValue

    Returns:
        The matching TypedValue variant

    Raises:
        pydantic.ValidationError: If the type is unknown or the value is out of range
    """
    if isinstance(data, _Value):
        return data
    return _typed_value_adapter.validate_python(data)


# Short constructors
def address(value: str) -> AddressValue:
    return AddressValue(value=value)


def i128(value: int) -> I128Value:
    return I128Value(value=value)


def u32(value: int) -> U32Value:
    return U32Value(value=value)


def string(value: str) -> StringValue:
    return StringValue(value=value)


def boolean(value: bool) -> BoolValue:
    return BoolValue(value=value)


def bytes_value(value: bytes) -> BytesValue:
    return BytesValue(value=value)


__all__ = [
    "TypedValue",
    "AddressValue",
    "I128Value",
    "U32Value",
    "StringValue",
    "BoolValue",
    "BytesValue",
    "parse_typed_value",
    "address",
    "i128",
    "u32",
    "string",
    "boolean",
    "bytes_value",
    "I128_MIN",
    "I128_MAX",
    "U32_MAX",
]
