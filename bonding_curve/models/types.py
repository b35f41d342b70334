"""Bounded unsigned integer types for account and parameter models.

Program accounts store fixed-width little-endian integers. Snapshots decoded
elsewhere may hand them over as ints or as decimal strings (JSON cannot
carry u128 safely), so each alias accepts both and range-checks the result.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator


def _make_uint_validator(bits: int):
    max_value = (1 << bits) - 1
    name = f"u{bits}"

    def validate(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer, got bool")
        if isinstance(value, str):
            try:
                value = int(value, 10)
            except ValueError as err:
                raise ValueError(f"{name} must be a decimal integer string: '{value}'") from err
        if not isinstance(value, int):
            raise ValueError(f"{name} must be string or int, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"{name} cannot be negative: {value}")
        if value > max_value:
            raise ValueError(f"{name} overflow: {value} > 2^{bits}-1")
        return value

    validate.__name__ = f"validate_{name}"
    return validate


validate_u8 = _make_uint_validator(8)
validate_u16 = _make_uint_validator(16)
validate_u32 = _make_uint_validator(32)
validate_u64 = _make_uint_validator(64)
validate_u128 = _make_uint_validator(128)

U8 = Annotated[int, BeforeValidator(validate_u8)]
U16 = Annotated[int, BeforeValidator(validate_u16)]
U32 = Annotated[int, BeforeValidator(validate_u32)]
U64 = Annotated[int, BeforeValidator(validate_u64)]
U128 = Annotated[int, BeforeValidator(validate_u128)]

__all__ = [
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "validate_u8",
    "validate_u16",
    "validate_u32",
    "validate_u64",
    "validate_u128",
]
