"""
Column mappings pair a target Arrow type with the read function that converts a
fetched value to that type.

Read functions are immutable and compare by strategy and bound parameters, so a
rounding decimal mapping never equals a pass-through decimal mapping even when both
produce the same DECIMAL(p, s).
"""

import decimal
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import pyarrow

from oracle_number.constants import (
    DECIMAL_BYTE_WIDTH,
    MAX_INTEGER_VALUE,
    MIN_INTEGER_VALUE,
)
from oracle_number.exc import DataError, NumericOverflowError, RescaleLossError
from oracle_number.types import RoundingMode, TargetKind

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise DataError(
            "Cannot read a boolean as a number", context={"value": value}
        )
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(value)
    except (decimal.InvalidOperation, TypeError, ValueError) as e:
        raise DataError(
            "Cannot read {!r} as a number: {}".format(value, e),
            context={"value": value},
        )


def _require_finite(value: Decimal):
    if not value.is_finite():
        raise DataError(
            "Cannot convert non-finite value {}".format(value), context={"value": value}
        )


def rescale(value: Decimal, scale: int, round_mode: RoundingMode) -> Decimal:
    """
    Return `value` with exactly `scale` fractional digits.

    Rounds with `round_mode`; under UNNECESSARY raises RescaleLossError if non-zero
    digits would be dropped. The arithmetic is done in a context wide enough to hold
    every integer digit of `value`, so nothing is lost to the default context precision.
    """
    _require_finite(value)
    integer_digits = max(value.adjusted() + 1, 0)
    context = decimal.Context(
        prec=integer_digits + scale + 1,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
    )
    exponent = Decimal((0, (1,), -scale))
    rounding = round_mode.rounding or decimal.ROUND_DOWN
    result = value.quantize(exponent, rounding=rounding, context=context)
    if round_mode == RoundingMode.UNNECESSARY and result != value:
        raise RescaleLossError(
            "Rescaling {} to scale {} would lose digits".format(value, scale),
            context={"value": value, "scale": scale, "round_mode": round_mode.name},
        )
    return result


def unscaled_value(value: Decimal) -> int:
    """The coefficient of `value` as a signed integer, ignoring its exponent."""
    sign, digits, _ = value.as_tuple()
    unscaled = int("".join(str(digit) for digit in digits))
    return -unscaled if sign else unscaled


def unscaled_to_decimal(unscaled: int, scale: int) -> Decimal:
    """Build the exact Decimal `unscaled * 10**-scale`."""
    digits = tuple(int(digit) for digit in str(abs(unscaled)))
    return Decimal((1 if unscaled < 0 else 0, digits, -scale))


def encode_unscaled_value(unscaled: int) -> bytes:
    """Encode an unscaled decimal value in the 16-byte little-endian decimal128 layout."""
    try:
        return unscaled.to_bytes(DECIMAL_BYTE_WIDTH, "little", signed=True)
    except OverflowError:
        raise NumericOverflowError(
            "Unscaled value {} does not fit in {} bytes".format(
                unscaled, DECIMAL_BYTE_WIDTH
            ),
            context={"value": unscaled},
        )


def decode_unscaled_value(encoded: bytes) -> int:
    return int.from_bytes(encoded, "little", signed=True)


def _encode_decimal(value: Decimal, precision: int, scale: int) -> bytes:
    unscaled = unscaled_value(value)
    if abs(unscaled) >= 10**precision:
        raise NumericOverflowError(
            "Value {} does not fit DECIMAL({}, {})".format(value, precision, scale),
            context={"value": value, "precision": precision, "scale": scale},
        )
    return encode_unscaled_value(unscaled)


class ReadFunction:
    """Converts one fetched value. `None` is always passed through as `None`."""

    def __call__(self, value: Any):
        if value is None:
            return None
        return self.read(value)

    def read(self, value: Any):
        raise NotImplementedError


@dataclass(frozen=True)
class RoundDecimalReadFunction(ReadFunction):
    """
    Rescales to exactly `scale` digits using `round_mode`, then encodes the unscaled
    value. Used when the source type exceeds the DECIMAL limits or leaves its precision
    or scale undefined.
    """

    precision: int
    scale: int
    round_mode: RoundingMode

    def read(self, value: Any) -> bytes:
        # rounding will add zeros, or drop digits, so exactly `scale` digits remain
        rounded = rescale(_to_decimal(value), self.scale, self.round_mode)
        return _encode_decimal(rounded, self.precision, self.scale)


@dataclass(frozen=True)
class DecimalReadFunction(ReadFunction):
    """
    Encodes a value whose type is known to fit DECIMAL(precision, scale).

    The value is aligned to `scale` without rounding; a value carrying more digits
    than its declared type raises RescaleLossError.
    """

    precision: int
    scale: int

    def read(self, value: Any) -> bytes:
        aligned = rescale(_to_decimal(value), self.scale, RoundingMode.UNNECESSARY)
        return _encode_decimal(aligned, self.precision, self.scale)


@dataclass(frozen=True)
class RoundDoubleReadFunction(ReadFunction):
    """Rounds to `scale` digits at decimal precision before narrowing to a double."""

    scale: int
    round_mode: RoundingMode

    def read(self, value: Any) -> float:
        return float(rescale(_to_decimal(value), self.scale, self.round_mode))


@dataclass(frozen=True)
class DoubleReadFunction(ReadFunction):
    def read(self, value: Any) -> float:
        if isinstance(value, float):
            return value
        return float(_to_decimal(value))


@dataclass(frozen=True)
class IntegerReadFunction(ReadFunction):
    """Truncates toward zero; values outside the 64-bit range raise NumericOverflowError."""

    def read(self, value: Any) -> int:
        number = _to_decimal(value)
        _require_finite(number)
        result = int(number)
        if result < MIN_INTEGER_VALUE or result > MAX_INTEGER_VALUE:
            raise NumericOverflowError(
                "Value {} is out of range for INTEGER".format(number),
                context={"value": number},
            )
        return result


@dataclass(frozen=True)
class DecimalVarcharReadFunction(ReadFunction):
    """Renders the value in plain fixed-point notation, never with an exponent."""

    def read(self, value: Any) -> str:
        return format(_to_decimal(value), "f")


@dataclass(frozen=True)
class VarcharReadFunction(ReadFunction):
    def read(self, value: Any) -> str:
        return str(value)


@dataclass(frozen=True)
class ColumnMapping:
    """
    Target type and read function chosen for a column.

    Attributes:
        arrow_type: The Arrow type values are produced for
        read_function: Converts one fetched value
    """

    arrow_type: pyarrow.DataType
    read_function: ReadFunction

    @property
    def target_kind(self) -> TargetKind:
        if pyarrow.types.is_decimal(self.arrow_type):
            return TargetKind.DECIMAL
        if pyarrow.types.is_floating(self.arrow_type):
            return TargetKind.DOUBLE
        if pyarrow.types.is_integer(self.arrow_type):
            return TargetKind.INTEGER
        return TargetKind.VARCHAR

    @property
    def is_rounding(self) -> bool:
        return isinstance(
            self.read_function, (RoundDecimalReadFunction, RoundDoubleReadFunction)
        )

    def read(self, value: Any):
        return self.read_function(value)

    def to_python(self, value: Any) -> Optional[Any]:
        """Read `value` and turn decimal128 bytes back into a Decimal at the target scale."""
        result = self.read_function(value)
        if result is not None and pyarrow.types.is_decimal(self.arrow_type):
            return unscaled_to_decimal(
                decode_unscaled_value(result), self.arrow_type.scale
            )
        return result


def round_decimal_column_mapping(
    decimal_type: pyarrow.Decimal128Type, round_mode: RoundingMode
) -> ColumnMapping:
    """
    ColumnMapping that rounds decimals and sets PRECISION and SCALE explicitly.

    Used when the precision of a NUMBER column exceeds the supported DECIMAL precision,
    or is left undefined, so values have to be rounded or padded to the target scale.
    """
    if decimal_type is None:
        raise ValueError("decimal_type is None")
    if round_mode is None:
        raise ValueError("round_mode is None")
    return ColumnMapping(
        decimal_type,
        RoundDecimalReadFunction(decimal_type.precision, decimal_type.scale, round_mode),
    )


def decimal_column_mapping(decimal_type: pyarrow.Decimal128Type) -> ColumnMapping:
    return ColumnMapping(
        decimal_type, DecimalReadFunction(decimal_type.precision, decimal_type.scale)
    )


def round_double_column_mapping(scale: int, round_mode: RoundingMode) -> ColumnMapping:
    """Return a DOUBLE mapping that rounds each value to `scale` digits first."""
    if round_mode is None:
        raise ValueError("round_mode is None")
    return ColumnMapping(pyarrow.float64(), RoundDoubleReadFunction(scale, round_mode))


def double_column_mapping() -> ColumnMapping:
    return ColumnMapping(pyarrow.float64(), DoubleReadFunction())


def integer_column_mapping() -> ColumnMapping:
    return ColumnMapping(pyarrow.int64(), IntegerReadFunction())


def decimal_varchar_column_mapping() -> ColumnMapping:
    """Convert a decimal type of unknown precision to unbounded text."""
    return ColumnMapping(pyarrow.string(), DecimalVarcharReadFunction())


def varchar_column_mapping() -> ColumnMapping:
    return ColumnMapping(pyarrow.string(), VarcharReadFunction())
