"""
Normalization of the (kind, column size, decimal digits) triple reported by the
source driver for a column.

Oracle reports NUMBER columns with a variety of encodings:

    NUMBER          -> (0, -127)    precision and scale undefined
    NUMBER(10)      -> (10, 0)
    NUMBER(10, 2)   -> (10, 2)
    NUMBER(5, -3)   -> (5, -3)      three zero digits left of the point, i.e. NUMBER(8, 0)
    NUMBER(*, 50)   -> (38, 50)     scale exceeds the target limit

`OracleTypeHandle` carries the resolved precision and scale along with flags that the
resolution engine branches on.
"""

import dataclasses
from dataclasses import dataclass

from oracle_number.constants import MAX_PRECISION, NULL_VALUE, UNDEFINED_SCALE
from oracle_number.types import SourceKind


@dataclass(frozen=True)
class RawTypeInfo:
    """
    Column type metadata exactly as fetched from the driver.

    Attributes:
        source_kind: The JDBC type tag (DATA_TYPE)
        column_size: COLUMN_SIZE, the precision for numeric types
        decimal_digits: DECIMAL_DIGITS, the scale; may be negative or UNDEFINED_SCALE
    """

    source_kind: SourceKind
    column_size: int
    decimal_digits: int


@dataclass(frozen=True, eq=False)
class OracleTypeHandle:
    """
    Canonical descriptor of a source column type.

    Built with `normalize` or `OracleTypeHandle.from_type_info`; derived copies are
    made with `with_overrides`.
    """

    source_kind: SourceKind
    column_size: int
    decimal_digits: int
    precision: int
    scale: int
    precision_undefined: bool = False
    scale_undefined: bool = False
    precision_limit_exceeded: bool = False
    scale_limit_exceeded: bool = False

    @classmethod
    def from_type_info(cls, type_info: RawTypeInfo) -> "OracleTypeHandle":
        return normalize(
            type_info.source_kind, type_info.column_size, type_info.decimal_digits
        )

    @property
    def type_limit_exceeded(self) -> bool:
        return self.precision_limit_exceeded or self.scale_limit_exceeded

    def with_overrides(self, **changes) -> "OracleTypeHandle":
        """Return a copy with the given fields replaced. Flags are copied, not recomputed."""
        return dataclasses.replace(self, **changes)

    @property
    def type_name(self) -> str:
        return self.source_kind.name

    @property
    def description(self) -> str:
        if self.source_kind.is_numeric:
            return "{}({}, {})".format(self.type_name, self.precision, self.scale)
        return "{}({})".format(self.type_name, self.column_size)

    @property
    def precision_description(self) -> str:
        precision = NULL_VALUE if self.precision_undefined else str(self.precision)
        scale = NULL_VALUE if self.scale_undefined else str(self.scale)
        return "{}:{}".format(precision, scale)

    def _identity(self):
        # NUMERIC columns encoded differently by the driver can resolve to the same type
        if self.source_kind == SourceKind.NUMERIC:
            return (self.source_kind, self.precision, self.scale)
        return (self.source_kind, self.column_size, self.decimal_digits)

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return self._identity() == other._identity()

    def __hash__(self):
        return hash(self._identity())

    def __str__(self):
        return "OracleTypeHandle(source_kind={}, column_size={}, decimal_digits={})".format(
            self.source_kind.name, self.column_size, self.decimal_digits
        )


def normalize(
    source_kind: SourceKind, column_size: int, decimal_digits: int
) -> OracleTypeHandle:
    """
    Resolve the precision and scale of a raw driver type triple.

    Never fails: every combination of inputs yields a handle.

    Args:
        source_kind: The JDBC type tag
        column_size: Driver reported precision, non-negative
        decimal_digits: Driver reported scale, may be negative or UNDEFINED_SCALE

    Returns:
        OracleTypeHandle with explicit precision and scale and the undefined/exceeded flags
    """
    precision = column_size
    scale = decimal_digits
    scale_undefined = False
    scale_limit_exceeded = False
    precision_undefined = False
    precision_limit_exceeded = False

    if decimal_digits == UNDEFINED_SCALE:
        # the sentinel is kept in `scale`; callers must branch on scale_undefined
        scale_undefined = True
    elif decimal_digits < 0:
        precision += abs(decimal_digits)
        scale = 0
    elif decimal_digits > MAX_PRECISION:
        scale_limit_exceeded = True

    # runs after the negative scale adjustment
    if column_size == 0 and precision == 0:
        precision_undefined = True
    elif precision > MAX_PRECISION:
        precision_limit_exceeded = True

    return OracleTypeHandle(
        source_kind=source_kind,
        column_size=column_size,
        decimal_digits=decimal_digits,
        precision=precision,
        scale=scale,
        precision_undefined=precision_undefined,
        scale_undefined=scale_undefined,
        precision_limit_exceeded=precision_limit_exceeded,
        scale_limit_exceeded=scale_limit_exceeded,
    )
