import decimal
from enum import Enum
from typing import Optional


class SourceKind(Enum):
    """
    JDBC type tags reported by the source driver, keyed by their `java.sql.Types` code.
    """

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    BLOB = 2004
    CLOB = 2005
    NCLOB = 2011
    OTHER = 1111

    @classmethod
    def from_code(cls, code: int) -> "SourceKind":
        """Decode a `java.sql.Types` integer, mapping unknown codes to OTHER."""
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER

    @property
    def is_number(self) -> bool:
        """True for the variadic NUMBER kinds handled by the resolution engine."""
        return self in (SourceKind.DECIMAL, SourceKind.NUMERIC)

    @property
    def is_numeric(self) -> bool:
        """True for kinds whose description carries a precision and scale."""
        return self in (
            SourceKind.DECIMAL,
            SourceKind.NUMERIC,
            SourceKind.FLOAT,
            SourceKind.DOUBLE,
            SourceKind.REAL,
        )


class TargetKind(Enum):
    """Target representations a NUMBER column can be mapped to."""

    DECIMAL = "DECIMAL"
    DOUBLE = "DOUBLE"
    INTEGER = "INTEGER"
    VARCHAR = "VARCHAR"
    # No override configured
    UNDEFINED = "UNDEFINED"


ALLOWED_NUMBER_TYPES = (
    TargetKind.DECIMAL,
    TargetKind.DOUBLE,
    TargetKind.INTEGER,
    TargetKind.VARCHAR,
)


class UnsupportedTypeHandling(Enum):
    ROUND = "ROUND"  # only valid for oracle.number.exceeds-limits
    VARCHAR = "VARCHAR"
    IGNORE = "IGNORE"
    FAIL = "FAIL"


class RoundingMode(Enum):
    """
    The eight standard decimal rounding rules.

    UNNECESSARY asserts that no rounding is needed; rescaling fails if digits would be lost.
    """

    CEILING = decimal.ROUND_CEILING
    DOWN = decimal.ROUND_DOWN
    FLOOR = decimal.ROUND_FLOOR
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_UP = decimal.ROUND_HALF_UP
    UP = decimal.ROUND_UP
    UNNECESSARY = "UNNECESSARY"

    @property
    def rounding(self) -> Optional[str]:
        """The `decimal` module rounding constant, or None for UNNECESSARY."""
        if self is RoundingMode.UNNECESSARY:
            return None
        return self.value
