"""
Constants shared by the number mapping components.
"""

from typing import Tuple

# Largest precision representable by the target DECIMAL type (Arrow decimal128)
MAX_PRECISION = 38

# Largest scale that can be applied before narrowing a decimal to a double
MAX_DOUBLE_PRECISION = 15

# The Oracle JDBC driver reports this scale for NUMBER columns declared without one.
# The value is fixed by the driver and must not change.
UNDEFINED_SCALE = -127

# Bounds of the 64-bit INTEGER target
MIN_INTEGER_VALUE = -(2**63)
MAX_INTEGER_VALUE = 2**63 - 1

# Width in bytes of an encoded decimal128 unscaled value
DECIMAL_BYTE_WIDTH = 16

NULL_VALUE = "null"

# Configuration keys
UNSUPPORTED_TYPE_STRATEGY_KEY = "unsupported-type.handling-strategy"
NUMBER_EXCEEDS_LIMITS_KEY = "oracle.number.exceeds-limits"
NUMBER_DEFAULT_TYPE_KEY = "oracle.number.default-type"
NUMBER_ZERO_SCALE_TYPE_KEY = "oracle.number.zero-scale-type"
NUMBER_NULL_SCALE_TYPE_KEY = "oracle.number.null-scale-type"
NUMBER_ROUND_MODE_KEY = "oracle.number.round-mode"
DECIMAL_DEFAULT_SCALE_KEY = "oracle.number.default-scale.decimal"
RATIO_DEFAULT_SCALE_KEY = "oracle.number.default-scale.ratio"
DOUBLE_DEFAULT_SCALE_KEY = "oracle.number.default-scale.double"

# Order in which decoded properties are applied. The mutually exclusive
# fixed/ratio scale keys come last.
CONFIG_KEYS: Tuple[str, ...] = (
    UNSUPPORTED_TYPE_STRATEGY_KEY,
    NUMBER_EXCEEDS_LIMITS_KEY,
    NUMBER_DEFAULT_TYPE_KEY,
    NUMBER_ZERO_SCALE_TYPE_KEY,
    NUMBER_NULL_SCALE_TYPE_KEY,
    NUMBER_ROUND_MODE_KEY,
    DOUBLE_DEFAULT_SCALE_KEY,
    DECIMAL_DEFAULT_SCALE_KEY,
    RATIO_DEFAULT_SCALE_KEY,
)
