"""
User configurable policy for mapping NUMBER columns.

Every setter validates its input immediately and raises ConfigurationInvalidError.
Once `freeze()` has been called the configuration is read-only and may be shared
by any number of concurrent resolutions.
"""

import decimal
import logging
from decimal import Decimal
from enum import Enum
from typing import Dict, Mapping, Type, Union

from oracle_number.constants import (
    CONFIG_KEYS,
    DECIMAL_DEFAULT_SCALE_KEY,
    DOUBLE_DEFAULT_SCALE_KEY,
    MAX_DOUBLE_PRECISION,
    MAX_PRECISION,
    NUMBER_DEFAULT_TYPE_KEY,
    NUMBER_EXCEEDS_LIMITS_KEY,
    NUMBER_NULL_SCALE_TYPE_KEY,
    NUMBER_ROUND_MODE_KEY,
    NUMBER_ZERO_SCALE_TYPE_KEY,
    RATIO_DEFAULT_SCALE_KEY,
    UNDEFINED_SCALE,
    UNSUPPORTED_TYPE_STRATEGY_KEY,
)
from oracle_number.exc import ConfigurationInvalidError
from oracle_number.types import (
    ALLOWED_NUMBER_TYPES,
    RoundingMode,
    TargetKind,
    UnsupportedTypeHandling,
)

logger = logging.getLogger(__name__)

UNDEFINED_TYPE = TargetKind.UNDEFINED
UNDEFINED_RATIO = Decimal(UNDEFINED_SCALE)

TRatio = Union[Decimal, float, int, str]


def _parse_enum(enum_cls: Type[Enum], value, key: str):
    if isinstance(value, enum_cls):
        return value
    name = str(value).strip().upper()
    try:
        return enum_cls[name]
    except KeyError:
        allowed = [member.name for member in enum_cls]
        raise ConfigurationInvalidError(
            "'{}' is not valid for {}\nAllowed Values: {}".format(name, key, allowed),
            context={"key": key, "value": value},
        )


def _parse_number_type(value, key: str) -> TargetKind:
    allowed = [kind.name for kind in ALLOWED_NUMBER_TYPES]
    if isinstance(value, TargetKind):
        kind = value
    else:
        name = str(value).strip().upper()
        kind = TargetKind.__members__.get(name)
    if kind not in ALLOWED_NUMBER_TYPES:
        raise ConfigurationInvalidError(
            "'{}' is not valid for {}\nAllowed Values: {}".format(value, key, allowed),
            context={"key": key, "value": value},
        )
    return kind


def _parse_int(value, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationInvalidError(
            "{} must be an integer, got {!r}".format(key, value),
            context={"key": key, "value": value},
        )
    try:
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise ConfigurationInvalidError(
            "{} must be an integer, got {!r}".format(key, value),
            context={"key": key, "value": value},
        )


def _parse_ratio(value: TRatio, key: str) -> Decimal:
    try:
        # floats go through their shortest repr so 0.35 stays 0.35
        ratio = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except decimal.InvalidOperation:
        ratio = None
    if ratio is None or not ratio.is_finite():
        raise ConfigurationInvalidError(
            "{} must be a number, got {!r}".format(key, value),
            context={"key": key, "value": value},
        )
    return ratio


class NumberMappingConfig:
    """
    Settings that decide how NUMBER columns are mapped.

    Defaults:
        unsupported_type_strategy   IGNORE
        number_exceeds_limits       ROUND
        number_default_type         DECIMAL
        number_zero_scale_type      UNDEFINED (no override)
        number_null_scale_type      UNDEFINED (no override)
        number_round_mode           HALF_EVEN
        decimal_default_scale       UNDEFINED_SCALE
        ratio_default_scale         UNDEFINED_SCALE
        double_default_scale        UNDEFINED_SCALE
    """

    def __init__(self):
        self._frozen = False
        self._unsupported_type_strategy = UnsupportedTypeHandling.IGNORE
        self._number_exceeds_limits = UnsupportedTypeHandling.ROUND
        self._number_default_type = TargetKind.DECIMAL
        self._number_zero_scale_type = UNDEFINED_TYPE
        self._number_null_scale_type = UNDEFINED_TYPE
        self._number_round_mode = RoundingMode.HALF_EVEN
        self._decimal_default_scale = UNDEFINED_SCALE
        self._ratio_default_scale = UNDEFINED_RATIO
        self._double_default_scale = UNDEFINED_SCALE

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "NumberMappingConfig":
        """
        Build a frozen configuration from already-parsed string properties.

        Keys this package does not own are ignored.
        """
        config = cls()
        for key in properties:
            if key not in CONFIG_KEYS:
                logger.debug("Ignoring unrecognised configuration key %s", key)

        setters = {
            UNSUPPORTED_TYPE_STRATEGY_KEY: "unsupported_type_strategy",
            NUMBER_EXCEEDS_LIMITS_KEY: "number_exceeds_limits",
            NUMBER_DEFAULT_TYPE_KEY: "number_default_type",
            NUMBER_ZERO_SCALE_TYPE_KEY: "number_zero_scale_type",
            NUMBER_NULL_SCALE_TYPE_KEY: "number_null_scale_type",
            NUMBER_ROUND_MODE_KEY: "number_round_mode",
            DOUBLE_DEFAULT_SCALE_KEY: "double_default_scale",
            DECIMAL_DEFAULT_SCALE_KEY: "decimal_default_scale",
            RATIO_DEFAULT_SCALE_KEY: "ratio_default_scale",
        }
        for key in CONFIG_KEYS:
            if key in properties:
                setattr(config, setters[key], properties[key])

        return config.freeze()

    def to_properties(self) -> Dict[str, str]:
        def type_name(kind: TargetKind) -> str:
            return "" if kind == UNDEFINED_TYPE else kind.name

        ratio = self._ratio_default_scale
        return {
            UNSUPPORTED_TYPE_STRATEGY_KEY: self._unsupported_type_strategy.name,
            NUMBER_EXCEEDS_LIMITS_KEY: self._number_exceeds_limits.name,
            NUMBER_DEFAULT_TYPE_KEY: self._number_default_type.name,
            NUMBER_ZERO_SCALE_TYPE_KEY: type_name(self._number_zero_scale_type),
            NUMBER_NULL_SCALE_TYPE_KEY: type_name(self._number_null_scale_type),
            NUMBER_ROUND_MODE_KEY: self._number_round_mode.name,
            DOUBLE_DEFAULT_SCALE_KEY: str(self._double_default_scale),
            DECIMAL_DEFAULT_SCALE_KEY: str(self._decimal_default_scale),
            RATIO_DEFAULT_SCALE_KEY: str(ratio),
        }

    def freeze(self) -> "NumberMappingConfig":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self, key: str):
        if self._frozen:
            raise ConfigurationInvalidError(
                "{} cannot be changed once the configuration is in use".format(key),
                context={"key": key},
            )

    # ------------------------------------------------------------------------

    @property
    def unsupported_type_strategy(self) -> UnsupportedTypeHandling:
        return self._unsupported_type_strategy

    @unsupported_type_strategy.setter
    def unsupported_type_strategy(self, value):
        """
        How column types without a mapping are handled: VARCHAR, IGNORE or FAIL.
        Also applies when a NUMBER column could not be mapped.
        """
        self._check_mutable(UNSUPPORTED_TYPE_STRATEGY_KEY)
        strategy = _parse_enum(
            UnsupportedTypeHandling, value, UNSUPPORTED_TYPE_STRATEGY_KEY
        )
        if strategy == UnsupportedTypeHandling.ROUND:
            raise ConfigurationInvalidError(
                "ROUND is not a valid option for {}".format(
                    UNSUPPORTED_TYPE_STRATEGY_KEY
                ),
                context={"key": UNSUPPORTED_TYPE_STRATEGY_KEY, "value": value},
            )
        self._unsupported_type_strategy = strategy

    @property
    def number_exceeds_limits(self) -> UnsupportedTypeHandling:
        return self._number_exceeds_limits

    @number_exceeds_limits.setter
    def number_exceeds_limits(self, value):
        """
        How NUMBER columns exceeding the DECIMAL limits are handled when mapped to DECIMAL:
        ROUND, VARCHAR, IGNORE or FAIL.
        """
        self._check_mutable(NUMBER_EXCEEDS_LIMITS_KEY)
        self._number_exceeds_limits = _parse_enum(
            UnsupportedTypeHandling, value, NUMBER_EXCEEDS_LIMITS_KEY
        )

    @property
    def number_default_type(self) -> TargetKind:
        return self._number_default_type

    @number_default_type.setter
    def number_default_type(self, value):
        self._check_mutable(NUMBER_DEFAULT_TYPE_KEY)
        self._number_default_type = _parse_number_type(value, NUMBER_DEFAULT_TYPE_KEY)

    @property
    def number_zero_scale_type(self) -> TargetKind:
        return self._number_zero_scale_type

    @number_zero_scale_type.setter
    def number_zero_scale_type(self, value):
        """NUMBER columns with a scale of exactly zero are mapped to this type. Empty clears it."""
        self._check_mutable(NUMBER_ZERO_SCALE_TYPE_KEY)
        if value is None or value == "" or value == UNDEFINED_TYPE:
            self._number_zero_scale_type = UNDEFINED_TYPE
        else:
            self._number_zero_scale_type = _parse_number_type(
                value, NUMBER_ZERO_SCALE_TYPE_KEY
            )

    @property
    def number_null_scale_type(self) -> TargetKind:
        return self._number_null_scale_type

    @number_null_scale_type.setter
    def number_null_scale_type(self, value):
        """NUMBER columns with an undefined scale are mapped to this type. Empty clears it."""
        self._check_mutable(NUMBER_NULL_SCALE_TYPE_KEY)
        if value is None or value == "" or value == UNDEFINED_TYPE:
            self._number_null_scale_type = UNDEFINED_TYPE
        else:
            self._number_null_scale_type = _parse_number_type(
                value, NUMBER_NULL_SCALE_TYPE_KEY
            )

    @property
    def number_round_mode(self) -> RoundingMode:
        # Checked on read because the two settings can be given in either order
        if (
            self._number_exceeds_limits == UnsupportedTypeHandling.ROUND
            and self._number_round_mode == RoundingMode.UNNECESSARY
        ):
            raise ConfigurationInvalidError(
                "'{}' must be set if '{}' is set to ROUND".format(
                    NUMBER_ROUND_MODE_KEY, NUMBER_EXCEEDS_LIMITS_KEY
                ),
                context={"key": NUMBER_ROUND_MODE_KEY},
            )
        return self._number_round_mode

    @number_round_mode.setter
    def number_round_mode(self, value):
        self._check_mutable(NUMBER_ROUND_MODE_KEY)
        self._number_round_mode = _parse_enum(RoundingMode, value, NUMBER_ROUND_MODE_KEY)

    @property
    def decimal_default_scale(self) -> int:
        return self._decimal_default_scale

    @decimal_default_scale.setter
    def decimal_default_scale(self, value):
        """
        Fixed scale applied to DECIMAL mappings of NUMBER columns whose scale is undefined.
        Cannot be combined with ratio_default_scale.
        """
        self._check_mutable(DECIMAL_DEFAULT_SCALE_KEY)
        scale = _parse_int(value, DECIMAL_DEFAULT_SCALE_KEY)
        if scale == UNDEFINED_SCALE:
            self._decimal_default_scale = UNDEFINED_SCALE
            return
        if self._ratio_default_scale != UNDEFINED_RATIO:
            raise ConfigurationInvalidError(
                "{} is set, and conflicts with {}".format(
                    RATIO_DEFAULT_SCALE_KEY, DECIMAL_DEFAULT_SCALE_KEY
                ),
                context={"key": DECIMAL_DEFAULT_SCALE_KEY, "value": value},
            )
        if scale < 0 or scale > MAX_PRECISION:
            raise ConfigurationInvalidError(
                "{} ({}) must be between 0 and the maximum precision {}".format(
                    DECIMAL_DEFAULT_SCALE_KEY, scale, MAX_PRECISION
                ),
                context={"key": DECIMAL_DEFAULT_SCALE_KEY, "value": value},
            )
        self._decimal_default_scale = scale

    @property
    def ratio_default_scale(self) -> Decimal:
        return self._ratio_default_scale

    @ratio_default_scale.setter
    def ratio_default_scale(self, value: TRatio):
        """
        Scale applied to DECIMAL mappings of NUMBER columns whose scale is undefined,
        as a fraction of the precision:

            0.5 => (40, null) => (38, 19)   precision is capped at 38, half of 38 is 19
            0.5 => (16, null) => (16, 8)
            0.5 => (16, 0)    => scale is set, ignored
            0.2 => (38, null) => (38, 7)
            0.3 => (14, null) => (14, 4)

        Cannot be combined with decimal_default_scale.
        """
        self._check_mutable(RATIO_DEFAULT_SCALE_KEY)
        ratio = _parse_ratio(value, RATIO_DEFAULT_SCALE_KEY)
        if ratio == UNDEFINED_RATIO:
            self._ratio_default_scale = UNDEFINED_RATIO
            return
        if self._decimal_default_scale != UNDEFINED_SCALE:
            raise ConfigurationInvalidError(
                "{} is set, and conflicts with {}".format(
                    DECIMAL_DEFAULT_SCALE_KEY, RATIO_DEFAULT_SCALE_KEY
                ),
                context={"key": RATIO_DEFAULT_SCALE_KEY, "value": value},
            )
        if ratio < 0 or ratio > 1:
            raise ConfigurationInvalidError(
                "{} ({}) must be between 0 and 1.0".format(RATIO_DEFAULT_SCALE_KEY, ratio),
                context={"key": RATIO_DEFAULT_SCALE_KEY, "value": value},
            )
        self._ratio_default_scale = ratio

    @property
    def double_default_scale(self) -> int:
        return self._double_default_scale

    @double_default_scale.setter
    def double_default_scale(self, value):
        """Scale that values are rounded to before being narrowed to DOUBLE."""
        self._check_mutable(DOUBLE_DEFAULT_SCALE_KEY)
        scale = _parse_int(value, DOUBLE_DEFAULT_SCALE_KEY)
        if scale == UNDEFINED_SCALE:
            self._double_default_scale = UNDEFINED_SCALE
            return
        if scale < 0 or scale > MAX_DOUBLE_PRECISION:
            raise ConfigurationInvalidError(
                "{} ({}) must be between 0 and the double type maximum {}".format(
                    DOUBLE_DEFAULT_SCALE_KEY, scale, MAX_DOUBLE_PRECISION
                ),
                context={"key": DOUBLE_DEFAULT_SCALE_KEY, "value": value},
            )
        self._double_default_scale = scale

    # ------------------------------------------------------------------------

    @property
    def has_decimal_default_scale(self) -> bool:
        return self._decimal_default_scale != UNDEFINED_SCALE

    @property
    def has_ratio_default_scale(self) -> bool:
        return self._ratio_default_scale != UNDEFINED_RATIO

    def __eq__(self, other):
        return (
            isinstance(other, NumberMappingConfig)
            and self.to_properties() == other.to_properties()
        )

    def __repr__(self):
        return "NumberMappingConfig({})".format(self.to_properties())
