"""
Resolution of NUMBER columns to a target representation.

`resolve_number` decides, from a normalized type handle and the configured policy,
whether a column becomes DECIMAL(p, s), DOUBLE, INTEGER or VARCHAR, and which read
function converts its values. The outcome is returned as a `NumberResolution`:

    MAPPED  a column mapping was produced
    SKIP    the column should be left out (exceeds-limits strategy IGNORE)
    FAILED  the column cannot be mapped; `error` says why
"""

import decimal
import logging
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Optional

import pyarrow

from oracle_number import column_mappings
from oracle_number.column_mappings import ColumnMapping
from oracle_number.config import UNDEFINED_TYPE, NumberMappingConfig
from oracle_number.constants import (
    DECIMAL_DEFAULT_SCALE_KEY,
    MAX_PRECISION,
    NUMBER_EXCEEDS_LIMITS_KEY,
    RATIO_DEFAULT_SCALE_KEY,
    UNDEFINED_SCALE,
)
from oracle_number.exc import (
    ConfigurationInvalidError,
    Error,
    SkipFieldError,
    UnsupportedConversionError,
)
from oracle_number.type_handle import OracleTypeHandle
from oracle_number.types import RoundingMode, TargetKind, UnsupportedTypeHandling

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    MAPPED = "MAPPED"
    SKIP = "SKIP"
    FAILED = "FAILED"


@dataclass(frozen=True)
class NumberResolution:
    """
    Outcome of resolving one NUMBER column.

    Attributes:
        status: MAPPED, SKIP or FAILED
        target_kind: The representation that was chosen (None when FAILED before a choice)
        mapping: The column mapping when MAPPED
        reason: Human readable explanation for SKIP and FAILED
        error: The classified error when FAILED
    """

    status: ResolutionStatus
    target_kind: Optional[TargetKind] = None
    mapping: Optional[ColumnMapping] = None
    reason: Optional[str] = None
    error: Optional[Error] = None

    @classmethod
    def mapped(cls, target_kind: TargetKind, mapping: ColumnMapping):
        return cls(ResolutionStatus.MAPPED, target_kind=target_kind, mapping=mapping)

    @classmethod
    def skip(cls, target_kind: TargetKind, reason: str):
        return cls(ResolutionStatus.SKIP, target_kind=target_kind, reason=reason)

    @classmethod
    def failed(cls, error: Error, target_kind: Optional[TargetKind] = None):
        return cls(
            ResolutionStatus.FAILED,
            target_kind=target_kind,
            reason=error.message,
            error=error,
        )

    @property
    def is_mapped(self) -> bool:
        return self.status == ResolutionStatus.MAPPED

    @property
    def is_skip(self) -> bool:
        return self.status == ResolutionStatus.SKIP

    @property
    def is_failed(self) -> bool:
        return self.status == ResolutionStatus.FAILED

    def unwrap(self) -> ColumnMapping:
        """Return the mapping, or raise SkipFieldError / the carried error."""
        if self.is_mapped:
            return self.mapping
        if self.is_skip:
            raise SkipFieldError(self.reason)
        raise self.error


def ratio_scale(ratio: Decimal, precision: int) -> int:
    """
    Scale as a fraction of the precision, truncated: floor(ratio * min(precision, 38)).

    Computed in exact decimal arithmetic on the configured ratio, not on its binary
    floating point approximation.
    """
    with decimal.localcontext() as context:
        context.prec = len(ratio.as_tuple().digits) + 3
        product = ratio * min(precision, MAX_PRECISION)
        return int(product.to_integral_value(rounding=ROUND_FLOOR))


def _pick_target_kind(handle: OracleTypeHandle, config: NumberMappingConfig) -> TargetKind:
    target = config.number_default_type

    if handle.scale_undefined and config.number_null_scale_type != UNDEFINED_TYPE:
        target = config.number_null_scale_type
    elif (
        not handle.scale_undefined
        and handle.scale == 0
        and config.number_zero_scale_type != UNDEFINED_TYPE
    ):
        target = config.number_zero_scale_type

    return target


def _resolve_decimal(
    handle: OracleTypeHandle, config: NumberMappingConfig
) -> NumberResolution:
    read_handle = handle
    # If the scale exceeds precision, or precision is undefined, or the precision
    # exceeds the max, use the maximum precision
    if (
        handle.scale >= handle.precision
        or handle.precision_undefined
        or handle.type_limit_exceeded
    ):
        read_handle = read_handle.with_overrides(precision=MAX_PRECISION)

    if handle.scale_undefined or handle.scale_limit_exceeded:
        if config.has_decimal_default_scale:
            scale = config.decimal_default_scale
        elif config.has_ratio_default_scale:
            scale = ratio_scale(config.ratio_default_scale, read_handle.precision)
        else:
            return NumberResolution.failed(
                UnsupportedConversionError(
                    "type has no scale: {}, and no default scale is set via '{}' or '{}'".format(
                        handle.description,
                        DECIMAL_DEFAULT_SCALE_KEY,
                        RATIO_DEFAULT_SCALE_KEY,
                    ),
                    context={"type": handle.description},
                ),
                target_kind=TargetKind.DECIMAL,
            )
        read_handle = read_handle.with_overrides(scale=scale)
        # a default scale can itself exceed the precision
        if read_handle.precision <= read_handle.scale:
            read_handle = read_handle.with_overrides(precision=MAX_PRECISION)

    decimal_type = pyarrow.decimal128(read_handle.precision, read_handle.scale)

    if handle.type_limit_exceeded or handle.precision_undefined or handle.scale_undefined:
        # values may carry more digits than the target type, so round them on read
        try:
            round_mode = config.number_round_mode
        except ConfigurationInvalidError as e:
            return NumberResolution.failed(e, target_kind=TargetKind.DECIMAL)
        mapping = column_mappings.round_decimal_column_mapping(decimal_type, round_mode)
    else:
        mapping = column_mappings.decimal_column_mapping(decimal_type)

    logger.debug(
        "Mapped %s (%s) to %s with %s",
        handle.description,
        handle.precision_description,
        decimal_type,
        type(mapping.read_function).__name__,
    )
    return NumberResolution.mapped(TargetKind.DECIMAL, mapping)


def _resolve_double(config: NumberMappingConfig) -> NumberResolution:
    try:
        round_mode = config.number_round_mode
    except ConfigurationInvalidError as e:
        return NumberResolution.failed(e, target_kind=TargetKind.DOUBLE)

    scale = config.double_default_scale
    if round_mode == RoundingMode.UNNECESSARY or scale == UNDEFINED_SCALE:
        mapping = column_mappings.double_column_mapping()
    else:
        mapping = column_mappings.round_double_column_mapping(scale, round_mode)
    return NumberResolution.mapped(TargetKind.DOUBLE, mapping)


def resolve_number(
    handle: OracleTypeHandle, config: NumberMappingConfig
) -> NumberResolution:
    """
    Decide the target representation and read function for a NUMBER column.

    Args:
        handle: The normalized column type
        config: The mapping policy

    Returns:
        NumberResolution, MAPPED with a ColumnMapping, SKIP when the exceeds-limits
        strategy is IGNORE, or FAILED with a classified error
    """
    if handle is None:
        raise ValueError("handle cannot be None")
    if config is None:
        raise ValueError("config cannot be None")

    target = _pick_target_kind(handle, config)

    # A DECIMAL target that cannot hold the source type is handled by
    # oracle.number.exceeds-limits
    if target == TargetKind.DECIMAL and handle.type_limit_exceeded:
        strategy = config.number_exceeds_limits
        if strategy == UnsupportedTypeHandling.VARCHAR:
            logger.debug("%s exceeds DECIMAL limits, mapping to VARCHAR", handle.description)
            target = TargetKind.VARCHAR
        elif strategy == UnsupportedTypeHandling.IGNORE:
            reason = "IGNORING type exceeds limits: {}, you can configure '{}' to change behavior".format(
                handle.description, NUMBER_EXCEEDS_LIMITS_KEY
            )
            logger.warning(reason)
            return NumberResolution.skip(target, reason)
        elif strategy == UnsupportedTypeHandling.FAIL:
            error = UnsupportedConversionError(
                "type exceeds limits: {}, you can configure '{}' to change behavior".format(
                    handle.description, NUMBER_EXCEEDS_LIMITS_KEY
                ),
                context={"type": handle.description},
            )
            logger.error(error.message)
            return NumberResolution.failed(error, target_kind=target)
        # ROUND: values are rounded on read by the decimal mapping

    if target == TargetKind.DECIMAL:
        return _resolve_decimal(handle, config)
    elif target == TargetKind.DOUBLE:
        return _resolve_double(config)
    elif target == TargetKind.INTEGER:
        return NumberResolution.mapped(
            target, column_mappings.integer_column_mapping()
        )
    elif target == TargetKind.VARCHAR:
        return NumberResolution.mapped(
            target, column_mappings.decimal_varchar_column_mapping()
        )

    return NumberResolution.failed(
        UnsupportedConversionError(
            "unsupported type {}, for number handling".format(handle.description),
            context={"type": handle.description},
        )
    )
