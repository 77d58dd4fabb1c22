"""
Caller level type mapping.

NUMBER kinds are resolved by the number handling engine. Other kinds are handed to
an optional `base_mapper` supplied by the connector. Whatever is still unmapped is
handled by the unsupported-type strategy.
"""

import logging
from typing import Callable, Optional

from oracle_number import column_mappings
from oracle_number.column_mappings import ColumnMapping
from oracle_number.config import NumberMappingConfig
from oracle_number.constants import UNSUPPORTED_TYPE_STRATEGY_KEY
from oracle_number.exc import UnsupportedConversionError
from oracle_number.number_handling import resolve_number
from oracle_number.type_handle import OracleTypeHandle, RawTypeInfo
from oracle_number.types import UnsupportedTypeHandling

logger = logging.getLogger(__name__)

TBaseMapper = Callable[[RawTypeInfo], Optional[ColumnMapping]]


def to_column_mapping(
    type_info: RawTypeInfo,
    config: NumberMappingConfig,
    base_mapper: Optional[TBaseMapper] = None,
) -> Optional[ColumnMapping]:
    """
    Map a column type, applying the unsupported-type strategy as a fallback.

    Args:
        type_info: The raw column type from the driver
        config: The mapping policy
        base_mapper: Optional mapper for non-NUMBER kinds, returns None when it has no mapping

    Returns:
        The ColumnMapping, or None when the column should be skipped

    Raises:
        UnsupportedConversionError: if no mapping exists and the strategy is FAIL
    """
    handle = OracleTypeHandle.from_type_info(type_info)
    error = ""
    mapping = None

    if type_info.source_kind.is_number:
        resolution = resolve_number(handle, config)
        if resolution.is_skip:
            return None
        if resolution.is_mapped:
            return resolution.mapping
        error = resolution.reason
    elif base_mapper is not None:
        mapping = base_mapper(type_info)

    if mapping is not None:
        return mapping

    message = "unsupported type {} - {}".format(handle.description, error)
    strategy = config.unsupported_type_strategy
    if strategy == UnsupportedTypeHandling.VARCHAR:
        logger.debug("%s, mapping to VARCHAR", message)
        if type_info.source_kind.is_number:
            return column_mappings.decimal_varchar_column_mapping()
        return column_mappings.varchar_column_mapping()
    elif strategy == UnsupportedTypeHandling.IGNORE:
        logger.warning("%s, ignoring column", message)
        return None

    raise UnsupportedConversionError(
        "{} - '{}' = FAIL".format(message, UNSUPPORTED_TYPE_STRATEGY_KEY),
        context={"type": handle.description},
    )
