"""
Arrow row-reading layer: maps a set of columns once, then converts fetched rows into
typed Arrow tables using each column's read function.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import pandas
import pyarrow

from oracle_number.column_mappings import ColumnMapping
from oracle_number.config import NumberMappingConfig
from oracle_number.exc import NotSupportedError
from oracle_number.type_handle import RawTypeInfo
from oracle_number.type_mapping import TBaseMapper, to_column_mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappedColumn:
    """
    A source column that survived mapping.

    Attributes:
        name: Column name
        index: Position of the column in the fetched rows
        type_info: The raw driver type
        mapping: Target type and read function
    """

    name: str
    index: int
    type_info: RawTypeInfo
    mapping: ColumnMapping


def map_columns(
    columns: Sequence[Tuple[str, RawTypeInfo]],
    config: NumberMappingConfig,
    base_mapper: Optional[TBaseMapper] = None,
) -> List[MappedColumn]:
    """
    Map every column, dropping the ones that are skipped.

    Raises:
        NotSupportedError: if no column has a mapping
        UnsupportedConversionError: if a column has no mapping and the strategy is FAIL
    """
    mapped = []
    for index, (name, type_info) in enumerate(columns):
        mapping = to_column_mapping(type_info, config, base_mapper)
        # skip unsupported column types
        if mapping is None:
            logger.debug("Skipping column %s", name)
            continue
        mapped.append(MappedColumn(name, index, type_info, mapping))

    if not mapped:
        raise NotSupportedError(
            "No supported columns (all {} columns are not supported)".format(
                len(columns)
            ),
            context={"columns": [name for name, _ in columns]},
        )
    return mapped


def arrow_schema(mapped_columns: Sequence[MappedColumn]) -> pyarrow.Schema:
    return pyarrow.schema(
        [pyarrow.field(c.name, c.mapping.arrow_type) for c in mapped_columns]
    )


def _convert_column_to_arrow_array(
    rows: Sequence[Sequence[Any]], column: MappedColumn
) -> pyarrow.Array:
    values = [column.mapping.to_python(row[column.index]) for row in rows]
    return pyarrow.array(values, type=column.mapping.arrow_type)


def convert_rows_to_arrow_table(
    rows: Sequence[Sequence[Any]], mapped_columns: Sequence[MappedColumn]
) -> pyarrow.Table:
    """
    Apply each column's read function to the fetched rows.

    Rows hold one value per source column, including columns that were skipped;
    `MappedColumn.index` selects the value.
    """
    return pyarrow.Table.from_arrays(
        [_convert_column_to_arrow_array(rows, c) for c in mapped_columns],
        schema=arrow_schema(mapped_columns),
    )


def convert_rows_to_dataframe(
    rows: Sequence[Sequence[Any]], mapped_columns: Sequence[MappedColumn]
) -> pandas.DataFrame:
    """Like `convert_rows_to_arrow_table`, with decimals kept as `Decimal` objects."""
    return convert_rows_to_arrow_table(rows, mapped_columns).to_pandas()
