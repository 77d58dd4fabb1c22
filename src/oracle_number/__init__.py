from oracle_number.exc import *
from oracle_number.constants import MAX_PRECISION, UNDEFINED_SCALE
from oracle_number.types import (
    RoundingMode,
    SourceKind,
    TargetKind,
    UnsupportedTypeHandling,
)
from oracle_number.config import NumberMappingConfig
from oracle_number.type_handle import OracleTypeHandle, RawTypeInfo, normalize
from oracle_number.column_mappings import ColumnMapping
from oracle_number.number_handling import (
    NumberResolution,
    ResolutionStatus,
    resolve_number,
)
from oracle_number.type_mapping import to_column_mapping
from oracle_number.arrow import (
    MappedColumn,
    arrow_schema,
    convert_rows_to_arrow_table,
    convert_rows_to_dataframe,
    map_columns,
)

__version__ = "0.1.0"
