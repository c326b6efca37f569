from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Union

from rwa_core.models import Record, TimeSeries, Value, freeze_record
from rwa_core.schemas import ColumnRule, Schema

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ","

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int_prefix(cell: str) -> Optional[int]:
    """Leading signed digit run of `cell` ("12.7" -> 12, "42abc" -> 42), else None."""
    match = _INT_PREFIX.match(cell)
    if not match:
        return None
    return int(match.group(1))


def parse_float_prefix(cell: str) -> Optional[float]:
    match = _FLOAT_PREFIX.match(cell)
    if not match:
        return None
    value = float(match.group(1))
    # "1e400" overflows to inf; treat it like any other unparseable cell.
    return value if math.isfinite(value) else None


def coerce_cell(cell: str, rule: ColumnRule) -> Value:
    if rule.kind == "string":
        return cell
    if rule.kind == "integer":
        value: Optional[Union[int, float]] = parse_int_prefix(cell)
    else:
        value = parse_float_prefix(cell)
    return rule.default if value is None else value


def decode_row(columns: List[str], schema: Schema) -> Record:
    values: Dict[str, Value] = {}
    for rule in schema.rules:
        values[rule.field_name] = coerce_cell(columns[rule.source_column_index], rule)
    return freeze_record(values)


def parse(raw_text: str, schema: Schema) -> TimeSeries:
    """Decode CSV text into a TimeSeries using `schema`.

    The first line is a header and is always skipped. Rows with too few
    columns (including blank lines) are dropped rather than failing the parse.
    Numeric cells that do not start with a number take the rule default.
    """
    lines = (raw_text or "").split("\n")[1:]
    required = schema.required_columns

    records: List[Record] = []
    dropped = 0
    for line in lines:
        line = line.rstrip("\r")
        if not line.strip():
            dropped += 1
            continue
        columns = line.split(FIELD_DELIMITER)
        if len(columns) < required:
            dropped += 1
            continue
        records.append(decode_row(columns, schema))

    if dropped:
        logger.debug("Schema %s: dropped %d malformed row(s)", schema.schema_id, dropped)
    return TimeSeries(schema_id=schema.schema_id, fields=schema.fields, records=tuple(records))
