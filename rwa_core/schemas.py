"""Declarative column-to-field schemas for every known feed.

Adding a feed type means adding a Schema here, not a new parsing code path.
Column indexes are positions in the raw CSV row and need not be sequential.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Tuple, Union

ColumnKind = Literal["integer", "float", "string"]

DATE_FIELD = "date"


@dataclass(frozen=True)
class ColumnRule:
    source_column_index: int
    field_name: str
    kind: ColumnKind = "integer"
    default: Union[int, float] = 0

    def __post_init__(self) -> None:
        if self.source_column_index < 0:
            raise ValueError(f"Column index must be >= 0 (field {self.field_name!r})")
        if not self.field_name:
            raise ValueError("Column rule needs a field name")


@dataclass(frozen=True)
class Schema:
    schema_id: str
    rules: Tuple[ColumnRule, ...]

    def __post_init__(self) -> None:
        if not self.rules:
            raise ValueError(f"Schema {self.schema_id!r} declares no columns")
        names = [r.field_name for r in self.rules]
        if len(set(names)) != len(names):
            raise ValueError(f"Schema {self.schema_id!r} has duplicate field names")

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(r.field_name for r in self.rules)

    @property
    def required_columns(self) -> int:
        return max(r.source_column_index for r in self.rules) + 1

    @property
    def time_indexed(self) -> bool:
        return DATE_FIELD in self.fields


def _date(index: int = 0) -> ColumnRule:
    return ColumnRule(index, DATE_FIELD, "string")


def _ints(*pairs: Tuple[int, str]) -> Tuple[ColumnRule, ...]:
    return tuple(ColumnRule(idx, name, "integer") for idx, name in pairs)


def _floats(*pairs: Tuple[int, str]) -> Tuple[ColumnRule, ...]:
    return tuple(ColumnRule(idx, name, "float", 0.0) for idx, name in pairs)


_SCHEMA_LIST: Tuple[Schema, ...] = (
    Schema("overview_count", (_date(),) + _ints((1, "value"), (2, "cumulative"))),
    Schema("overview_volume", (_date(),) + _floats((1, "value"), (2, "cumulative"))),
    Schema("dated_total", (_date(),) + _ints((1, "total"))),
    Schema(
        "commodity_breakdown",
        (_date(),) + _ints((2, "gold$"), (3, "silver$"), (4, "gold"), (1, "total")),
    ),
    Schema("commodity_holders", _ints((0, "total"))),
    Schema(
        "micropayment_count",
        (_date(),) + _ints((1, "algo"), (2, "stable"), (3, "hafn"), (4, "total")),
    ),
    # hafn sits in column 6 and the total in column 3 of the volume export.
    Schema(
        "micropayment_volume",
        (_date(),) + _floats((1, "algo"), (2, "stable"), (6, "hafn"), (3, "total")),
    ),
    Schema("real_estate_volume", (_date(),) + _ints((7, "total"))),
    Schema("real_estate_properties", (_date(),) + _ints((2, "total"))),
)

SCHEMAS: Dict[str, Schema] = {s.schema_id: s for s in _SCHEMA_LIST}


def get_schema(schema_id: str) -> Schema:
    try:
        return SCHEMAS[schema_id]
    except KeyError:
        raise KeyError(f"Unknown schema id: {schema_id!r}") from None
