from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import pandas as pd

from rwa_core.schemas import SCHEMAS


class DashboardDomain(str, Enum):
    OVERVIEW = "overview"
    COMMODITIES = "commodities"
    MICROPAYMENTS = "micropayments"
    PRIVATE_CREDIT = "private_credit"
    REAL_ESTATE = "real_estate"


Value = Union[int, float, str]
Record = Mapping[str, Value]


def freeze_record(values: Dict[str, Value]) -> Record:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class FeedDescriptor:
    id: str
    url: Optional[str]
    schema: str

    @property
    def configured(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class TimeSeries:
    """Decoded rows of one feed, in source order (last record = latest period)."""

    schema_id: str
    fields: Tuple[str, ...] = ()
    records: Tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def empty(self) -> bool:
        return not self.records

    @property
    def last(self) -> Optional[Record]:
        return self.records[-1] if self.records else None

    def field_values(self, name: str) -> List[Value]:
        return [r[name] for r in self.records]

    def to_records(self) -> List[Dict[str, Value]]:
        return [dict(r) for r in self.records]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=list(self.fields))


def empty_series(schema_id: str, fields: Tuple[str, ...] = ()) -> TimeSeries:
    return TimeSeries(schema_id=schema_id, fields=fields, records=())


@dataclass(frozen=True)
class Success:
    series: TimeSeries
    ok: bool = field(default=True, init=False)

    def series_or_empty(self) -> TimeSeries:
        return self.series


@dataclass(frozen=True)
class Failure:
    reason: str
    schema_id: str = ""
    ok: bool = field(default=False, init=False)

    def series_or_empty(self) -> TimeSeries:
        schema = SCHEMAS.get(self.schema_id)
        return empty_series(self.schema_id, schema.fields if schema else ())


FeedResult = Union[Success, Failure]


def result_payload(result: FeedResult) -> Dict[str, Any]:
    if isinstance(result, Success):
        return {"status": "ok", "rows": len(result.series)}
    return {"status": "failed", "reason": result.reason}
