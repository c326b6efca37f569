from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PageRequestModel(BaseModel):
    active_metric: Optional[str] = None
    feed_urls: Dict[str, Optional[str]] = Field(default_factory=dict)


class ChartOptionModel(BaseModel):
    id: str
    label: str


class DomainModel(BaseModel):
    id: str
    title: str
    chart_options: List[ChartOptionModel]
    configured_feeds: Dict[str, bool]


class MetaDomainsResponse(BaseModel):
    domains: List[DomainModel]
