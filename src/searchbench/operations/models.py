"""Response models for the search service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BenchDoc(BaseModel):
    """Document stored in the benchmark index."""
    id: int
    title: str
    timestamp: int = Field(..., description="Epoch milliseconds")

    @property
    def timestamp_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


class Hit(BaseModel):
    index: Optional[str] = Field(None, alias="_index")
    id: Optional[str] = Field(None, alias="_id")
    score: Optional[float] = Field(None, alias="_score")
    source: BenchDoc = Field(..., alias="_source")


class SearchHits(BaseModel):
    total: Optional[Any] = None
    hits: List[Hit] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Search response; ``filter_path`` responses only carry ``hits.hits._source``."""
    took: Optional[int] = None
    timed_out: bool = False
    hits: SearchHits = Field(default_factory=SearchHits)

    @property
    def documents(self) -> List[BenchDoc]:
        return [hit.source for hit in self.hits.hits]


class BulkResponse(BaseModel):
    took: int = 0
    errors: bool = False
    items: List[Dict[str, Any]] = Field(default_factory=list)
