"""Operations under test, each performing one request per call."""

from typing import Dict, Optional, Type

import httpx

from ..core.config import BenchConfig, OperationKind
from .bulk import BulkError, BulkOperation, build_bulk_body
from .gateway import SearchServiceGateway, build_headers
from .models import BenchDoc, BulkResponse, SearchResponse
from .search import FilteredSearchOperation, RawSearchOperation, SearchOperation, build_search_body

OPERATIONS: Dict[OperationKind, Type[SearchServiceGateway]] = {
    OperationKind.SEARCH: SearchOperation,
    OperationKind.RAW: RawSearchOperation,
    OperationKind.FILTERED: FilteredSearchOperation,
    OperationKind.BULK: BulkOperation,
}


def build_operation(config: BenchConfig,
                    transport: Optional[httpx.BaseTransport] = None) -> SearchServiceGateway:
    """Create the gateway for ``config.operation``; use it as a context manager."""
    return OPERATIONS[config.operation](config, transport=transport)


__all__ = [
    "OPERATIONS",
    "build_operation",
    "SearchServiceGateway",
    "build_headers",
    "SearchOperation",
    "RawSearchOperation",
    "FilteredSearchOperation",
    "build_search_body",
    "BulkOperation",
    "BulkError",
    "build_bulk_body",
    "BenchDoc",
    "BulkResponse",
    "SearchResponse",
]
