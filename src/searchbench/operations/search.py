"""Search request operations.

All three variants send the same ``query_string`` search; they differ in
how much of the response is processed inside the timed call.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import httpx

from .gateway import SearchServiceGateway
from .models import SearchResponse

FILTER_PATH = "hits.hits._source"


def build_search_body(query: str = "*", size: int = 10) -> Dict[str, Any]:
    return {
        "query": {
            "query_string": {
                "query": query
            }
        },
        "size": size,
    }


class SearchOperation(SearchServiceGateway):
    """Search and decode the hits into ``SearchResponse``."""

    name = "search"

    def __init__(self, config, transport=None):
        super().__init__(config, transport)
        self.path = f"/{config.index}/{config.doc_type}/_search"
        self.body = json.dumps(build_search_body(config.query, config.size)).encode()

    def _perform(self, client: httpx.Client) -> SearchResponse:
        response = self._post(client, self.path, self.body)
        return SearchResponse.model_validate_json(response.content)


class RawSearchOperation(SearchOperation):
    """Search and read the body bytes without decoding them."""

    name = "raw"

    def _perform(self, client: httpx.Client) -> bytes:
        return self._post(client, self.path, self.body).read()


class FilteredSearchOperation(SearchOperation):
    """Search with ``filter_path`` so the service only returns document sources."""

    name = "filtered"

    def _perform(self, client: httpx.Client) -> SearchResponse:
        response = self._post(client, self.path, self.body, params={"filter_path": FILTER_PATH})
        return SearchResponse.model_validate_json(response.content)
