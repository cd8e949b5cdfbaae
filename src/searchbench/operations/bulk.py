"""Bulk indexing operation with a large request body."""

from __future__ import annotations

import json

import httpx

from .gateway import SearchServiceGateway
from .models import BulkResponse

BULK_DOCUMENTS = 999


def build_bulk_body(index: str, doc_type: str, documents: int = BULK_DOCUMENTS) -> bytes:
    """NDJSON body of ``documents`` index actions, ids starting at 1."""
    lines = []
    for i in range(1, documents + 1):
        lines.append(json.dumps({"index": {"_index": index, "_type": doc_type, "_id": str(i)}}))
        lines.append(json.dumps({"title": f"string value {i}"}))
    return ("\n".join(lines) + "\n").encode()


class BulkError(Exception):
    """The service accepted the bulk request but reported item errors."""


class BulkOperation(SearchServiceGateway):
    """Send the same bulk request on every call."""

    name = "bulk"

    def __init__(self, config, transport=None, documents: int = BULK_DOCUMENTS):
        super().__init__(config, transport)
        self.body = build_bulk_body(config.index, config.doc_type, documents)

    def _perform(self, client: httpx.Client) -> BulkResponse:
        response = self._post(
            client, "/_bulk", self.body,
            headers={"Content-Type": "application/x-ndjson"},
        )
        result = BulkResponse.model_validate_json(response.content)
        if result.errors:
            raise BulkError(f"bulk request reported errors in {len(result.items)} items")
        return result
