# ===================================================================================
# ==                 Search Benchmark: Search Service Gateway                      ==
# ===================================================================================
#
# Base class for the operations under test. A gateway owns the HTTP client used
# to reach the search service and exposes a single zero-argument call that
# performs one request and raises on any failure.
#
# Client policy:
# - REUSE: one client built by connect() and shared by every trial
# - FRESH: a new client is built and closed inside every call, so connection
#          setup is part of each measured trial
#
# ===================================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..core.config import BenchConfig, ClientPolicy
from ..core.logging import get_logger


def build_headers(keep_alive: bool = True, gzip: bool = False) -> Dict[str, str]:
    """Request headers for the configured transport options."""
    return {
        "Content-Type": "application/json",
        "User-Agent": "searchbench/1.0",
        "Connection": "keep-alive" if keep_alive else "close",
        "Accept-Encoding": "gzip" if gzip else "identity",
    }


class SearchServiceGateway:
    """
    HTTP access to the search service for one benchmarked operation.

    Subclasses implement ``_perform(client)``; calling the gateway runs it
    once with the client chosen by the client policy.
    """

    name = "gateway"

    def __init__(self,
                 config: BenchConfig,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Args:
            config: Benchmark configuration (URL, index, transport options)
            transport: Optional httpx transport, used instead of the network
        """
        self.config = config
        self.base_url = config.url.rstrip('/')
        self.transport = transport
        self.client: Optional[httpx.Client] = None
        self.logger = get_logger(f"searchbench.operations.{self.name}")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _new_client(self) -> httpx.Client:
        timeout = httpx.Timeout(self.config.timeout) if self.config.timeout else httpx.Timeout(None)
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": build_headers(self.config.keep_alive, self.config.gzip),
            "timeout": timeout,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)

    def connect(self) -> None:
        """Build the shared client when the policy reuses one."""
        if self.config.client_policy == ClientPolicy.REUSE and self.client is None:
            self.client = self._new_client()
            self.logger.info("Connected to search service", base_url=self.base_url)

    def close(self) -> None:
        """Close the shared client, if any."""
        if self.client is not None:
            try:
                self.client.close()
            finally:
                self.client = None
                self.logger.info("Disconnected from search service")

    def __call__(self) -> Any:
        if self.config.client_policy == ClientPolicy.FRESH:
            with self._new_client() as client:
                return self._perform(client)

        if self.client is None:
            raise RuntimeError("Gateway not connected. Call connect() first.")
        return self._perform(self.client)

    def _perform(self, client: httpx.Client) -> Any:
        raise NotImplementedError

    def _post(self,
              client: httpx.Client,
              path: str,
              content: bytes,
              params: Optional[Dict[str, str]] = None,
              headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """POST ``content`` and raise ``httpx.HTTPStatusError`` on a non-2xx status."""
        response = client.post(path, content=content, params=params, headers=headers)
        response.raise_for_status()
        return response
