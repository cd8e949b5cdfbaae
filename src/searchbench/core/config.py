"""Run configuration for the search benchmark harness."""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_RUNS = 200
DEFAULT_URL = "http://localhost:9200"
DEFAULT_INDEX = "bench_index"
DEFAULT_DOC_TYPE = "bench_doc"


class OperationKind(str, Enum):
    """Operations the harness knows how to benchmark."""
    SEARCH = "search"
    RAW = "raw"
    FILTERED = "filtered"
    BULK = "bulk"


class ClientPolicy(str, Enum):
    """Whether the HTTP client is shared across trials or rebuilt per trial."""
    REUSE = "reuse"
    FRESH = "fresh"


class FailurePolicy(str, Enum):
    """Whether failed-trial durations count towards the statistics."""
    INCLUDE = "include"
    EXCLUDE = "exclude"


class BenchConfig(BaseModel):
    """Benchmark run configuration."""

    runs: int = Field(default=DEFAULT_RUNS, description="Number of sequential trials")
    operation: OperationKind = Field(default=OperationKind.SEARCH, description="Operation under test")
    url: str = Field(default=DEFAULT_URL, description="Base URL of the search service")
    index: str = Field(default=DEFAULT_INDEX, description="Index to search")
    doc_type: str = Field(default=DEFAULT_DOC_TYPE, description="Document type within the index")
    query: str = Field(default="*", description="query_string query")
    size: int = Field(default=10, description="Number of hits to request")
    client_policy: ClientPolicy = Field(default=ClientPolicy.REUSE)
    keep_alive: bool = Field(default=True, description="Send Connection: keep-alive")
    gzip: bool = Field(default=False, description="Accept gzip-encoded responses")
    timeout: Optional[float] = Field(default=None, description="Per-request timeout in seconds")
    failure_policy: FailurePolicy = Field(default=FailurePolicy.INCLUDE)
    output: Optional[str] = Field(default=None, description="Optional JSON report path")

    @field_validator("runs")
    @classmethod
    def _runs_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"run count must be a positive integer, got {value}")
        return value

    @field_validator("size")
    @classmethod
    def _size_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"size must not be negative, got {value}")
        return value

    @field_validator("timeout")
    @classmethod
    def _timeout_positive(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError(f"timeout must be positive, got {value}")
        return value

    @field_validator("url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_sources(cls, env_file: Optional[str] = None, **overrides: Any) -> BenchConfig:
        """Build a config from environment defaults plus explicit overrides.

        Environment variables (optionally loaded from a .env file):
        SEARCHBENCH_URL, SEARCHBENCH_INDEX, SEARCHBENCH_DOC_TYPE.
        Overrides whose value is None are ignored.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        values = {}
        for field_name, env_name in (
            ("url", "SEARCHBENCH_URL"),
            ("index", "SEARCHBENCH_INDEX"),
            ("doc_type", "SEARCHBENCH_DOC_TYPE"),
        ):
            env_value = os.getenv(env_name)
            if env_value:
                values[field_name] = env_value

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ConfigurationError(f"Invalid configuration: {messages}") from e
