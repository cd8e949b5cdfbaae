"""Tests for benchmark configuration."""

import os

import pytest

from searchbench.core.config import (
    BenchConfig,
    ClientPolicy,
    FailurePolicy,
    OperationKind,
)
from searchbench.core.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("SEARCHBENCH_URL", "SEARCHBENCH_INDEX", "SEARCHBENCH_DOC_TYPE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestBenchConfig:
    """Test config defaults, validation and sources."""

    def test_defaults(self, clean_env):
        config = BenchConfig.from_sources(env_file=str(clean_env / "missing.env"))

        assert config.runs == 200
        assert config.operation == OperationKind.SEARCH
        assert config.url == "http://localhost:9200"
        assert config.index == "bench_index"
        assert config.doc_type == "bench_doc"
        assert config.client_policy == ClientPolicy.REUSE
        assert config.failure_policy == FailurePolicy.INCLUDE
        assert config.keep_alive is True
        assert config.gzip is False
        assert config.timeout is None

    def test_environment_defaults(self, clean_env, monkeypatch):
        monkeypatch.setenv("SEARCHBENCH_URL", "http://es.internal:9200/")
        monkeypatch.setenv("SEARCHBENCH_INDEX", "products")

        config = BenchConfig.from_sources(env_file=str(clean_env / "missing.env"))

        assert config.url == "http://es.internal:9200"
        assert config.index == "products"

    def test_dotenv_file(self, clean_env):
        env_file = clean_env / ".env"
        env_file.write_text("SEARCHBENCH_DOC_TYPE=product\n")

        try:
            config = BenchConfig.from_sources(env_file=str(env_file))
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("SEARCHBENCH_DOC_TYPE", None)

        assert config.doc_type == "product"

    def test_dotenv_in_working_directory(self, clean_env):
        """Without an explicit file, the .env in the working directory is used."""
        (clean_env / ".env").write_text("SEARCHBENCH_INDEX=from_cwd_env\n")

        try:
            config = BenchConfig.from_sources()
        finally:
            os.environ.pop("SEARCHBENCH_INDEX", None)

        assert config.index == "from_cwd_env"

    def test_overrides_win_and_none_is_ignored(self, clean_env, monkeypatch):
        monkeypatch.setenv("SEARCHBENCH_INDEX", "products")

        config = BenchConfig.from_sources(
            env_file=str(clean_env / "missing.env"),
            index="override",
            runs=None,
            operation="bulk",
        )

        assert config.index == "override"
        assert config.runs == 200
        assert config.operation == OperationKind.BULK

    @pytest.mark.parametrize("overrides", [
        {"runs": 0},
        {"runs": -3},
        {"size": -1},
        {"timeout": 0},
        {"operation": "delete"},
    ])
    def test_invalid_values_raise_configuration_error(self, clean_env, overrides):
        with pytest.raises(ConfigurationError):
            BenchConfig.from_sources(env_file=str(clean_env / "missing.env"), **overrides)
