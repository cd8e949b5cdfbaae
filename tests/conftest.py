import sys

import pytest

from searchbench.core.logging import configure_structlog


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep log output off stdout so report assertions see only the report."""
    configure_structlog(log_level="WARNING", stream=sys.__stderr__)
    yield
