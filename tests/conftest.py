from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    # The CLI installs a level filter that would hide debug events from later tests.
    yield
    structlog.reset_defaults()
