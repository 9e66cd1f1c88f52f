import logging

import pytest
import structlog


@pytest.fixture
def isolated_logging():
    """Undo the global logging setup a test performs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
