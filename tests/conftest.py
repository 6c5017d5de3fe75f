import logging

import pytest

from pipecheck.config import GraphNode
from pipecheck.utils.logging import logger


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging to avoid Rich console output in tests."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if "Rich" in handler.__class__.__name__:
            root.removeHandler(handler)
    logging.basicConfig(level=logging.WARNING, format="%(message)s", force=True)
    logger.structured = False
    logger.level = logging.WARNING
    yield
    logging.basicConfig(level=logging.INFO, force=True)


def _make_nodes(*specs):
    """Build nodes from (id, type) pairs."""
    return [GraphNode(id=node_id, type=node_type) for node_id, node_type in specs]


@pytest.fixture
def pipeline_nodes():
    """A small pipeline: source -> stream -> filter -> stream -> sink."""
    return _make_nodes(
        ("src1", "source"),
        ("strm1", "stream"),
        ("filter1", "filter"),
        ("strm2", "stream"),
        ("sink1", "sink"),
    )
