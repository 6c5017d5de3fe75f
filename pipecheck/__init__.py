"""pipecheck - Connection rules for stream pipeline graphs."""

__version__ = "0.3.0"

from pipecheck.capacity import can_accept_input, can_have_output
from pipecheck.config import ElementType, GraphEdge, GraphNode
from pipecheck.rules import get_connection_info, get_element_label, get_rule
from pipecheck.validator import RejectionReason, Verdict, connect, validate_connection

__all__ = [
    "ElementType",
    "GraphNode",
    "GraphEdge",
    "Verdict",
    "RejectionReason",
    "validate_connection",
    "connect",
    "can_accept_input",
    "can_have_output",
    "get_rule",
    "get_element_label",
    "get_connection_info",
    "__version__",
]


# Lazy imports for the file-loading layer
def __getattr__(name):
    if name == "GraphAudit":
        from pipecheck.audit import GraphAudit

        return GraphAudit
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
