"""Graph audit: replay a graph document's edges through the validator."""

from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from pipecheck.capacity import can_accept_input, can_have_output
from pipecheck.config import GraphConfig, GraphEdge
from pipecheck.exceptions import ConfigValidationError, GraphLoadError
from pipecheck.graph import GraphAccessor
from pipecheck.rules import get_connection_info
from pipecheck.utils.config_loader import load_yaml_with_env
from pipecheck.utils.logging import logger
from pipecheck.validator import Verdict, connect


class EdgeFinding(BaseModel):
    """An edge from the document together with its verdict."""

    edge: GraphEdge
    verdict: Verdict


class NodeCapacity(BaseModel):
    """Edge counts and remaining capacity of a node after replay."""

    inputs: int
    outputs: int
    max_inputs: str
    max_outputs: str
    can_accept_input: bool
    can_have_output: bool


class AuditReport(BaseModel):
    """Result of replaying a graph document."""

    name: str
    accepted: List[GraphEdge] = Field(default_factory=list)
    rejected: List[EdgeFinding] = Field(default_factory=list)
    capacity: Dict[str, NodeCapacity] = Field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        return not self.rejected


def _format_validation_errors(error: ValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages


def parse_graph_config(data: Dict[str, Any], file: Optional[str] = None) -> GraphConfig:
    """Validate raw document data into a :class:`GraphConfig`.

    Raises:
        ConfigValidationError: If the document does not match the schema
    """
    try:
        return GraphConfig(**data)
    except ValidationError as e:
        raise ConfigValidationError(
            "Graph document does not match the expected schema",
            file=file,
            errors=_format_validation_errors(e),
        ) from e


def load_graph_config(path: str, env: Optional[str] = None) -> GraphConfig:
    """Load and validate a graph document.

    Raises:
        GraphLoadError: If the file is missing or cannot be parsed
        ConfigValidationError: If the document does not match the schema
    """
    try:
        data = load_yaml_with_env(path, env=env)
    except FileNotFoundError as e:
        raise GraphLoadError(path, str(e), suggestions=["Check the path to the graph file"]) from e
    except yaml.YAMLError as e:
        raise GraphLoadError(path, f"Invalid YAML/JSON: {e}") from e
    except ValueError as e:
        raise GraphLoadError(path, str(e)) from e

    return parse_graph_config(data, file=path)


class GraphAudit:
    """Replays a graph document one edge at a time.

    Each edge is validated against the edges committed before it, the same
    way the editor commits edges. Admitted edges are committed; rejected
    ones are reported and left out.
    """

    def __init__(self, config: GraphConfig):
        self.config = config

    @classmethod
    def from_yaml(cls, path: str, env: Optional[str] = None) -> "GraphAudit":
        """Create an audit from a YAML or JSON graph document."""
        return cls(load_graph_config(path, env=env))

    def run(self) -> AuditReport:
        """Replay every edge and summarize node capacity afterwards."""
        nodes = self.config.nodes
        committed: List[GraphEdge] = []
        report = AuditReport(name=self.config.name)

        logger.info(
            "Auditing graph",
            graph=self.config.name,
            nodes=len(nodes),
            edges=len(self.config.edges),
        )

        for edge in self.config.edges:
            verdict, committed = connect(edge, nodes, committed)
            if verdict.valid:
                report.accepted.append(edge)
            else:
                logger.info(
                    "Edge rejected",
                    source=edge.source,
                    target=edge.target,
                    reason=verdict.reason,
                )
                report.rejected.append(EdgeFinding(edge=edge, verdict=verdict))

        accessor = GraphAccessor(nodes, committed)
        for node in nodes:
            info = get_connection_info(node.type)
            report.capacity[node.id] = NodeCapacity(
                inputs=accessor.count_inputs(node.id),
                outputs=accessor.count_outputs(node.id),
                max_inputs=info.inputs,
                max_outputs=info.outputs,
                can_accept_input=can_accept_input(node.id, nodes, committed),
                can_have_output=can_have_output(node.id, nodes, committed),
            )

        logger.info(
            "Audit complete",
            graph=self.config.name,
            accepted=len(report.accepted),
            rejected=len(report.rejected),
        )
        return report
