"""Connection validator.

Decides whether a candidate edge may be added to a graph. Checks run in a
fixed order and the first failing check decides the reported reason:

1. both endpoints exist (and have a known type)
2. the pair is not already connected
3. no self-connection
4. source output capacity
5. target input capacity
6. target type allowed by the source
7. source type allowed by the target
8. a stream pairs with a Source or a Sink, never both

Re-submitting an accepted edge is therefore always reported as a
duplicate, even when that edge is what filled a bound, and a self-loop is
reported as such even on a type whose whitelist would also refuse it.

A rejection is a value, not an error: callers show ``Verdict.reason`` to
the user and simply do not commit the edge.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel

from pipecheck.capacity import Direction, bound_for, has_capacity
from pipecheck.config import ElementType, GraphEdge, GraphNode
from pipecheck.graph import GraphAccessor
from pipecheck.rules import get_element_label, get_rule, resolve_type
from pipecheck.utils.logging import logger


class RejectionReason(str, Enum):
    """Why a connection was refused."""

    NODE_NOT_FOUND = "node_not_found"
    UNKNOWN_TYPE = "unknown_type"
    OUTPUT_CAPACITY = "output_capacity"
    INPUT_CAPACITY = "input_capacity"
    TARGET_NOT_ALLOWED = "target_not_allowed"
    SOURCE_NOT_ALLOWED = "source_not_allowed"
    DUPLICATE = "duplicate"
    CONNECTOR_CONFLICT = "connector_conflict"
    SELF_CONNECTION = "self_connection"


class Verdict(BaseModel):
    """Outcome of validating a candidate edge."""

    model_config = {"frozen": True}

    valid: bool
    reason: Optional[str] = None
    code: Optional[RejectionReason] = None

    @classmethod
    def admit(cls) -> "Verdict":
        return cls(valid=True)

    @classmethod
    def reject(cls, code: RejectionReason, reason: str) -> "Verdict":
        return cls(valid=False, reason=reason, code=code)


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _capacity_message(element_type: ElementType, bound: int, direction: Direction) -> str:
    label = get_element_label(element_type)
    return f"{label} can only have {bound} {direction.value} connection{_plural(bound)}"


def _has_source_connector(accessor: GraphAccessor, stream_id: str) -> bool:
    """Whether some Source already feeds this stream."""
    return any(
        accessor.type_of(edge.source) == ElementType.SOURCE.value
        for edge in accessor.incoming(stream_id)
    )


def _has_sink_connector(accessor: GraphAccessor, stream_id: str) -> bool:
    """Whether this stream already feeds some Sink."""
    return any(
        accessor.type_of(edge.target) == ElementType.SINK.value
        for edge in accessor.outgoing(stream_id)
    )


def _check_connector_exclusivity(
    accessor: GraphAccessor,
    candidate: GraphEdge,
    source_type: ElementType,
    target_type: ElementType,
) -> Optional[Verdict]:
    """A stream is paired with at most one external connector kind."""
    conflict = RejectionReason.CONNECTOR_CONFLICT

    if source_type == ElementType.SOURCE and target_type == ElementType.STREAM:
        stream_id = candidate.target
        if _has_source_connector(accessor, stream_id):
            return Verdict.reject(conflict, "Stream already has a Source connected.")
        if _has_sink_connector(accessor, stream_id):
            return Verdict.reject(
                conflict,
                "Stream already connects to a Sink. "
                "A stream can have either a Source or a Sink, not both.",
            )

    if source_type == ElementType.STREAM and target_type == ElementType.SINK:
        stream_id = candidate.source
        if _has_sink_connector(accessor, stream_id):
            return Verdict.reject(conflict, "Stream already connects to a Sink.")
        if _has_source_connector(accessor, stream_id):
            return Verdict.reject(
                conflict,
                "Stream already has a Source connected. "
                "A stream can have either a Source or a Sink, not both.",
            )

    return None


def _evaluate(candidate: GraphEdge, accessor: GraphAccessor) -> Verdict:
    source_node = accessor.get_node(candidate.source)
    target_node = accessor.get_node(candidate.target)

    if source_node is None or target_node is None:
        return Verdict.reject(RejectionReason.NODE_NOT_FOUND, "Source or target node not found")

    source_type = resolve_type(source_node.type)
    target_type = resolve_type(target_node.type)

    if source_type is None or target_type is None:
        return Verdict.reject(RejectionReason.UNKNOWN_TYPE, "Unknown element type")

    source_rule = get_rule(source_type)
    target_rule = get_rule(target_type)

    # An existing pair is a duplicate even when it also fills a bound
    if accessor.has_edge(candidate.source, candidate.target):
        return Verdict.reject(RejectionReason.DUPLICATE, "Connection already exists")

    if candidate.source == candidate.target:
        return Verdict.reject(
            RejectionReason.SELF_CONNECTION, "Cannot connect element to itself"
        )

    if not has_capacity(accessor, candidate.source, source_rule, Direction.OUTPUT):
        return Verdict.reject(
            RejectionReason.OUTPUT_CAPACITY,
            _capacity_message(
                source_type, bound_for(source_rule, Direction.OUTPUT), Direction.OUTPUT
            ),
        )

    if not has_capacity(accessor, candidate.target, target_rule, Direction.INPUT):
        return Verdict.reject(
            RejectionReason.INPUT_CAPACITY,
            _capacity_message(
                target_type, bound_for(target_rule, Direction.INPUT), Direction.INPUT
            ),
        )

    source_label = get_element_label(source_type)
    target_label = get_element_label(target_type)

    if source_rule.allowed_targets is not None and target_type not in source_rule.allowed_targets:
        return Verdict.reject(
            RejectionReason.TARGET_NOT_ALLOWED,
            f"{source_label} cannot connect to {target_label}",
        )

    if target_rule.allowed_sources is not None and source_type not in target_rule.allowed_sources:
        return Verdict.reject(
            RejectionReason.SOURCE_NOT_ALLOWED,
            f"{target_label} cannot receive connections from {source_label}",
        )

    conflict = _check_connector_exclusivity(accessor, candidate, source_type, target_type)
    if conflict is not None:
        return conflict

    return Verdict.admit()


def validate_connection(
    candidate: GraphEdge, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]
) -> Verdict:
    """Validates if a new connection is allowed based on cardinality rules.

    Args:
        candidate: Proposed edge
        nodes: All nodes currently in the graph
        edges: All edges currently in the graph

    Returns:
        Verdict; ``reason`` and ``code`` are set only on rejection
    """
    verdict = _evaluate(candidate, GraphAccessor(nodes, edges))

    if not verdict.valid:
        logger.debug(
            "Connection rejected",
            source=candidate.source,
            target=candidate.target,
            code=verdict.code.value,
        )

    return verdict


def connect(
    candidate: GraphEdge, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]
) -> Tuple[Verdict, List[GraphEdge]]:
    """Validate a candidate and commit it when admitted.

    Returns:
        The verdict and the resulting edge list. The input collection is
        never modified; on rejection the returned list holds the same edges.
    """
    current = list(edges)
    verdict = validate_connection(candidate, nodes, current)
    if verdict.valid:
        return verdict, current + [candidate]
    return verdict, current
