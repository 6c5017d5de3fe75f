"""Capacity queries used to enable or disable node handles in the editor.

The connection validator runs its input and output capacity checks
through :func:`has_capacity` as well, so the affordances shown to the
user always agree with the verdicts they get.
"""

from enum import Enum
from typing import Iterable, Optional

from pipecheck.config import CardinalityRule, GraphEdge, GraphNode
from pipecheck.graph import GraphAccessor
from pipecheck.rules import get_rule


class Direction(str, Enum):
    """Side of a node an edge attaches to."""

    INPUT = "input"
    OUTPUT = "output"


def bound_for(rule: CardinalityRule, direction: Direction) -> Optional[int]:
    """The rule's bound for one side of a node (None is unbounded)."""
    return rule.max_inputs if direction == Direction.INPUT else rule.max_outputs


def has_capacity(
    accessor: GraphAccessor, node_id: str, rule: CardinalityRule, direction: Direction
) -> bool:
    """Whether one more edge fits on the given side of a node."""
    bound = bound_for(rule, direction)
    if bound is None:
        return True

    if direction == Direction.INPUT:
        current = accessor.count_inputs(node_id)
    else:
        current = accessor.count_outputs(node_id)
    return current < bound


def _node_has_capacity(
    node_id: str,
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    direction: Direction,
) -> bool:
    accessor = GraphAccessor(nodes, edges)
    node = accessor.get_node(node_id)
    if node is None:
        return False

    rule = get_rule(node.type)
    if rule is None:
        return False

    return has_capacity(accessor, node_id, rule, direction)


def can_accept_input(
    node_id: str, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]
) -> bool:
    """Checks if a node can accept more input connections."""
    return _node_has_capacity(node_id, nodes, edges, Direction.INPUT)


def can_have_output(
    node_id: str, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]
) -> bool:
    """Checks if a node can have more output connections."""
    return _node_has_capacity(node_id, nodes, edges, Direction.OUTPUT)
