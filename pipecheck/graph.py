"""Read-only queries over a snapshot of graph nodes and edges."""

from typing import Dict, Iterable, List, Optional

from pipecheck.config import GraphEdge, GraphNode


class GraphAccessor:
    """Answers lookup and counting questions about a graph snapshot.

    The accessor never mutates the collections it is given and keeps no
    state between calls beyond them.
    """

    def __init__(self, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]):
        """Initialize accessor.

        Args:
            nodes: Current nodes of the graph
            edges: Current edges of the graph
        """
        self.nodes: Dict[str, GraphNode] = {}
        for node in nodes:
            # First occurrence wins on duplicate ids
            self.nodes.setdefault(node.id, node)
        self.edges: List[GraphEdge] = list(edges)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Return the node with this id, or None."""
        return self.nodes.get(node_id)

    def type_of(self, node_id: str) -> Optional[str]:
        """Return the type tag of a node, or None if it does not exist."""
        node = self.nodes.get(node_id)
        return node.type if node is not None else None

    def count_outputs(self, node_id: str) -> int:
        """Number of edges whose source is this node."""
        return sum(1 for edge in self.edges if edge.source == node_id)

    def count_inputs(self, node_id: str) -> int:
        """Number of edges whose target is this node."""
        return sum(1 for edge in self.edges if edge.target == node_id)

    def outgoing(self, node_id: str) -> List[GraphEdge]:
        """Edges leaving this node, in snapshot order."""
        return [edge for edge in self.edges if edge.source == node_id]

    def incoming(self, node_id: str) -> List[GraphEdge]:
        """Edges entering this node, in snapshot order."""
        return [edge for edge in self.edges if edge.target == node_id]

    def has_edge(self, source: str, target: str) -> bool:
        """Whether an edge with exactly this (source, target) pair exists."""
        return any(edge.source == source and edge.target == target for edge in self.edges)
