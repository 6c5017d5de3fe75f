"""Validate command implementation."""

from pipecheck.audit import load_graph_config
from pipecheck.exceptions import PipecheckException


def validate_command(args):
    """Validate a graph document against the schema."""
    try:
        config = load_graph_config(args.graph)
    except PipecheckException as e:
        print(e)
        return 1

    print(f"Graph '{config.name}' is valid ({len(config.nodes)} nodes, {len(config.edges)} edges)")
    return 0
