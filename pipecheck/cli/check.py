"""
Check CLI Commands
==================

Replays a graph document through the connection validator, or tests a
single candidate connection against it.
"""

import sys

from pipecheck.audit import AuditReport, GraphAudit, load_graph_config
from pipecheck.capacity import can_accept_input, can_have_output
from pipecheck.config import GraphConfig, GraphEdge
from pipecheck.exceptions import PipecheckException
from pipecheck.utils.logging import configure_logging
from pipecheck.validator import validate_connection


def log_stream(args):
    """JSON log lines go to stderr when stdout carries a JSON report."""
    return sys.stderr if getattr(args, "format", None) == "json" else None


def _apply_document_logging(args, config: GraphConfig) -> None:
    """Merge the document's logging settings with the command-line flags.

    --log-level wins over the document's level; structured output is on when
    either the flag or the document asks for it.
    """
    configure_logging(
        structured=getattr(args, "structured_logs", False) or config.logging.structured,
        level=getattr(args, "log_level", None) or config.logging.level.value,
        stream=log_stream(args),
    )


def check_command(args):
    """
    Handle check subcommand.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code: 0 when every edge is admitted, 1 otherwise
    """
    try:
        audit = GraphAudit.from_yaml(args.graph, env=args.env)
    except PipecheckException as e:
        print(e)
        return 1

    _apply_document_logging(args, audit.config)
    report = audit.run()

    if args.format == "json":
        print(report.model_dump_json(indent=2))
    else:
        print(_format_report(report))

    return 0 if report.is_clean else 1


def connect_command(args):
    """
    Handle connect subcommand.

    The candidate is checked against the edges the document would commit
    when replayed, not its raw edge list.

    Returns:
        Exit code: 0 when the connection would be admitted, 1 otherwise
    """
    try:
        config = load_graph_config(args.graph, env=args.env)
    except PipecheckException as e:
        print(e)
        return 1

    _apply_document_logging(args, config)
    committed = GraphAudit(config).run().accepted
    candidate = GraphEdge(source=args.source, target=args.target)
    verdict = validate_connection(candidate, config.nodes, committed)

    if verdict.valid:
        print(f"✓ {args.source} → {args.target} can be connected")
        return 0

    print(f"✗ {args.source} → {args.target}: {verdict.reason}")
    if not can_have_output(args.source, config.nodes, committed):
        print(f"  {args.source} has no free output")
    if not can_accept_input(args.target, config.nodes, committed):
        print(f"  {args.target} has no free input")
    return 1


def _format_report(report: AuditReport) -> str:
    """Render an audit report as plain text."""
    lines = [f"Graph: {report.name}", ""]

    for edge in report.accepted:
        lines.append(f"  ✓ {edge.source} → {edge.target}")
    for finding in report.rejected:
        edge = finding.edge
        lines.append(f"  ✗ {edge.source} → {edge.target}: {finding.verdict.reason}")

    if report.capacity:
        lines.append("")
        lines.append("Capacity:")
        width = max(len(node_id) for node_id in report.capacity)
        for node_id, cap in report.capacity.items():
            lines.append(
                f"  {node_id.ljust(width)}  in {cap.inputs}/{cap.max_inputs}"
                f"  out {cap.outputs}/{cap.max_outputs}"
            )

    lines.append("")
    lines.append(f"{len(report.accepted)} accepted, {len(report.rejected)} rejected")
    return "\n".join(lines)
