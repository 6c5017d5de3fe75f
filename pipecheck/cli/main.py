"""Main CLI entry point."""

import argparse
import sys

from pipecheck.cli.check import check_command, connect_command, log_stream
from pipecheck.cli.rules import rules_command
from pipecheck.cli.validate import validate_command
from pipecheck.utils.logging import configure_logging


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="pipecheck - connection rules for stream pipeline graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pipecheck check graph.yaml                 Replay every edge of a graph
  pipecheck connect graph.yaml src1 strm1    Test one candidate connection
  pipecheck rules                            Show the connection rule table
  pipecheck validate graph.yaml              Validate a graph document
        """,
    )

    # Global arguments
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging verbosity (default: the graph document's logging.level, else WARNING)",
    )
    parser.add_argument(
        "--structured-logs", action="store_true", help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # pipecheck check
    check_parser = subparsers.add_parser("check", help="Replay and validate every edge")
    check_parser.add_argument("graph", help="Path to YAML/JSON graph document")
    check_parser.add_argument("--env", default=None, help="Environment overrides to apply")
    check_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )

    # pipecheck connect
    connect_parser = subparsers.add_parser("connect", help="Validate one candidate edge")
    connect_parser.add_argument("graph", help="Path to YAML/JSON graph document")
    connect_parser.add_argument("source", help="Source node id")
    connect_parser.add_argument("target", help="Target node id")
    connect_parser.add_argument("--env", default=None, help="Environment overrides to apply")

    # pipecheck rules
    rules_parser = subparsers.add_parser("rules", help="Show the connection rule table")
    rules_parser.add_argument(
        "--format", choices=["table", "json"], default="table", help="Output format"
    )

    # pipecheck validate
    validate_parser = subparsers.add_parser("validate", help="Validate a graph document")
    validate_parser.add_argument("graph", help="Path to YAML/JSON graph document")

    args = parser.parse_args()

    configure_logging(
        structured=args.structured_logs,
        level=args.log_level or "WARNING",
        stream=log_stream(args),
    )

    if args.command == "check":
        return check_command(args)
    elif args.command == "connect":
        return connect_command(args)
    elif args.command == "rules":
        return rules_command(args)
    elif args.command == "validate":
        return validate_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
