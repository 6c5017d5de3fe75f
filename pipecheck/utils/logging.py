import json
import logging
import sys
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler


class StructuredLogger:
    """Logger that supports both human-readable and JSON output."""

    def __init__(self, structured: bool = False, level: str = "INFO", stream=None):
        self.configure(structured=structured, level=level, stream=stream)

    def configure(
        self, structured: bool = False, level: str = "INFO", force: bool = False, stream=None
    ):
        """(Re)apply output mode and level.

        Args:
            structured: Emit JSON lines instead of Rich console output
            level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
            force: Replace handlers already installed on the root logger
            stream: Where JSON lines are written; stdout when None
        """
        self.structured = structured
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.stream = stream

        # Fix Windows Unicode handling
        if sys.platform == "win32" and sys.stdout.encoding.lower() != "utf-8":
            sys.stdout.reconfigure(encoding="utf-8")

        if not self.structured:
            logging.basicConfig(
                level=self.level,
                format="%(message)s",
                datefmt="[%X]",
                handlers=[
                    RichHandler(
                        rich_tracebacks=True,
                        markup=False,
                        show_path=False,
                        console=(
                            Console(stderr=True, force_terminal=True, legacy_windows=False)
                            if sys.platform == "win32"
                            else Console(stderr=True)
                        ),
                    )
                ],
                force=force,
            )
        else:
            logging.basicConfig(
                level=self.level, format="%(message)s", stream=stream or sys.stdout, force=force
            )

        self.logger = logging.getLogger("pipecheck")
        self.logger.setLevel(self.level)

    def info(self, message: str, **kwargs):
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log("DEBUG", message, **kwargs)

    def _log(self, level: str, message: str, **kwargs):
        level_val = getattr(logging, level, logging.INFO)
        if level_val < self.level:
            return

        if self.structured:
            log_entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": level,
                "message": message,
                **kwargs,
            }
            print(json.dumps(log_entry, default=str), file=self.stream or sys.stdout)
        else:
            context_str = ""
            if kwargs:
                context_items = [f"{k}={v}" for k, v in kwargs.items()]
                context_str = f" ({', '.join(context_items)})"

            formatted_msg = f"{message}{context_str}"

            if level == "INFO":
                self.logger.info(formatted_msg)
            elif level == "WARNING":
                self.logger.warning(f"[WARN] {formatted_msg}")
            elif level == "ERROR":
                self.logger.error(f"[ERROR] {formatted_msg}")
            elif level == "DEBUG":
                self.logger.debug(f"[DEBUG] {formatted_msg}")


# Shared instance; modules import it directly, so it is reconfigured in place
logger = StructuredLogger()


def configure_logging(structured: bool, level: str, stream=None):
    """Configure the global logger."""
    logger.configure(structured=structured, level=level, force=True, stream=stream)
