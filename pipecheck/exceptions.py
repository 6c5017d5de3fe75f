"""Custom exceptions for pipecheck.

Connection rejections are never raised; they are returned as
:class:`pipecheck.validator.Verdict` values. These exceptions cover the
layers around the validator: loading and validating graph documents.
"""

from typing import List, Optional


class PipecheckException(Exception):
    """Base exception for all pipecheck errors."""

    pass


class ConfigValidationError(PipecheckException):
    """Graph document or configuration failed validation."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        self.message = message
        self.file = file
        self.errors = errors or []
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        """Format error message with location info."""
        parts = ["✗ Configuration validation error"]
        if self.file:
            parts.append(f"\n  File: {self.file}")
        parts.append(f"\n  Error: {self.message}")
        for error in self.errors:
            parts.append(f"\n    • {error}")
        return "".join(parts)


class GraphLoadError(PipecheckException):
    """Graph document could not be read or parsed."""

    def __init__(self, path: str, reason: str, suggestions: Optional[List[str]] = None):
        self.path = path
        self.reason = reason
        self.suggestions = suggestions or []
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        parts = [f"✗ Failed to load graph: {self.path}", f"\n  Reason: {self.reason}"]

        if self.suggestions:
            parts.append("\n\n  Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                parts.append(f"\n    {i}. {suggestion}")

        return "".join(parts)
