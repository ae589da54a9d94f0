"""tinytl Exceptions

Errors raised while parsing and evaluating templates.
"""

from __future__ import annotations

from typing import Optional


class TemplateError(Exception):
    """Base exception for all tinytl errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ParsingError(TemplateError):
    """Raised when template text does not match the grammar.

    `line` and `column` are 1-based and point at the offending input when
    the parser knows where it stopped.
    """

    def __init__(
        self,
        message: str = "parsing error",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


class EvaluationError(TemplateError):
    """Raised when a parsed template cannot be evaluated against a context."""

    def __init__(self, message: str = "evaluation error") -> None:
        super().__init__(message)
