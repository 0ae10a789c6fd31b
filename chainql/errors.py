"""Custom exception hierarchy for chainQL.

All public errors inherit from ChainQLError so callers can catch the base
class for any chainQL-specific failure.
"""
from __future__ import annotations


class ChainQLError(Exception):
    """Base exception for all chainQL errors."""


class BuilderError(ChainQLError):
    """Raised when a statement is misused while it is being built.

    Args:
        message: Human-readable description.
        method: The builder method that was called (e.g. ``having``).
    """

    def __init__(self, message: str, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


class StatementKindError(BuilderError):
    """Raised when a method is not valid for the statement's kind.

    Covers both clause methods called on the wrong kind of statement
    (``group_by`` on a DELETE) and verb methods that conflict with the kind
    already chosen (``insert`` on a SELECT).
    """

    def __init__(
        self,
        method: str,
        kind: str | None,
        allowed: list[str] | None = None,
        conflicting: list[str] | None = None,
    ) -> None:
        allowed = allowed or []
        conflicting = conflicting or []
        if conflicting:
            message = (
                f"'{method}' cannot make a {kind} statement: "
                f"it already has {conflicting} clauses."
            )
        elif allowed:
            message = (
                f"'{method}' is not valid on a {kind} statement. "
                f"Allowed kinds: {allowed}."
            )
        else:
            message = f"'{method}' is not valid on a {kind} statement."
        super().__init__(message, method=method)
        self.kind = kind
        self.allowed = allowed
        self.conflicting = conflicting


class MissingTableError(BuilderError):
    """Raised when a verb is called without a usable table name."""

    def __init__(self, method: str, table: object) -> None:
        super().__init__(
            f"'{method}' requires a non-empty table name, got {table!r}.",
            method=method,
        )
        self.table = table


class SubqueryError(BuilderError):
    """Raised when a closure does not build what its position requires.

    Args:
        message: Human-readable description.
        method: The builder method that received the closure.
    """


class InvalidArgumentError(BuilderError):
    """Raised when a builder method receives an unusable argument."""


class CompilationError(ChainQLError):
    """Raised when SQL rendering fails.

    Args:
        message: Human-readable description.
        clause: The clause being rendered when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class ProfileConfigError(ChainQLError):
    """Raised when a DialectProfile is misconfigured.

    Args:
        message: Human-readable description.
        target: The dialect target that was requested.
        registered: Targets known to the compiler registry.
    """

    def __init__(
        self,
        message: str,
        target: str | None = None,
        registered: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.registered = registered or []
