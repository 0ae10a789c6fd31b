"""Compiler abstraction: the ``SQLCompiler`` strategy ABC.

The Template Method pattern (GoF) is used:
- :class:`~chainql.compile.renderer.StatementRenderer` owns clause order and
  punctuation for every statement kind.
- ``SQLCompiler`` subclasses override the dialect-specific steps
  (pagination syntax, the ``WITH RECURSIVE`` keyword).
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers.

    Subclasses implement the dialect-specific methods; the renderer uses this
    interface via the Strategy / Template Method patterns.

    Args:
        recursive_keyword: Emit ``RECURSIVE`` after ``WITH`` when a CTE was
            registered as recursive and the dialect accepts the keyword.
    """

    #: Whether the dialect accepts ``WITH RECURSIVE``.
    supports_recursive_keyword: bool = True

    def __init__(self, recursive_keyword: bool = True) -> None:
        self._recursive_keyword = recursive_keyword

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'standard'``)."""

    @abstractmethod
    def pagination(self, limit: int | None, offset: int) -> str:
        """Return the pagination clause, or ``""`` when nothing applies.

        Args:
            limit: Row limit, ``None`` when unset.
            offset: Rows to skip (``0`` when unset).

        Returns:
            Dialect-specific pagination SQL without surrounding spaces.
        """

    def cte_keyword(self, recursive: bool) -> str:
        """Return the keyword that opens a CTE list."""
        if recursive and self._recursive_keyword and self.supports_recursive_keyword:
            return "WITH RECURSIVE"
        return "WITH"
