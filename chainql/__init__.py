"""chainQL – a fluent SQL statement builder.

Chain Clauses. Don't Concatenate Them.

Public API
----------
``Statement``
    The fluent builder.  Chain verb and clause methods, then call
    ``render()`` (or ``str()``) to get SQL text.

``select`` / ``insert`` / ``update`` / ``delete`` / ``with_`` / ``with_recursive``
    Shortcuts that start a new ``Statement``::

        import chainql

        sql = chainql.select("*").from_("users").where("id = ?").render()

Re-exported types
-----------------
``DialectProfile``, ``DialectProfileBuilder``, the clause enums, and all error
classes.

Extensibility
-------------
New dialect compilers can be registered via::

    from chainql.compile.registry import CompilerFactory

    @CompilerFactory.register("oracle")
    class OracleCompiler(SQLCompiler):
        ...

After registration, ``Statement.render("oracle")`` and any
``DialectProfile(target="oracle")`` pick it up automatically.
"""

from __future__ import annotations

from typing import Any

from chainql.compile.base import SQLCompiler
from chainql.compile.mysql import MySQLCompiler
from chainql.compile.registry import CompilerFactory
from chainql.compile.renderer import StatementRenderer
from chainql.compile.sqlite import SQLiteCompiler
from chainql.compile.sqlserver import SQLServerCompiler
from chainql.compile.standard import StandardCompiler
from chainql.errors import (
    BuilderError,
    ChainQLError,
    CompilationError,
    InvalidArgumentError,
    MissingTableError,
    ProfileConfigError,
    StatementKindError,
    SubqueryError,
)
from chainql.schema.clauses import Connector, JoinType, SortDirection, StatementKind
from chainql.schema.dialect import DialectProfile, DialectProfileBuilder
from chainql.statement import Statement, Subquery

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("standard", StandardCompiler)
CompilerFactory.register_class("postgres", StandardCompiler)
CompilerFactory.register_class("sqlite", SQLiteCompiler)
CompilerFactory.register_class("mysql", MySQLCompiler)
CompilerFactory.register_class("sqlserver", SQLServerCompiler)
CompilerFactory.register_class("mssql", SQLServerCompiler)

__all__ = [
    # Builder
    "Statement",
    "Subquery",
    "select",
    "insert",
    "update",
    "delete",
    "with_",
    "with_recursive",
    # Configuration
    "DialectProfile",
    "DialectProfileBuilder",
    # Clause enums
    "StatementKind",
    "JoinType",
    "Connector",
    "SortDirection",
    # Compilation
    "CompilerFactory",
    "SQLCompiler",
    "StatementRenderer",
    "StandardCompiler",
    "SQLiteCompiler",
    "MySQLCompiler",
    "SQLServerCompiler",
    # Errors
    "ChainQLError",
    "BuilderError",
    "StatementKindError",
    "MissingTableError",
    "SubqueryError",
    "InvalidArgumentError",
    "CompilationError",
    "ProfileConfigError",
]


def select(*columns: Any, profile: DialectProfile | None = None) -> Statement:
    """Start a SELECT statement.

    Args:
        *columns: Select-list expressions or closures (see ``Statement.select``).
        profile: Optional dialect profile for the new statement.

    Returns:
        A new ``Statement``.
    """
    return Statement(profile).select(*columns)


def insert(table: str, profile: DialectProfile | None = None) -> Statement:
    """Start an ``INSERT INTO table`` statement."""
    return Statement(profile).insert(table)


def update(table: str, profile: DialectProfile | None = None) -> Statement:
    """Start an ``UPDATE table`` statement."""
    return Statement(profile).update(table)


def delete(table: str, profile: DialectProfile | None = None) -> Statement:
    """Start a ``DELETE FROM table`` statement."""
    return Statement(profile).delete(table)


def with_(
    name: str,
    query: Subquery,
    columns: list[str] | None = None,
    profile: DialectProfile | None = None,
) -> Statement:
    """Start a statement with a CTE; chain a verb afterwards::

        chainql.with_("recent", lambda q: q.select("*").from_("orders")).select("*").from_("recent")
    """
    return Statement(profile).with_(name, query, columns)


def with_recursive(
    name: str,
    query: Subquery,
    columns: list[str] | None = None,
    profile: DialectProfile | None = None,
) -> Statement:
    """Start a statement with a recursive CTE."""
    return Statement(profile).with_recursive(name, query, columns)
