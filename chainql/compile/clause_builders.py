"""Clause-level SQL builders.

Each class handles exactly one SQL clause.  Builders that may meet a nested
statement receive a *render function* (``Callable[[Fragment], str]``) from
:class:`~chainql.compile.renderer.StatementRenderer` rather than a renderer
instance, so every nested statement (derived tables, EXISTS queries, CTE
bodies, union branches) is rendered by the same renderer and dialect as the
outer statement.

Classes
-------
SelectClauseBuilder   — ``SELECT [DISTINCT] <items>``
FromClauseBuilder     — ``FROM <table | subquery>``
JoinClauseBuilder     — ``<TYPE> JOIN <target> [ON <condition>]``
ConditionBuilder      — WHERE / HAVING fragment groups
OrderByBuilder        — ``ORDER BY <col dir, ...>``
CteBuilder            — ``WITH [RECURSIVE] <ctes>``
SetOpBuilder          — ``UNION [ALL] <query>``
ValueBuilder          — INSERT / UPDATE value expressions
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from chainql.compile.base import SQLCompiler
from chainql.schema.clauses import (
    Condition,
    CTEClause,
    FromClause,
    JoinClause,
    OrderByItem,
    UnionClause,
    is_statement,
)

if TYPE_CHECKING:
    from chainql.schema.clauses import Fragment
    from chainql.statement import Statement

RenderFn = Callable[["Fragment"], str]
BodyFn = Callable[["Statement"], str]


class SelectClauseBuilder:
    """Builds the ``SELECT [DISTINCT] …`` clause."""

    def __init__(self, render_fn: RenderFn) -> None:
        self._render = render_fn

    def build(self, items: list[Fragment], distinct: bool = False) -> str:
        prefix = "SELECT DISTINCT" if distinct else "SELECT"
        if not items:
            return f"{prefix} *"
        return f"{prefix} {','.join(self._render(item) for item in items)}"


class FromClauseBuilder:
    """Builds the ``FROM <table | subquery>`` fragment.

    Derived tables are rendered by ``render_fn``, which parenthesises them
    and appends their alias.
    """

    def __init__(self, render_fn: RenderFn) -> None:
        self._render = render_fn

    def build(self, frm: FromClause) -> str:
        return f"FROM {self.target(frm)}"

    def target(self, frm: FromClause) -> str:
        """Render the target alone, as used after INSERT INTO / UPDATE / DELETE FROM."""
        sql = self._render(frm.target)
        if frm.alias and isinstance(frm.target, str):
            sql = f"{sql} {frm.alias}"
        return sql


class JoinClauseBuilder:
    """Builds a single ``<TYPE> JOIN … [ON …]`` fragment.

    A condition group given as the ON clause is rendered without
    parentheses; it is the whole condition.
    """

    def __init__(self, render_fn: RenderFn, body_fn: BodyFn) -> None:
        self._render = render_fn
        self._body = body_fn

    def build(self, join: JoinClause) -> str:
        target_sql = self._render(join.target)
        if join.alias and isinstance(join.target, str):
            target_sql = f"{target_sql} {join.alias}"
        sql = f"{join.type.value} {target_sql}"
        if join.on is not None:
            on_sql = join.on if isinstance(join.on, str) else self._body(join.on)
            sql += f" ON {on_sql}"
        return sql


class ConditionBuilder:
    """Renders a WHERE / HAVING group as space-joined fragments.

    Connector tokens are placed inline, so ``[a, AND b, OR c]`` renders as
    ``a AND b OR c``.  Nested condition groups are parenthesised; EXISTS
    queries render as ``EXISTS (…)``.
    """

    def __init__(self, body_fn: BodyFn) -> None:
        self._body = body_fn

    def build(self, conditions: list[Condition]) -> str:
        return " ".join(self._build_one(cond) for cond in conditions)

    def _build_one(self, cond: Condition) -> str:
        tokens: list[str] = []
        if cond.connector is not None:
            tokens.append(cond.connector.value)
        if cond.negated:
            tokens.append("NOT")
        if cond.exists:
            tokens.append("EXISTS")
        if isinstance(cond.fragment, str):
            tokens.append(cond.fragment)
        else:
            tokens.append(f"({self._body(cond.fragment)})")
        return " ".join(tokens)


class OrderByBuilder:
    """Builds the ``ORDER BY …`` clause."""

    def build(self, items: list[OrderByItem]) -> str:
        order_parts = [f"{item.column} {item.direction.value}" for item in items]
        return f"ORDER BY {','.join(order_parts)}"


class CteBuilder:
    """Builds the ``WITH [RECURSIVE] <name> [(cols)] AS (…)`` block.

    Whether ``RECURSIVE`` is emitted is the compiler's decision.
    """

    def __init__(self, compiler: SQLCompiler, body_fn: BodyFn) -> None:
        self._compiler = compiler
        self._body = body_fn

    def build(self, ctes: list[CTEClause]) -> str:
        recursive = any(c.recursive for c in ctes)
        keyword = self._compiler.cte_keyword(recursive)
        cte_parts: list[str] = []
        for cte in ctes:
            name_sql = cte.name
            if cte.columns:
                name_sql = f"{name_sql} ({','.join(cte.columns)})"
            cte_parts.append(f"{name_sql} AS ({self._body(cte.query)})")
        return f"{keyword} {','.join(cte_parts)}"


class SetOpBuilder:
    """Builds a ``UNION [ALL] <right_query>`` fragment."""

    def __init__(self, body_fn: BodyFn) -> None:
        self._body = body_fn

    def build(self, union: UnionClause) -> str:
        keyword = "UNION ALL" if union.union_all else "UNION"
        return f"{keyword} {self._body(union.query)}"


class ValueBuilder:
    """Renders INSERT / UPDATE values.

    Strings are opaque and pass through unchanged (usually placeholders such
    as ``?``).  Nested statements render as ``(subselect)`` with no alias.
    """

    def __init__(self, body_fn: BodyFn) -> None:
        self._body = body_fn

    def build(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, str):
            return value
        if is_statement(value):
            return f"({self._body(value)})"
        return str(value)
