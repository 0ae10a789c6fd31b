"""Core Statement → SQL rendering logic.

``StatementRenderer`` is the top-level orchestrator.  It wires together the
clause-level sub-builders, then assembles each statement kind in its fixed
clause order.  All dialect-specific behaviour is delegated to the injected
``SQLCompiler``; clause rendering is delegated to the sub-builders.

Sub-builder hierarchy
---------------------
StatementRenderer
  ├── SelectClauseBuilder  (clause_builders.py)
  ├── FromClauseBuilder    (clause_builders.py)
  ├── JoinClauseBuilder    (clause_builders.py)
  ├── ConditionBuilder     (clause_builders.py)
  ├── OrderByBuilder       (clause_builders.py)
  ├── CteBuilder           (clause_builders.py)
  ├── SetOpBuilder         (clause_builders.py)
  └── ValueBuilder         (clause_builders.py)

Rendering never mutates the statement; the same statement renders to the
same string every time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chainql.compile.base import SQLCompiler
from chainql.compile.clause_builders import (
    ConditionBuilder,
    CteBuilder,
    FromClauseBuilder,
    JoinClauseBuilder,
    OrderByBuilder,
    SelectClauseBuilder,
    SetOpBuilder,
    ValueBuilder,
)
from chainql.errors import CompilationError
from chainql.schema.clauses import StatementKind, StatementParts

if TYPE_CHECKING:
    from chainql.schema.clauses import Fragment
    from chainql.statement import Statement

logger = logging.getLogger(__name__)


class StatementRenderer:
    """Renders a built :class:`~chainql.statement.Statement` to SQL text.

    Args:
        compiler: Dialect-specific compiler instance.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._compiler = compiler
        self._select = SelectClauseBuilder(self._render_fragment)
        self._from = FromClauseBuilder(self._render_fragment)
        self._join = JoinClauseBuilder(self._render_fragment, self._render_body)
        self._conditions = ConditionBuilder(self._render_body)
        self._order = OrderByBuilder()
        self._cte = CteBuilder(compiler, self._render_body)
        self._set_op = SetOpBuilder(self._render_body)
        self._value = ValueBuilder(self._render_body)

    @property
    def compiler(self) -> SQLCompiler:
        return self._compiler

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, statement: Statement) -> str:
        """Render ``statement`` to a single SQL string.

        Args:
            statement: A fully built statement.

        Returns:
            The SQL text.

        Raises:
            CompilationError: If the statement cannot be expressed as SQL
                (e.g. an INSERT without values).
        """
        logger.debug(
            "Rendering %s statement for dialect '%s'",
            statement.parts.kind.value if statement.parts.kind else "condition",
            self._compiler.dialect_name,
        )
        return self._render_nested(statement)

    # ------------------------------------------------------------------
    # Nested rendering
    # ------------------------------------------------------------------

    def _render_fragment(self, fragment: Fragment) -> str:
        if isinstance(fragment, str):
            return fragment
        return self._render_nested(fragment)

    def _render_nested(self, statement: Statement) -> str:
        """Render a statement, parenthesised and aliased when it is a subquery."""
        parts = statement.parts
        sql = self._render_body(statement)
        if not parts.is_subquery:
            return sql
        sql = f"({sql})"
        if parts.alias:
            sql += f" AS {parts.alias}"
        return sql

    def _render_body(self, statement: Statement) -> str:
        parts = statement.parts
        if parts.kind is StatementKind.SELECT:
            return self._render_select(parts)
        if parts.kind is StatementKind.INSERT:
            return self._render_insert(parts)
        if parts.kind is StatementKind.UPDATE:
            return self._render_update(parts)
        if parts.kind is StatementKind.DELETE:
            return self._render_delete(parts)
        return self._render_kindless(parts)

    def _render_kindless(self, parts: StatementParts) -> str:
        """Render a statement no verb method was called on.

        SELECT-only clauses imply a SELECT.  A statement holding nothing but
        a WHERE group renders as that bare condition group.
        """
        implies_select = (
            parts.select
            or parts.distinct
            or parts.source is not None
            or parts.joins
            or parts.group_by
            or parts.order_by
            or parts.limit is not None
            or parts.offset > 0
            or parts.unions
        )
        if implies_select:
            return self._render_select(parts)
        leftover = [
            name
            for name, present in (
                ("WITH", bool(parts.ctes)),
                ("HAVING", bool(parts.having)),
                ("COLUMNS", parts.columns is not None),
                ("VALUES", parts.values is not None),
            )
            if present
        ]
        if leftover:
            raise CompilationError(
                f"Statement has {leftover} clauses but no verb; call select(), "
                "insert(), update() or delete() first.",
                clause=leftover[0],
            )
        return self._conditions.build(parts.where)

    # ------------------------------------------------------------------
    # Statement kinds
    # ------------------------------------------------------------------

    def _render_select(self, parts: StatementParts) -> str:
        sql: list[str] = [self._render_with(parts)]

        sql.append(self._select.build(parts.select, parts.distinct))

        if parts.source is not None:
            sql.append(self._from.build(parts.source))

        for join in parts.joins:
            sql.append(self._join.build(join))

        sql.append(self._render_where(parts))

        if parts.group_by:
            sql.append(f"GROUP BY {','.join(parts.group_by)}")
            if parts.having:
                sql.append(f"HAVING {self._conditions.build(parts.having)}")

        for union in parts.unions:
            sql.append(self._set_op.build(union))

        if parts.order_by:
            sql.append(self._order.build(parts.order_by))

        sql.append(self._compiler.pagination(parts.limit, parts.offset))

        return " ".join(s for s in sql if s)

    def _render_insert(self, parts: StatementParts) -> str:
        table = self._table(parts, "INSERT")
        values = parts.values
        columns = parts.columns

        if values is None or (isinstance(values, (list, dict)) and not values):
            raise CompilationError(f"INSERT INTO {table} has no values.", clause="VALUES")

        if isinstance(values, dict):
            if columns:
                missing = [c for c in columns if c not in values]
                if missing:
                    raise CompilationError(
                        f"INSERT INTO {table} has no values for columns {missing}.",
                        clause="VALUES",
                    )
                extra = [c for c in values if c not in columns]
                if extra:
                    raise CompilationError(
                        f"INSERT INTO {table} has values for unlisted columns {extra}.",
                        clause="VALUES",
                    )
                row = [values[c] for c in columns]
            else:
                columns = list(values)
                row = list(values.values())
            body = f"VALUES ({','.join(self._value.build(v) for v in row)})"
        elif isinstance(values, list):
            if columns and len(columns) != len(values):
                raise CompilationError(
                    f"INSERT INTO {table} lists {len(columns)} columns "
                    f"but {len(values)} values.",
                    clause="VALUES",
                )
            body = f"VALUES ({','.join(self._value.build(v) for v in values)})"
        else:
            body = self._render_body(values)

        sql = f"INSERT INTO {table}"
        if columns:
            sql += f" ({','.join(columns)})"
        sql += f" {body}"
        return " ".join(s for s in (self._render_with(parts), sql) if s)

    def _render_update(self, parts: StatementParts) -> str:
        table = self._table(parts, "UPDATE")
        if not isinstance(parts.values, dict) or not parts.values:
            raise CompilationError(f"UPDATE {table} has no values to SET.", clause="SET")
        assignments = ",".join(
            f"{column}={self._value.build(value)}" for column, value in parts.values.items()
        )
        sql = [
            self._render_with(parts),
            f"UPDATE {table} SET {assignments}",
            self._render_where(parts),
        ]
        return " ".join(s for s in sql if s)

    def _render_delete(self, parts: StatementParts) -> str:
        table = self._table(parts, "DELETE")
        sql = [
            self._render_with(parts),
            f"DELETE FROM {table}",
            self._render_where(parts),
        ]
        return " ".join(s for s in sql if s)

    # ------------------------------------------------------------------
    # Shared clauses
    # ------------------------------------------------------------------

    def _render_with(self, parts: StatementParts) -> str:
        if not parts.ctes:
            return ""
        return self._cte.build(list(parts.ctes.values()))

    def _render_where(self, parts: StatementParts) -> str:
        if not parts.where:
            return ""
        return f"WHERE {self._conditions.build(parts.where)}"

    def _table(self, parts: StatementParts, verb: str) -> str:
        if parts.source is None:
            raise CompilationError(f"{verb} statement has no table.", clause=verb)
        return self._from.target(parts.source)
