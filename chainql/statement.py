"""The fluent ``Statement`` builder.

A ``Statement`` accumulates the clauses of one SQL statement through chained
method calls and renders them on demand::

    from chainql import Statement

    sql = (
        Statement()
        .select("albums.Title", "artists.Name")
        .from_("albums")
        .left_join("artists", "albums.ArtistId = artists.ArtistId")
        .where("artists.ArtistId = ?")
        .order_by({"artists.Name": "ASC", "albums.Title": "ASC"})
        .render()
    )

Closures
--------
Every argument documented as accepting a *closure* may be given a callable
taking a fresh child ``Statement``.  The closure runs immediately, builds the
child, and may return a string that becomes the child's alias (returning the
child itself, as a chained lambda does, means no alias).  The built
child then takes the place of the raw string: a derived table, a select-list
subquery, an EXISTS query, a parenthesised condition group, a CTE body or a
union branch::

    Statement().select("*").from_(lambda q: q.select("*").from_("users"))
    # SELECT * FROM (SELECT * FROM users)

Misuse (a GROUP BY on a DELETE, an empty table name, a closure that builds
nothing) raises a :class:`~chainql.errors.BuilderError` subclass immediately.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from chainql.compile.base import SQLCompiler
from chainql.compile.registry import CompilerFactory
from chainql.compile.renderer import StatementRenderer
from chainql.errors import (
    InvalidArgumentError,
    MissingTableError,
    StatementKindError,
    SubqueryError,
)
from chainql.schema.clauses import (
    Condition,
    Connector,
    CTEClause,
    FromClause,
    JoinClause,
    JoinType,
    OrderByItem,
    SortDirection,
    StatementKind,
    StatementParts,
    UnionClause,
    rebuild_models,
)
from chainql.schema.dialect import DialectProfile

#: A closure building a nested statement; a returned string becomes its alias.
Subquery = Callable[["Statement"], Optional[str]]

#: A raw fragment or a closure.
FragmentArg = Union[str, Subquery]

_SELECT = StatementKind.SELECT
_INSERT = StatementKind.INSERT
_UPDATE = StatementKind.UPDATE
_DELETE = StatementKind.DELETE

# Statement kinds each clause may appear in.  A statement without a kind
# accepts every clause until a verb method fixes it.
_ALLOWED_KINDS: dict[str, frozenset[StatementKind]] = {
    "select": frozenset({_SELECT}),
    "distinct": frozenset({_SELECT}),
    "from": frozenset({_SELECT}),
    "join": frozenset({_SELECT}),
    "where": frozenset({_SELECT, _UPDATE, _DELETE}),
    "group_by": frozenset({_SELECT}),
    "having": frozenset({_SELECT}),
    "order_by": frozenset({_SELECT}),
    "limit": frozenset({_SELECT}),
    "offset": frozenset({_SELECT}),
    "union": frozenset({_SELECT}),
    "columns": frozenset({_INSERT}),
    "values": frozenset({_INSERT, _UPDATE}),
    "with": frozenset({_SELECT, _INSERT, _UPDATE, _DELETE}),
}


def _flatten(items: tuple[Any, ...]) -> list[Any]:
    """Accept both ``f("a", "b")`` and ``f(["a", "b"])``."""
    if len(items) == 1 and isinstance(items[0], (list, tuple)):
        return list(items[0])
    return list(items)


class Statement:
    """A mutable builder for one SQL statement.

    Args:
        profile: Dialect configuration used by :meth:`render` when no dialect
            is passed explicitly.  Nested statements inherit it.
    """

    def __init__(self, profile: DialectProfile | None = None) -> None:
        self._profile = profile if profile is not None else DialectProfile()
        self._parts = StatementParts()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def parts(self) -> StatementParts:
        """The accumulated clauses.  Treat as read-only."""
        return self._parts

    @property
    def kind(self) -> StatementKind | None:
        return self._parts.kind

    @property
    def alias(self) -> str | None:
        return self._parts.alias

    @property
    def is_subquery(self) -> bool:
        return self._parts.is_subquery

    @property
    def profile(self) -> DialectProfile:
        return self._profile

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def select(self, *columns: FragmentArg) -> Statement:
        """Start (or restart) a SELECT, replacing the select list.

        Each column is a raw expression or a closure building a scalar
        subquery, rendered as ``(subselect) AS alias``.  No columns renders
        ``SELECT *``.
        """
        items = [self._column(column, "select") for column in _flatten(columns)]
        self._set_kind(_SELECT, "select")
        self._assign("select", select=items)
        return self

    def add_select(self, *columns: FragmentArg) -> Statement:
        """Append columns to the select list."""
        self._require("select", "add_select")
        items = [self._column(column, "add_select") for column in _flatten(columns)]
        self._set_kind(_SELECT, "add_select")
        self._assign("add_select", select=[*self._parts.select, *items])
        return self

    def insert(self, table: str) -> Statement:
        """Make this an ``INSERT INTO table`` statement."""
        self._check_table(table, "insert")
        self._set_kind(_INSERT, "insert")
        self._assign("insert", source=FromClause(target=table))
        return self

    def update(self, table: str) -> Statement:
        """Make this an ``UPDATE table`` statement."""
        self._check_table(table, "update")
        self._set_kind(_UPDATE, "update")
        self._assign("update", source=FromClause(target=table))
        return self

    def delete(self, table: str) -> Statement:
        """Make this a ``DELETE FROM table`` statement."""
        self._check_table(table, "delete")
        self._set_kind(_DELETE, "delete")
        self._assign("delete", source=FromClause(target=table))
        return self

    # ------------------------------------------------------------------
    # SELECT clauses
    # ------------------------------------------------------------------

    def distinct(self, distinct: bool = True) -> Statement:
        self._require("distinct", "distinct")
        self._assign("distinct", distinct=distinct)
        return self

    def from_(self, table: FragmentArg, alias: str | None = None) -> Statement:
        """Set the FROM clause to a table name or a derived table.

        Args:
            table: Table name, or a closure building the derived table.
            alias: Alias for the table.  For a closure, the closure's return
                value takes precedence.
        """
        self._require("from", "from_")
        self._assign("from_", source=self._source(table, alias, "from_"))
        return self

    def join(self, table: FragmentArg, on: FragmentArg | None = None, alias: str | None = None) -> Statement:
        """Add an ``INNER JOIN``."""
        return self._add_join("join", JoinType.INNER, table, on, alias)

    def inner_join(
        self, table: FragmentArg, on: FragmentArg | None = None, alias: str | None = None
    ) -> Statement:
        return self._add_join("inner_join", JoinType.INNER, table, on, alias)

    def left_join(
        self, table: FragmentArg, on: FragmentArg | None = None, alias: str | None = None
    ) -> Statement:
        return self._add_join("left_join", JoinType.LEFT, table, on, alias)

    def right_join(
        self, table: FragmentArg, on: FragmentArg | None = None, alias: str | None = None
    ) -> Statement:
        return self._add_join("right_join", JoinType.RIGHT, table, on, alias)

    def full_join(
        self, table: FragmentArg, on: FragmentArg | None = None, alias: str | None = None
    ) -> Statement:
        return self._add_join("full_join", JoinType.FULL, table, on, alias)

    def cross_join(self, table: FragmentArg, alias: str | None = None) -> Statement:
        return self._add_join("cross_join", JoinType.CROSS, table, None, alias)

    def add_join(
        self,
        join_type: str | JoinType,
        table: FragmentArg,
        on: FragmentArg | None = None,
        alias: str | None = None,
    ) -> Statement:
        """Add a join of any type.

        Args:
            join_type: A :class:`JoinType`, its keyword (``"LEFT JOIN"``) or
                short name (``"left"``).
            table: Table name or a closure building a derived table.
            on: Raw condition or a closure building a condition group.
            alias: Alias for a table name.
        """
        try:
            parsed = JoinType.parse(join_type)
        except KeyError as exc:
            raise InvalidArgumentError(
                f"Unknown join type {join_type!r}. "
                f"Expected one of {[t.value for t in JoinType]}.",
                method="add_join",
            ) from exc
        return self._add_join("add_join", parsed, table, on, alias)

    def group_by(self, *columns: str) -> Statement:
        """Replace the GROUP BY columns."""
        self._require("group_by", "group_by")
        self._assign("group_by", group_by=_flatten(columns))
        return self

    def add_group_by(self, *columns: str) -> Statement:
        self._require("group_by", "add_group_by")
        self._assign("add_group_by", group_by=[*self._parts.group_by, *_flatten(columns)])
        return self

    def order_by(
        self,
        column: str | Mapping[str, str | SortDirection],
        direction: str | SortDirection = SortDirection.ASC,
    ) -> Statement:
        """Replace the ORDER BY clause.

        Args:
            column: A column, or a mapping of column to direction which adds
                one entry per item in iteration order.
            direction: ``"ASC"`` or ``"DESC"`` (case-insensitive); ignored
                when ``column`` is a mapping.
        """
        return self._add_order("order_by", column, direction, reset=True)

    def add_order_by(
        self,
        column: str | Mapping[str, str | SortDirection],
        direction: str | SortDirection = SortDirection.ASC,
    ) -> Statement:
        return self._add_order("add_order_by", column, direction, reset=False)

    def limit(self, limit: int | None) -> Statement:
        """Set the row limit; ``None`` removes it."""
        self._require("limit", "limit")
        self._assign("limit", limit=limit)
        return self

    def offset(self, offset: int) -> Statement:
        self._require("offset", "offset")
        self._assign("offset", offset=offset)
        return self

    def union(self, query: Subquery) -> Statement:
        """Append a ``UNION`` branch built by ``query``."""
        return self._add_union("union", query, union_all=False)

    def union_all(self, query: Subquery) -> Statement:
        """Append a ``UNION ALL`` branch built by ``query``."""
        return self._add_union("union_all", query, union_all=True)

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self, *conditions: FragmentArg) -> Statement:
        """Replace the WHERE clause.

        Several conditions in one call are joined with ``AND``.  A closure
        builds a parenthesised condition group.
        """
        return self._add_conditions("where", "where", conditions, None, reset=True)

    def where_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("where", "where_not", conditions, None, negated=True, reset=True)

    def and_where(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("where", "and_where", conditions, Connector.AND)

    def and_where_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("where", "and_where_not", conditions, Connector.AND, negated=True)

    def or_where(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("where", "or_where", conditions, Connector.OR)

    def or_where_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("where", "or_where_not", conditions, Connector.OR, negated=True)

    def where_exists(self, query: Subquery) -> Statement:
        """Replace the WHERE clause with ``EXISTS (query)``."""
        return self._add_conditions("where", "where_exists", (query,), None, exists=True, reset=True)

    def where_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "where", "where_not_exists", (query,), None, negated=True, exists=True, reset=True
        )

    def and_where_exists(self, query: Subquery) -> Statement:
        return self._add_conditions("where", "and_where_exists", (query,), Connector.AND, exists=True)

    def and_where_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "where", "and_where_not_exists", (query,), Connector.AND, negated=True, exists=True
        )

    def or_where_exists(self, query: Subquery) -> Statement:
        return self._add_conditions("where", "or_where_exists", (query,), Connector.OR, exists=True)

    def or_where_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "where", "or_where_not_exists", (query,), Connector.OR, negated=True, exists=True
        )

    # ------------------------------------------------------------------
    # HAVING
    # ------------------------------------------------------------------

    def having(self, *conditions: FragmentArg) -> Statement:
        """Replace the HAVING clause.  Rendered only together with GROUP BY.

        A closure may build its group with either the ``where`` or the
        ``having`` family of methods.
        """
        return self._add_conditions("having", "having", conditions, None, reset=True)

    def having_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("having", "having_not", conditions, None, negated=True, reset=True)

    def and_having(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("having", "and_having", conditions, Connector.AND)

    def and_having_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("having", "and_having_not", conditions, Connector.AND, negated=True)

    def or_having(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("having", "or_having", conditions, Connector.OR)

    def or_having_not(self, *conditions: FragmentArg) -> Statement:
        return self._add_conditions("having", "or_having_not", conditions, Connector.OR, negated=True)

    def having_exists(self, query: Subquery) -> Statement:
        return self._add_conditions("having", "having_exists", (query,), None, exists=True, reset=True)

    def having_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "having", "having_not_exists", (query,), None, negated=True, exists=True, reset=True
        )

    def and_having_exists(self, query: Subquery) -> Statement:
        return self._add_conditions("having", "and_having_exists", (query,), Connector.AND, exists=True)

    def and_having_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "having", "and_having_not_exists", (query,), Connector.AND, negated=True, exists=True
        )

    def or_having_exists(self, query: Subquery) -> Statement:
        return self._add_conditions("having", "or_having_exists", (query,), Connector.OR, exists=True)

    def or_having_not_exists(self, query: Subquery) -> Statement:
        return self._add_conditions(
            "having", "or_having_not_exists", (query,), Connector.OR, negated=True, exists=True
        )

    # ------------------------------------------------------------------
    # INSERT / UPDATE values
    # ------------------------------------------------------------------

    def columns(self, *columns: str) -> Statement:
        """Replace the explicit INSERT column list."""
        self._require("columns", "columns")
        self._assign("columns", columns=_flatten(columns))
        return self

    def values(self, *values: Any) -> Statement:
        """Add INSERT / UPDATE values.

        Accepted forms:

        - one mapping of column to value, merged into the existing mapping
          (values may be closures building scalar subqueries);
        - positional values (or one list), paired with :meth:`columns`;
        - one closure building a SELECT, for ``INSERT ... SELECT``.
        """
        self._require("values", "values")
        if len(values) == 1 and isinstance(values[0], Mapping):
            return self._merge_values("values", values[0])
        if len(values) == 1 and callable(values[0]):
            if self._parts.kind not in (None, _INSERT):
                raise StatementKindError("values", self._parts.kind.value, [_INSERT.value])
            query = self._subquery(values[0], "values", embed=False)
            self._assign("values", values=query)
            return self

        if self._parts.kind is _UPDATE:
            raise InvalidArgumentError(
                "UPDATE values must be a mapping of column to value.", method="values"
            )
        current = self._parts.values
        if current is not None and not isinstance(current, list):
            raise InvalidArgumentError(
                "Cannot mix positional values with a column mapping or sub-select.",
                method="values",
            )
        self._assign("values", values=[*(current or []), *_flatten(values)])
        return self

    def set(self, values: Mapping[str, Any]) -> Statement:
        """Add ``column=value`` assignments to an UPDATE."""
        self._require("values", "set")
        if self._parts.kind is _INSERT:
            raise StatementKindError("set", _INSERT.value, [_UPDATE.value])
        if not isinstance(values, Mapping):
            raise InvalidArgumentError(
                f"'set' expects a mapping of column to value, got {type(values).__name__}.",
                method="set",
            )
        return self._merge_values("set", values)

    # ------------------------------------------------------------------
    # WITH
    # ------------------------------------------------------------------

    def with_(self, name: str, query: Subquery, columns: list[str] | None = None) -> Statement:
        """Register a CTE named ``name`` built by ``query``.

        The name is registered before ``query`` runs, so the body may refer
        to it (e.g. in a UNION branch) for recursive CTEs.
        """
        return self._add_cte("with_", name, query, columns, recursive=False)

    def with_recursive(self, name: str, query: Subquery, columns: list[str] | None = None) -> Statement:
        """Register a recursive CTE; dialects that need it emit ``WITH RECURSIVE``."""
        return self._add_cte("with_recursive", name, query, columns, recursive=True)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, dialect: str | DialectProfile | SQLCompiler | None = None) -> str:
        """Render the statement to SQL.

        Args:
            dialect: A registered target name, a :class:`DialectProfile`, or
                an :class:`SQLCompiler` instance.  Defaults to this
                statement's profile.

        Returns:
            The SQL text.

        Raises:
            CompilationError: For an unknown dialect name, or a statement
                that cannot be rendered (e.g. an INSERT without values).
        """
        return StatementRenderer(self._compiler(dialect)).render(self)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        kind = self._parts.kind.value if self._parts.kind else None
        return f"<Statement kind={kind!r} alias={self._parts.alias!r}>"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _compiler(self, dialect: str | DialectProfile | SQLCompiler | None) -> SQLCompiler:
        if dialect is None:
            return self._profile.create_compiler()
        if isinstance(dialect, SQLCompiler):
            return dialect
        if isinstance(dialect, DialectProfile):
            return dialect.create_compiler()
        return CompilerFactory.create(dialect, recursive_keyword=self._profile.recursive_keyword)

    def _embed(self, is_subquery: bool, alias: str | None) -> None:
        """Mark this statement as owned by a parent."""
        self._parts.is_subquery = is_subquery
        self._parts.alias = alias

    def _assign(self, method: str, **fields: Any) -> None:
        try:
            for name, value in fields.items():
                setattr(self._parts, name, value)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid argument to '{method}': {exc}", method=method) from exc

    def _model(self, model: type[BaseModel], method: str, **fields: Any) -> Any:
        try:
            return model(**fields)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid argument to '{method}': {exc}", method=method) from exc

    def _require(self, clause: str, method: str) -> None:
        kind = self._parts.kind
        allowed = _ALLOWED_KINDS[clause]
        if kind is not None and kind not in allowed:
            raise StatementKindError(method, kind.value, sorted(k.value for k in allowed))

    def _set_kind(self, kind: StatementKind, method: str) -> None:
        current = self._parts.kind
        if current is kind:
            return
        if current is not None:
            raise StatementKindError(method, current.value)
        conflicting = [
            clause for clause in self._populated_clauses() if kind not in _ALLOWED_KINDS[clause]
        ]
        # UPDATE only takes the column mapping form of values.
        values = self._parts.values
        if kind is _UPDATE and values is not None and not isinstance(values, dict):
            conflicting.append("values")
        if conflicting:
            raise StatementKindError(method, kind.value, conflicting=conflicting)
        self._parts.kind = kind

    def _populated_clauses(self) -> list[str]:
        p = self._parts
        populated = {
            "select": bool(p.select),
            "distinct": p.distinct,
            "from": p.source is not None,
            "join": bool(p.joins),
            "where": bool(p.where),
            "group_by": bool(p.group_by),
            "having": bool(p.having),
            "order_by": bool(p.order_by),
            "limit": p.limit is not None,
            "offset": p.offset > 0,
            "union": bool(p.unions),
            "columns": p.columns is not None,
            "values": p.values is not None,
        }
        return [clause for clause, present in populated.items() if present]

    @staticmethod
    def _check_table(table: Any, method: str) -> None:
        if not isinstance(table, str) or not table.strip():
            raise MissingTableError(method, table)

    # -- closures --------------------------------------------------------

    def _invoke(self, closure: Any, child: Statement, method: str) -> str | None:
        if not callable(closure):
            raise InvalidArgumentError(
                f"'{method}' expects a string or a closure, got {type(closure).__name__}.",
                method=method,
            )
        alias = closure(child)
        # Chained lambdas return the child itself.
        if alias is child:
            return None
        if alias is not None and not isinstance(alias, str):
            raise SubqueryError(
                f"Closure passed to '{method}' returned {alias!r}; "
                "expected an alias string or None.",
                method=method,
            )
        return alias

    def _subquery(
        self, closure: Any, method: str, embed: bool, alias: str | None = None
    ) -> Statement:
        """Build a nested SELECT from ``closure``."""
        child = Statement(profile=self._profile)
        returned = self._invoke(closure, child, method)
        if child.kind is not _SELECT:
            raise SubqueryError(
                f"Closure passed to '{method}' must build a SELECT statement.",
                method=method,
            )
        child._embed(is_subquery=embed, alias=returned or alias)
        return child

    def _condition_group(self, closure: Any, method: str, clause: str = "where") -> Statement:
        """Build a nested condition group from ``closure``.

        The child must hold one WHERE group and nothing else.  Inside a
        HAVING position the group may be built with the ``having`` family
        instead; it is moved to the child's WHERE group, which is what a
        kind-less statement renders.
        """
        child = Statement(profile=self._profile)
        returned = self._invoke(closure, child, method)
        parts = child.parts
        if clause == "having" and parts.having and not parts.where:
            parts.where, parts.having = parts.having, []
        if child.kind is not None or parts.ctes or child._populated_clauses() != ["where"]:
            families = "where / and_where / or_where"
            if clause == "having":
                families += " or having / and_having / or_having"
            raise SubqueryError(
                f"Closure passed to '{method}' must add conditions ({families} ...) "
                "and nothing else.",
                method=method,
            )
        child._embed(is_subquery=False, alias=returned)
        return child

    def _column(self, value: Any, method: str) -> str | Statement:
        if isinstance(value, str):
            return value
        return self._subquery(value, method, embed=True)

    def _condition(self, value: Any, method: str, clause: str = "where") -> str | Statement:
        if isinstance(value, str):
            return value
        return self._condition_group(value, method, clause)

    def _source(self, table: Any, alias: str | None, method: str) -> FromClause:
        if isinstance(table, str):
            return self._model(FromClause, method, target=table, alias=alias)
        return FromClause(target=self._subquery(table, method, embed=True, alias=alias))

    # -- clause builders -------------------------------------------------

    def _add_join(
        self,
        method: str,
        join_type: JoinType,
        table: Any,
        on: Any,
        alias: str | None,
    ) -> Statement:
        self._require("join", method)
        if join_type is JoinType.CROSS and on is not None:
            raise InvalidArgumentError("A CROSS JOIN takes no ON condition.", method=method)
        source = self._source(table, alias, method)
        on_fragment = None if on is None else self._condition(on, method)
        join = self._model(
            JoinClause,
            method,
            type=join_type,
            target=source.target,
            alias=source.alias,
            on=on_fragment,
        )
        self._assign(method, joins=[*self._parts.joins, join])
        return self

    def _add_conditions(
        self,
        clause: str,
        method: str,
        conditions: tuple[Any, ...],
        connector: Connector | None,
        negated: bool = False,
        exists: bool = False,
        reset: bool = False,
    ) -> Statement:
        """Append (or, with ``reset``, replace) WHERE / HAVING fragments.

        The first fragment of an empty group never carries a connector.
        Further fragments use ``connector``, or AND for the replacing form.
        """
        self._require(clause, method)
        if not conditions:
            raise InvalidArgumentError(f"'{method}' needs at least one condition.", method=method)
        group: list[Condition] = [] if reset else list(getattr(self._parts, clause))
        for item in conditions:
            if exists:
                fragment = self._subquery(item, method, embed=False)
            else:
                fragment = self._condition(item, method, clause)
            group.append(
                self._model(
                    Condition,
                    method,
                    fragment=fragment,
                    connector=(connector or Connector.AND) if group else None,
                    negated=negated,
                    exists=exists,
                )
            )
        self._assign(method, **{clause: group})
        return self

    def _add_order(
        self,
        method: str,
        column: Any,
        direction: str | SortDirection,
        reset: bool,
    ) -> Statement:
        self._require("order_by", method)
        pairs = list(column.items()) if isinstance(column, Mapping) else [(column, direction)]
        items: list[OrderByItem] = [] if reset else list(self._parts.order_by)
        for col, dir_ in pairs:
            items.append(
                self._model(
                    OrderByItem, method, column=col, direction=self._direction(dir_, method)
                )
            )
        self._assign(method, order_by=items)
        return self

    @staticmethod
    def _direction(direction: str | SortDirection, method: str) -> SortDirection:
        if isinstance(direction, SortDirection):
            return direction
        try:
            return SortDirection(str(direction).strip().upper())
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Sort direction must be ASC or DESC, got {direction!r}.", method=method
            ) from exc

    def _merge_values(self, method: str, values: Mapping[Any, Any]) -> Statement:
        current = self._parts.values
        if current is not None and not isinstance(current, dict):
            raise InvalidArgumentError(
                "Cannot mix a column mapping with positional values or a sub-select.",
                method=method,
            )
        merged = dict(current or {})
        for column, value in values.items():
            if not isinstance(column, str):
                raise InvalidArgumentError(
                    f"Column names must be strings, got {column!r}.", method=method
                )
            merged[column] = self._subquery(value, method, embed=False) if callable(value) else value
        self._assign(method, values=merged)
        return self

    def _add_union(self, method: str, query: Subquery, union_all: bool) -> Statement:
        self._require("union", method)
        branch = self._subquery(query, method, embed=False)
        union = UnionClause(query=branch, union_all=union_all)
        self._assign(method, unions=[*self._parts.unions, union])
        return self

    def _add_cte(
        self,
        method: str,
        name: str,
        query: Subquery,
        columns: list[str] | None,
        recursive: bool,
    ) -> Statement:
        self._require("with", method)
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError(f"CTE name must be a non-empty string, got {name!r}.", method=method)
        if name in self._parts.ctes:
            raise InvalidArgumentError(f"CTE '{name}' is already defined.", method=method)
        child = Statement(profile=self._profile)
        cte = self._model(
            CTEClause,
            method,
            name=name,
            query=child,
            columns=list(columns) if columns is not None else None,
            recursive=recursive,
        )
        # The entry exists before the body is built so recursive references resolve.
        self._parts.ctes[name] = cte
        try:
            self._invoke(query, child, method)
            if child.kind is not _SELECT:
                raise SubqueryError(
                    f"Closure passed to '{method}' must build a SELECT statement.",
                    method=method,
                )
        except Exception:
            del self._parts.ctes[name]
            raise
        return self


# Resolve the forward reference to Statement in the clause models.
rebuild_models(Statement=Statement)
