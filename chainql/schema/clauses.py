"""Pydantic models for the clauses of a chainQL statement.

A :class:`~chainql.statement.Statement` keeps everything it has been told in
one :class:`StatementParts` instance.  Clause records (joins, conditions,
ordering, unions, CTEs) are small frozen models; any position that accepts a
closure holds either the raw opaque string or the nested ``Statement`` the
closure built.

Fragments are never parsed.  The models only check structure (types, enum
members, non-negative pagination), which is what lets the renderer walk a
statement without re-validating anything.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from chainql.statement import Statement


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class StatementKind(str, Enum):
    """The SQL verb a statement renders as."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class JoinType(str, Enum):
    """Join keywords, rendered verbatim."""

    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    FULL = "FULL JOIN"
    CROSS = "CROSS JOIN"

    @classmethod
    def parse(cls, value: str | JoinType) -> JoinType:
        """Accept a member, its keyword (``"LEFT JOIN"``) or short name (``"left"``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key.endswith(" JOIN"):
            key = key[: -len(" JOIN")].strip()
        if key == "JOIN":
            key = "INNER"
        return cls[key]


class Connector(str, Enum):
    """Boolean keyword joining two fragments of a WHERE / HAVING group."""

    AND = "AND"
    OR = "OR"


class SortDirection(str, Enum):
    """ORDER BY direction."""

    ASC = "ASC"
    DESC = "DESC"


#: Row counts for LIMIT / OFFSET; bools are rejected.
NonNegativeInt = Annotated[int, Field(ge=0, strict=True)]

#: Anything a closure-accepting position can hold once resolved.
Fragment = Union[str, "Statement"]


# ---------------------------------------------------------------------------
# Clause records
# ---------------------------------------------------------------------------


class _Clause(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)


class FromClause(_Clause):
    """The FROM target (or the table of an INSERT / UPDATE / DELETE).

    Attributes:
        target: Table name or derived-table statement.
        alias: Optional alias for a table name.  Derived tables carry their
            alias on the nested statement itself.
    """

    target: Fragment
    alias: str | None = None


class JoinClause(_Clause):
    """A single JOIN entry.

    Attributes:
        type: The join keyword.
        target: Table name or derived-table statement.
        alias: Optional alias for a table name.
        on: ON condition, either a raw fragment or a condition group.
    """

    type: JoinType = JoinType.INNER
    target: Fragment
    alias: str | None = None
    on: Fragment | None = None


class Condition(_Clause):
    """One entry of a WHERE / HAVING group.

    Attributes:
        fragment: Raw condition text, a condition group or an EXISTS query.
        connector: ``AND`` / ``OR``; ``None`` only for the first entry.
        negated: Prefix the fragment with ``NOT``.
        exists: Wrap the fragment as ``EXISTS (...)``.
    """

    fragment: Fragment
    connector: Connector | None = None
    negated: bool = False
    exists: bool = False


class OrderByItem(_Clause):
    """A single ORDER BY entry."""

    column: str
    direction: SortDirection = SortDirection.ASC


class UnionClause(_Clause):
    """A UNION / UNION ALL branch appended to a SELECT.

    Attributes:
        query: The right-hand statement.
        union_all: Emit ``UNION ALL`` instead of ``UNION``.
    """

    query: Statement
    union_all: bool = False


class CTEClause(_Clause):
    """A single CTE (``WITH name AS (...)``) definition.

    Attributes:
        name: CTE name referenced by the statement.
        query: The CTE body.
        columns: Optional explicit column list.
        recursive: If True, dialects that need it emit ``WITH RECURSIVE``.
    """

    name: str
    query: Statement
    columns: list[str] | None = None
    recursive: bool = False


# ---------------------------------------------------------------------------
# Statement parts
# ---------------------------------------------------------------------------


class StatementParts(BaseModel):
    """Every clause of one statement, in a single canonical shape.

    The owning ``Statement`` is the only writer.  Assignments are validated,
    so replacing a clause list or setting pagination re-checks the types.

    Attributes:
        kind: The SQL verb, ``None`` until a verb method is called.
        is_subquery: Render parenthesised (and aliased) inside a parent.
        alias: Alias captured from the closure that built this statement.
        distinct: Emit ``SELECT DISTINCT``.
        select: Select-list expressions.
        source: FROM target, or the table of INSERT / UPDATE / DELETE.
        joins: Join entries in declaration order.
        where: WHERE group.
        group_by: GROUP BY columns.
        having: HAVING group.
        order_by: ORDER BY entries.
        limit: Row limit; ``None`` when unset.
        offset: Rows to skip.
        columns: Explicit INSERT column list.
        values: Positional values, a column mapping, or an INSERT sub-select.
        unions: UNION branches.
        ctes: CTEs keyed by name, in registration order.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    kind: StatementKind | None = None
    is_subquery: bool = False
    alias: str | None = None
    distinct: bool = False
    select: list[Fragment] = Field(default_factory=list)
    source: FromClause | None = None
    joins: list[JoinClause] = Field(default_factory=list)
    where: list[Condition] = Field(default_factory=list)
    group_by: list[str] = Field(default_factory=list)
    having: list[Condition] = Field(default_factory=list)
    order_by: list[OrderByItem] = Field(default_factory=list)
    limit: NonNegativeInt | None = None
    offset: NonNegativeInt = 0
    columns: list[str] | None = None
    values: Union[list[Any], dict[str, Any], Statement, None] = None
    unions: list[UnionClause] = Field(default_factory=list)
    ctes: dict[str, CTEClause] = Field(default_factory=dict)


def is_statement(value: Any) -> bool:
    """Return True for a nested statement (anything carrying ``StatementParts``)."""
    return isinstance(getattr(value, "parts", None), StatementParts)


def rebuild_models(**namespace: Any) -> None:
    """Resolve the ``Statement`` forward reference in every clause model.

    Called once by :mod:`chainql.statement` after ``Statement`` is defined.
    """
    for model in (
        FromClause,
        JoinClause,
        Condition,
        OrderByItem,
        UnionClause,
        CTEClause,
        StatementParts,
    ):
        model.model_rebuild(_types_namespace=namespace)
