"""chainQL schema types: clause models and dialect configuration."""
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
)
from chainql.schema.dialect import DialectProfile, DialectProfileBuilder

__all__ = [
    "CTEClause",
    "Condition",
    "Connector",
    "DialectProfile",
    "DialectProfileBuilder",
    "FromClause",
    "JoinClause",
    "JoinType",
    "OrderByItem",
    "SortDirection",
    "StatementKind",
    "StatementParts",
    "UnionClause",
]
