"""Standard ``LIMIT`` / ``OFFSET`` dialect compiler (PostgreSQL and friends)."""
from __future__ import annotations

from chainql.compile.base import SQLCompiler


class StandardCompiler(SQLCompiler):
    """Renders pagination as ``LIMIT n OFFSET m``.

    ``LIMIT`` and ``OFFSET`` are emitted independently, so either may appear
    alone.  PostgreSQL, DuckDB and H2 accept both forms.
    """

    @property
    def dialect_name(self) -> str:
        return "standard"

    def pagination(self, limit: int | None, offset: int) -> str:
        parts: list[str] = []
        if limit is not None:
            parts.append(f"LIMIT {limit}")
        if offset > 0:
            parts.append(f"OFFSET {offset}")
        return " ".join(parts)
