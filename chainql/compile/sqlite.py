"""SQLite dialect compiler."""
from __future__ import annotations

from chainql.compile.standard import StandardCompiler


class SQLiteCompiler(StandardCompiler):
    """Compiles statements to SQLite-flavoured SQL.

    Note: SQLite only accepts ``OFFSET`` as part of a ``LIMIT`` clause.  An
    offset without a limit is rendered with ``LIMIT -1``, which SQLite reads
    as "no upper bound".
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def pagination(self, limit: int | None, offset: int) -> str:
        if limit is None and offset > 0:
            return f"LIMIT -1 OFFSET {offset}"
        return super().pagination(limit, offset)
