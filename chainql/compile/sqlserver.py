"""Microsoft SQL Server dialect compiler."""
from __future__ import annotations

from chainql.compile.base import SQLCompiler
from chainql.errors import CompilationError


class SQLServerCompiler(SQLCompiler):
    """Renders pagination as ``OFFSET n ROWS FETCH NEXT m ROWS ONLY``.

    SQL Server has no ``LIMIT``.  Once a limit is set the ``OFFSET`` clause
    becomes mandatory, so ``OFFSET 0 ROWS`` is emitted when no offset was
    given.

    ``FETCH NEXT`` requires a positive row count, so ``limit(0)`` cannot be
    expressed and raises :class:`~chainql.errors.CompilationError`.

    SQL Server rejects ``WITH RECURSIVE``; recursive CTEs use plain ``WITH``.
    """

    supports_recursive_keyword = False

    @property
    def dialect_name(self) -> str:
        return "sqlserver"

    def pagination(self, limit: int | None, offset: int) -> str:
        if limit is None and offset <= 0:
            return ""
        if limit == 0:
            raise CompilationError(
                "SQL Server cannot FETCH NEXT 0 ROWS; the row count must be positive.",
                clause="LIMIT",
            )
        sql = f"OFFSET {offset} ROWS"
        if limit is not None:
            sql += f" FETCH NEXT {limit} ROWS ONLY"
        return sql
