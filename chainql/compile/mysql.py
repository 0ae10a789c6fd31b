"""MySQL dialect compiler."""
from __future__ import annotations

from chainql.compile.standard import StandardCompiler

#: Largest BIGINT UNSIGNED; the documented way to say "all remaining rows".
MYSQL_MAX_ROWS = 18446744073709551615


class MySQLCompiler(StandardCompiler):
    """Compiles statements to MySQL-flavoured SQL.

    Note: MySQL has no standalone ``OFFSET`` clause.  An offset without a
    limit is rendered with the maximum row count as its limit, as the MySQL
    manual recommends.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def pagination(self, limit: int | None, offset: int) -> str:
        if limit is None and offset > 0:
            return f"LIMIT {MYSQL_MAX_ROWS} OFFSET {offset}"
        return super().pagination(limit, offset)
