"""chainQL compilation layer: Statement → SQL text."""
from chainql.compile.base import SQLCompiler
from chainql.compile.mysql import MySQLCompiler
from chainql.compile.registry import CompilerFactory
from chainql.compile.renderer import StatementRenderer
from chainql.compile.sqlite import SQLiteCompiler
from chainql.compile.sqlserver import SQLServerCompiler
from chainql.compile.standard import StandardCompiler

__all__ = [
    "CompilerFactory",
    "MySQLCompiler",
    "SQLCompiler",
    "SQLiteCompiler",
    "SQLServerCompiler",
    "StandardCompiler",
    "StatementRenderer",
]
