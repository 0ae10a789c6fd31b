"""Pydantic model for the DialectProfile that selects a compiler.

The DialectProfile is the configuration a caller hands to a statement (or to
``render()``) to pick the SQL dialect.  The core never chooses a dialect on
its own: the profile names a target registered with
:class:`~chainql.compile.registry.CompilerFactory`.

Create a profile directly or through the builder::

    from chainql import DialectProfile

    profile = DialectProfile(target="sqlserver")

    profile = (
        DialectProfile.builder("postgres")
        .without_recursive_keyword()
        .build()
    )
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from chainql.compile.base import SQLCompiler
from chainql.compile.registry import CompilerFactory
from chainql.errors import ProfileConfigError

#: Target used when no profile is given.
DEFAULT_TARGET = "standard"


class DialectProfile(BaseModel):
    """Selects the compiler used to render a statement.

    Attributes:
        target: Registered compiler name (``'standard'``, ``'postgres'``,
            ``'sqlite'``, ``'mysql'``, ``'sqlserver'`` / ``'mssql'``, or any
            custom registration).
        recursive_keyword: Emit ``WITH RECURSIVE`` for recursive CTEs on
            dialects that accept the keyword.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str = DEFAULT_TARGET
    recursive_keyword: bool = True

    @field_validator("target")
    @classmethod
    def _normalise_target(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _check_target_registered(self) -> DialectProfile:
        if not CompilerFactory.is_registered(self.target):
            registered = CompilerFactory.registered_targets()
            raise ProfileConfigError(
                f"Unknown dialect target '{self.target}'. "
                f"Registered targets: {registered}. Register a compiler with "
                "CompilerFactory.register() before building a profile for it.",
                target=self.target,
                registered=registered,
            )
        return self

    def create_compiler(self) -> SQLCompiler:
        """Instantiate the compiler this profile selects."""
        return CompilerFactory.create(self.target, recursive_keyword=self.recursive_keyword)

    @classmethod
    def builder(cls, target: str = DEFAULT_TARGET) -> DialectProfileBuilder:
        """Return a :class:`DialectProfileBuilder` for ``target``.

        Args:
            target: Registered compiler name.

        Returns:
            A fresh :class:`DialectProfileBuilder`.
        """
        return DialectProfileBuilder(target)


class DialectProfileBuilder:
    """Fluent builder for :class:`DialectProfile`.

    Always obtained via :meth:`DialectProfile.builder`.

    Example, SQL Server pagination::

        profile = DialectProfile.builder("sqlserver").build()
    """

    def __init__(self, target: str) -> None:
        self._target = target
        self._recursive_keyword = True

    def recursive_keyword(self, enabled: bool = True) -> DialectProfileBuilder:
        """Emit ``WITH RECURSIVE`` for CTEs registered with ``with_recursive``."""
        self._recursive_keyword = enabled
        return self

    def without_recursive_keyword(self) -> DialectProfileBuilder:
        """Always open CTE lists with plain ``WITH``."""
        return self.recursive_keyword(False)

    def build(self) -> DialectProfile:
        """Validate the configuration and return the :class:`DialectProfile`.

        Raises:
            ProfileConfigError: When the target is not a registered compiler.
        """
        return DialectProfile(
            target=self._target,
            recursive_keyword=self._recursive_keyword,
        )
