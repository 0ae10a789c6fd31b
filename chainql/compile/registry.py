"""Compiler registry (Open/Closed Principle).

``CompilerFactory``
    Central registry for :class:`~chainql.compile.base.SQLCompiler`
    implementations.  Register a new compiler once; ``Statement.render`` and
    ``DialectProfile`` look it up by name.

Usage::

    from chainql.compile.registry import CompilerFactory

    @CompilerFactory.register("oracle")
    class OracleCompiler(SQLCompiler):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from chainql.compile.base import SQLCompiler
from chainql.errors import CompilationError

logger = logging.getLogger(__name__)


class CompilerFactory:
    """Registry mapping dialect target names to :class:`SQLCompiler` classes.

    Callers register a compiler class once; the renderer creates instances
    on demand via :meth:`create`.  Names are case-insensitive.

    Example::

        @CompilerFactory.register("oracle")
        class OracleCompiler(SQLCompiler):
            ...

        compiler = CompilerFactory.create("oracle")
    """

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLCompiler]], type[SQLCompiler]]:
        """Decorator that registers a compiler class under ``name``.

        Args:
            name: The dialect target name (e.g. ``"sqlserver"``).

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls.register_class(name, compiler_cls)
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, compiler_cls: type[SQLCompiler]) -> None:
        """Register a compiler class without using the decorator form.

        Args:
            name: The dialect target name.
            compiler_cls: The :class:`SQLCompiler` subclass to register.
        """
        key = name.lower()
        cls._compilers[key] = compiler_cls
        logger.debug("Registered compiler %s as '%s'", compiler_cls.__name__, key)

    @classmethod
    def create(cls, name: str, recursive_keyword: bool = True) -> SQLCompiler:
        """Instantiate the compiler registered for ``name``.

        Args:
            name: The dialect target name.
            recursive_keyword: Passed through to the compiler constructor.

        Returns:
            A fresh :class:`SQLCompiler` instance.

        Raises:
            CompilationError: If no compiler is registered for ``name``.
        """
        compiler_cls = cls._compilers.get(name.lower())
        if compiler_cls is None:
            registered = cls.registered_targets()
            raise CompilationError(
                f"Unsupported dialect target: '{name}'. Registered targets: {registered}."
            )
        logger.debug("Creating %s for target '%s'", compiler_cls.__name__, name)
        return compiler_cls(recursive_keyword=recursive_keyword)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Return True when a compiler is registered for ``name``."""
        return name.lower() in cls._compilers

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect target names."""
        return sorted(cls._compilers)
