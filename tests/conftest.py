"""Shared pytest fixtures for chainQL unit and integration tests."""
from __future__ import annotations

import pytest

from chainql import Statement
from chainql.schema.dialect import DialectProfile


@pytest.fixture()
def q() -> Statement:
    """A fresh statement with the default (standard) profile."""
    return Statement()


@pytest.fixture(scope="session")
def profile_standard() -> DialectProfile:
    return DialectProfile()


@pytest.fixture(scope="session")
def profile_sqlite() -> DialectProfile:
    return DialectProfile.builder("sqlite").build()


@pytest.fixture(scope="session")
def profile_mysql() -> DialectProfile:
    return DialectProfile.builder("mysql").build()


@pytest.fixture(scope="session")
def profile_sqlserver() -> DialectProfile:
    """SQL Server: OFFSET / FETCH pagination, no RECURSIVE keyword."""
    return DialectProfile.builder("sqlserver").build()


@pytest.fixture(scope="session")
def profile_pg_no_recursive() -> DialectProfile:
    return DialectProfile.builder("postgres").without_recursive_keyword().build()
