"""Shared test fixtures."""

import pytest

from pysqlbuilder.dialect import MSSQL, MYSQL, ORACLE, POSTGRES, SQLITE


@pytest.fixture
def mysql_dialect():
    return MYSQL


@pytest.fixture
def pg_dialect():
    return POSTGRES


@pytest.fixture
def sqlite_dialect():
    return SQLITE


@pytest.fixture
def mssql_dialect():
    return MSSQL


@pytest.fixture
def oracle_dialect():
    return ORACLE
