import logging
from unittest import mock

import pytest

from pg_priv.catalog import AclCatalog, AclEntry
from pg_priv.connection import Connection, Result, get_connection
from pg_priv.privilege import Privilege


def mock_connection(*rows):
    connection = mock.Mock()
    connection.execute.return_value.get_all.return_value = [
        {"name": name, "acl": acl} for name, acl in rows
    ]
    return connection


def test_databases():
    connection = mock_connection(
        ("postgres", None),
        ("sales", "{=Tc/postgres,postgres=CTc/postgres,reporting=c/postgres}"),
    )
    catalog = AclCatalog(connection)
    postgres, sales = catalog.databases()

    assert postgres == AclEntry("database", "postgres", [])
    assert sales.kind == "database"
    assert [p.role for p in sales.privileges] == ["public", "postgres", "reporting"]
    assert sales.privileges[2].can_connect()
    assert not sales.privileges[2].can_create()

    query, = connection.execute.call_args[0]
    assert "pg_database" in query
    connection.execute.return_value.get_all.assert_called_once_with("name", "acl")


def test_schemas_with_quote():
    connection = mock_connection(("public", '{pg_database_owner=UC/pg_database_owner,=U/pg_database_owner}'))
    entry, = AclCatalog(connection, quote=True).schemas()
    assert entry.privileges[1] == Privilege("public", "pg_database_owner", "U")


def test_relations_filtered_by_schema():
    connection = mock_connection(("app.users", ["app=arwdDxt/app", "reader=r/app"]))
    entry, = AclCatalog(connection).relations(schema="app")

    assert entry.name == "app.users"
    assert entry.privileges[1].labels() == ["SELECT"]

    query, kinds, schema = connection.execute.call_args[0]
    assert "pg_class" in query
    assert "n.nspname = %s" in query
    assert kinds == list(AclCatalog.RELATION_KINDS)
    assert schema == "app"


def test_functions_without_schema_skip_system_schemas():
    connection = mock_connection(("app.add(a integer, b integer)", "{=X/app,app=X/app}"))
    entry, = AclCatalog(connection).get("function")

    assert entry.kind == "function"
    assert all(p.can_execute() for p in entry.privileges)

    query, = connection.execute.call_args[0]
    assert "pg_proc" in query
    assert "NOT LIKE 'pg_%%'" in query


def test_get_unsupported_kind():
    with pytest.raises(ValueError):
        AclCatalog(mock.Mock()).get("sequence")


def test_get_connection_from_environment(monkeypatch):
    monkeypatch.setenv("TEST_PGPRIV_HOST", "db.example.com")
    monkeypatch.setenv("TEST_PGPRIV_DATABASE", "sales")
    monkeypatch.setenv("TEST_PGPRIV_USER", "auditor")
    monkeypatch.setenv("TEST_PGPRIV_PASSWORD", "secret")

    connection = get_connection(env_prefix="TEST_PGPRIV_")
    assert connection.host == "db.example.com"
    assert connection.database == "sales"
    assert connection.username == "auditor"


def test_connect_passes_parameters_and_keeps_password_out_of_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="pg_priv.connection")
    connection = Connection(host="localhost", username="auditor", password="two words", database="sales")
    with mock.patch("pg_priv.connection.psycopg2.connect") as connect:
        assert connection.connection is connect.return_value
    connect.assert_called_once_with(
        user="auditor", password="two words", port=5432, database="sales", host="localhost",
    )
    assert "two words" not in caplog.text


def test_format_query_without_database():
    assert Connection().format_query("SELECT 1").endswith("None: SELECT 1")


def test_connection_execute_logs_and_reraises(caplog):
    connection = Connection(host="localhost", username="auditor", password="", database="sales")
    cursor = mock.Mock()
    cursor.execute.side_effect = RuntimeError("boom")
    connection._connection = mock.Mock(**{"cursor.return_value": cursor})

    with pytest.raises(RuntimeError):
        connection.execute("SELECT 1")
    assert "Failed to execute query" in caplog.text


def test_result_get_all():
    cursor = mock.Mock(**{"fetchall.return_value": [("app", "{}")]})
    assert list(Result(cursor).get_all("name", "acl")) == [{"name": "app", "acl": "{}"}]
