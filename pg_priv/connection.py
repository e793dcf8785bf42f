import logging
import os
import textwrap
from typing import Dict, Generator

import psycopg2


log = logging.getLogger(__name__)


class Connection:
    """
    Read-only access to one database.
    """

    def __init__(self, host=None, username=None, password=None, database=None, port=5432):
        self._connection = None
        self._connection_params = {
            'user': username,
            'password': password,
            'port': int(port),
            'database': database,
            'host': host,
        }

    def format_query(self, query: str):
        formatted = " ".join(line.strip() for line in textwrap.dedent(query).splitlines()).strip()
        return f"{self.database!s:>15}: {formatted}"

    @property
    def connection(self):
        if self._connection is None:
            log.debug(f"Connecting to {self.username}@{self.host}:{self._connection_params['port']}/{self.database}")
            self._connection = psycopg2.connect(**self._connection_params)
            # We only ever read the catalogs
            self._connection.autocommit = True
        return self._connection

    @property
    def database(self):
        return self._connection_params["database"]

    @property
    def username(self):
        return self._connection_params["user"]

    @property
    def host(self):
        return self._connection_params['host']

    def __repr__(self):
        return f"{self.__class__.__name__}({self.username}@{self.database})"

    def __enter__(self):
        # Not a transaction manager, only closes the connection on context exit.
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def execute(self, query, *rest) -> "Result":
        query = textwrap.dedent(query)
        cursor = self.connection.cursor()
        try:
            log.debug(self.format_query(query))
            if rest:
                cursor.execute(query, rest)
            else:
                cursor.execute(query)
        except Exception:
            log.warning(f"Failed to execute query (as {self.username!r}): {self.format_query(query)}")
            raise
        return Result(cursor)


class Result:
    def __init__(self, cursor):
        self.cursor = cursor

    def get_all(self, *columns) -> Generator[Dict, None, None]:
        if len(columns) == 1 and isinstance(columns[0], (list, tuple)):
            columns = columns[0]
        for row in self.cursor.fetchall():
            yield dict(zip(columns, row))


def get_connection(env_prefix: str = "PGPRIV_") -> Connection:
    """
    Creates a connection from environment variables:
    {env_prefix}HOST, PORT, DATABASE, USER and PASSWORD.
    """
    return Connection(
        host=os.environ.get(f"{env_prefix}HOST", "localhost"),
        port=os.environ.get(f"{env_prefix}PORT", "5432"),
        database=os.environ.get(f"{env_prefix}DATABASE", "postgres"),
        username=os.environ.get(f"{env_prefix}USER", ""),
        password=os.environ.get(f"{env_prefix}PASSWORD", ""),
    )
