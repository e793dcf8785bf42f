import collections
import logging
from typing import List, Optional

from .connection import Connection
from .privilege import parse_acl


log = logging.getLogger(__name__)


AclEntry = collections.namedtuple("AclEntry", field_names=["kind", "name", "privileges"])


class AclCatalog:
    """
    Reads ACLs of database objects from the system catalogs of the
    database the connection is connected to.

    Objects which have never had privileges granted or revoked have
    a NULL ACL and are returned with an empty list of privileges,
    which means the built-in default privileges apply.
    """

    KINDS = ("database", "schema", "relation", "function")

    # r: table, v: view, m: materialized view, S: sequence,
    # f: foreign table, p: partitioned table
    RELATION_KINDS = ("r", "v", "m", "S", "f", "p")

    def __init__(self, connection: Connection, quote: bool = False):
        self.connection = connection
        self.quote = quote

    def get(self, kind: str, **kwargs) -> List[AclEntry]:
        if kind not in self.KINDS:
            raise ValueError(f"Unsupported object kind {kind!r}, expected one of {', '.join(self.KINDS)}")
        return getattr(self, f"{kind}s")(**kwargs)

    def _entries(self, kind: str, raw_rows) -> List[AclEntry]:
        entries = []
        for raw in raw_rows:
            privileges = parse_acl(raw["acl"], quote=self.quote)
            log.debug(f"{kind} {raw['name']}: {len(privileges)} ACL entries")
            entries.append(AclEntry(kind, raw["name"], privileges))
        return entries

    def databases(self) -> List[AclEntry]:
        raw_rows = self.connection.execute("""
            SELECT datname AS name, datacl AS acl
            FROM pg_catalog.pg_database
            WHERE datname NOT LIKE 'template%%'
            ORDER BY datname
        """).get_all("name", "acl")
        return self._entries("database", raw_rows)

    def schemas(self) -> List[AclEntry]:
        raw_rows = self.connection.execute("""
            SELECT nspname AS name, nspacl AS acl
            FROM pg_catalog.pg_namespace
            WHERE nspname != 'information_schema'
            AND nspname NOT LIKE 'pg_%%'
            ORDER BY nspname
        """).get_all("name", "acl")
        return self._entries("schema", raw_rows)

    def relations(self, schema: Optional[str] = None) -> List[AclEntry]:
        query = """
            SELECT n.nspname || '.' || c.relname AS name, c.relacl AS acl
            FROM pg_catalog.pg_class c
            JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
            WHERE c.relkind = ANY(%s)
        """
        params = [list(self.RELATION_KINDS)]
        query, params = self._filter_schema(query, params, schema)
        raw_rows = self.connection.execute(
            query + " ORDER BY n.nspname, c.relname", *params,
        ).get_all("name", "acl")
        return self._entries("relation", raw_rows)

    def functions(self, schema: Optional[str] = None) -> List[AclEntry]:
        query = """
            SELECT n.nspname || '.' || p.proname
                || '(' || pg_catalog.pg_get_function_identity_arguments(p.oid) || ')' AS name,
            p.proacl AS acl
            FROM pg_catalog.pg_proc p
            JOIN pg_catalog.pg_namespace n ON n.oid = p.pronamespace
            WHERE TRUE
        """
        params = []
        query, params = self._filter_schema(query, params, schema)
        raw_rows = self.connection.execute(
            query + " ORDER BY n.nspname, p.proname", *params,
        ).get_all("name", "acl")
        return self._entries("function", raw_rows)

    def _filter_schema(self, query: str, params: list, schema: Optional[str]):
        if schema:
            return query + " AND n.nspname = %s", params + [schema]
        return (
            query + " AND n.nspname != 'information_schema' AND n.nspname NOT LIKE 'pg_%%'",
            params,
        )
