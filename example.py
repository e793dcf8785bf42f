import logging

from pg_priv.catalog import AclCatalog
from pg_priv.connection import get_connection


logging.basicConfig(level=logging.DEBUG)

with get_connection() as connection:
    catalog = AclCatalog(connection)
    for entry in catalog.relations():
        print(f"Table {entry.name}:")
        for priv in entry.privileges:
            print(f"    {priv.by} granted to {priv.role}: {', '.join(priv.labels())}")
            if priv.can("SELECT", "UPDATE"):
                print(f"    {priv.role} can read and write {entry.name}")
