import logging
from typing import List

from aarghparse import cli

from .catalog import AclCatalog, AclEntry
from .connection import get_connection
from .privilege import Privilege, parse_acl


log = logging.getLogger(__name__)


def format_privilege(privilege: Privilege) -> str:
    return f"{privilege.by} granted to {privilege.role}: {', '.join(privilege.labels())}"


def format_acl_entry(entry: AclEntry) -> List[str]:
    lines = [f"{entry.kind.capitalize()} {entry.name}:"]
    if not entry.privileges:
        lines.append("    (default privileges)")
    lines.extend(f"    {format_privilege(p)}" for p in entry.privileges)
    return lines


@cli
def pg_priv_cli(parser, subcommand):

    parser.add_argument(
        "--env-prefix",
        default="PGPRIV_",
        help="Prefix for environment variables of the connection details",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
    )

    def configure_logging(args):
        logging.basicConfig(level=getattr(logging, args.log_level.upper()))

    @subcommand(args=[
        ["--kind", {"choices": AclCatalog.KINDS, "default": "relation", "help": "Kind of objects to report"}],
        ["--schema", {"help": "Only report relations and functions of this schema"}],
        ["--quote", {"action": "store_true", "help": "Quote role names as identifiers"}],
    ])
    def show(args):
        """
        Show who granted which privileges to whom on the objects of the database.
        """
        configure_logging(args)
        kwargs = {}
        if args.kind in ("relation", "function"):
            kwargs["schema"] = args.schema
        elif args.schema:
            log.warning(f"--schema is ignored for --kind {args.kind}")
        with get_connection(env_prefix=args.env_prefix) as connection:
            catalog = AclCatalog(connection, quote=args.quote)
            for entry in catalog.get(args.kind, **kwargs):
                print("\n".join(format_acl_entry(entry)))

    @subcommand(args=[
        ["acl", {"help": "ACL array literal, e.g. '{alice=arwdxt/bob,=r/bob}'"}],
        ["--quote", {"action": "store_true", "help": "Quote role names as identifiers"}],
    ])
    def decode(args):
        """
        Decode an ACL without connecting to the database.
        """
        configure_logging(args)
        for privilege in parse_acl(args.acl, quote=args.quote):
            print(format_privilege(privilege))


def main():
    pg_priv_cli.run()


if __name__ == "__main__":
    main()
