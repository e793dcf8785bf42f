import re

# Keywords listed as RESERVED_KEYWORD in src/include/parser/kwlist.h
RESERVED_KEYWORDS = frozenset({
    "all", "analyse", "analyze", "and", "any", "array", "as", "asc",
    "asymmetric", "both", "case", "cast", "check", "collate", "column",
    "constraint", "create", "current_catalog", "current_date",
    "current_role", "current_time", "current_timestamp", "current_user",
    "default", "deferrable", "desc", "distinct", "do", "else", "end",
    "except", "false", "fetch", "for", "foreign", "from", "grant", "group",
    "having", "in", "initially", "intersect", "into", "leading", "limit",
    "localtime", "localtimestamp", "new", "not", "null", "off", "offset",
    "old", "on", "only", "or", "order", "placing", "primary", "references",
    "returning", "select", "session_user", "some", "symmetric", "table",
    "then", "to", "trailing", "true", "union", "unique", "user", "using",
    "variadic", "when", "where", "window", "with",
})

_bare_ident_regex = re.compile(r"[_a-z][_a-z0-9]*")


def is_reserved(name: str) -> bool:
    return name in RESERVED_KEYWORDS


def quote_ident(name: str) -> str:
    """
    Quotes ``name`` the way PostgreSQL's ``quote_ident()`` does.

    Names that start with a lowercase letter or underscore, contain only
    lowercase letters, digits and underscores, and are not reserved keywords
    are returned as they are. Anything else is wrapped in double quotes,
    with embedded double quotes doubled.
    """
    if _bare_ident_regex.fullmatch(name) and not is_reserved(name):
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'
