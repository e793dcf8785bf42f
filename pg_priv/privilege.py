import logging
import types
from typing import FrozenSet, Iterable, List, Optional, Union

from .acl_utils import match_acl_item, split_acl_array
from .quoting import quote_ident


log = logging.getLogger(__name__)


PRIVILEGE_LABELS = types.MappingProxyType({
    "r": "SELECT",
    "w": "UPDATE",
    "a": "INSERT",
    "d": "DELETE",
    "D": "TRUNCATE",
    "x": "REFERENCE",
    "t": "TRIGGER",
    "X": "EXECUTE",
    "U": "USAGE",
    "C": "CREATE",
    "c": "CONNECT",
    "T": "TEMPORARY",
})

PRIVILEGE_CODES = types.MappingProxyType({
    **{label: code for code, label in PRIVILEGE_LABELS.items()},
    # Known aliases
    "TEMP": "T",
})

PUBLIC = "public"


def resolve_privilege_code(token: str) -> Optional[str]:
    """
    Returns the privilege code for a code ("r") or a label ("select", "SELECT").
    Single characters are taken to be codes and are not validated.
    """
    if len(token) == 1:
        return token
    return PRIVILEGE_CODES.get(token.upper())


class Privilege:
    """
    Privileges granted to one role (grantee) by another role (grantor),
    as found in a single ACL entry.

    ``privs`` is the string of privilege codes, such as "arwdxt".
    If you are reading ACLs from PostgreSQL you probably want parse_acl()
    which works this out for you.
    """

    def __init__(self, role: str, by: str, privs: str = ""):
        self._role = role
        self._by = by
        self._privs = privs or ""
        self._parsed = frozenset(self._privs)

    @property
    def role(self) -> str:
        """
        The grantee.
        """
        return self._role

    @property
    def by(self) -> str:
        """
        The grantor.
        """
        return self._by

    @property
    def privs(self) -> str:
        return self._privs

    @property
    def parsed(self) -> FrozenSet[str]:
        return self._parsed

    @property
    def key(self) -> str:
        return f"{self.__class__.__name__}({self._role}={self._privs}/{self._by})"

    def _as_tuple(self):
        return self._role, self._by, self._privs

    def __hash__(self):
        return hash(self._as_tuple())

    def __eq__(self, other):
        return isinstance(other, Privilege) and self._as_tuple() == other._as_tuple()

    def __repr__(self):
        return f"<{self.key}>"

    def labels(self) -> List[str]:
        """
        Labels of the granted privileges, e.g. ["SELECT", "UPDATE"].
        Codes which have no label are left out.
        """
        return [label for code, label in PRIVILEGE_LABELS.items() if code in self._parsed]

    def can(self, *privileges: str) -> bool:
        """
        Returns True if all of the requested privileges are granted.
        Each privilege can be a code ("w") or a label ("UPDATE", "update").
        """
        if not self._parsed:
            return False
        for token in privileges:
            code = resolve_privilege_code(token)
            if code is None or code not in self._parsed:
                return False
        return True

    def can_select(self) -> bool:
        return self.can("r")

    def can_read(self) -> bool:
        return self.can("r")

    def can_update(self) -> bool:
        return self.can("w")

    def can_write(self) -> bool:
        return self.can("w")

    def can_insert(self) -> bool:
        return self.can("a")

    def can_append(self) -> bool:
        return self.can("a")

    def can_delete(self) -> bool:
        return self.can("d")

    def can_reference(self) -> bool:
        return self.can("x")

    def can_trigger(self) -> bool:
        return self.can("t")

    def can_execute(self) -> bool:
        return self.can("X")

    def can_usage(self) -> bool:
        return self.can("U")

    def can_create(self) -> bool:
        return self.can("C")

    def can_connect(self) -> bool:
        return self.can("c")

    def can_temporary(self) -> bool:
        return self.can("T")

    def can_temp(self) -> bool:
        return self.can("T")


def parse_acl(acl: Union[None, str, Iterable[str]], quote: bool = False) -> List[Privilege]:
    """
    Parses an ACL, either as a list of entries or as the array literal
    returned by the database ("{alice=arwdxt/bob,=r/bob}"), into a list of
    Privilege objects in the order of the entries.

    Pass quote=True to have role names quoted as identifiers, the way
    PostgreSQL's quote_ident() does it.

    Entries that cannot be parsed are skipped.
    See https://www.postgresql.org/docs/current/sql-grant.html#SQL-GRANT-NOTES
    """
    privileges = []
    previous_privs = ""

    for entry in split_acl_array(acl):
        item = match_acl_item(entry)
        if item is None:
            log.debug(f"Skipping unrecognised ACL entry {entry!r}")
            continue

        # "*" on its own means the same privileges as the previous entry
        if item.privs != "*":
            previous_privs = item.privs

        role = item.grantee or PUBLIC
        by = item.grantor
        if quote:
            role = quote_ident(role)
            by = quote_ident(by)

        privileges.append(Privilege(role=role, by=by, privs=previous_privs))

    return privileges
