"""
The best documentation on the ACL format is at
https://www.postgresql.org/docs/current/ddl-priv.html#PRIVILEGE-ABBREVS-TABLE
"""

import collections
import logging
import re
import shlex
from typing import Iterable, List, Optional, Union


log = logging.getLogger(__name__)

AclItem = collections.namedtuple("AclItem", field_names=["grantee", "privs", "grantor"])

# grantee=privs/grantor, where grantee may be empty (public) or carry
# the legacy "group " prefix.
_acl_item_regex = re.compile(r'^"?(?:(?:group\s+)?([^=]+))?=([^/]+)/(.*)')


def match_acl_item(entry: str) -> Optional[AclItem]:
    """
    Returns an AclItem for a single ACL entry such as "alice=arwdxt/bob",
    or None if the entry does not look like an ACL item.

    Grantee is returned as it appears in the entry, an empty string
    means the privileges are granted to public.
    """
    match = _acl_item_regex.match(entry)
    if match is None:
        return None
    grantee, privs, grantor = match.groups()
    return AclItem(grantee or "", privs, grantor)


def split_acl_array(value: Union[None, str, Iterable[str]]) -> List[str]:
    """
    Turns the value of an aclitem[] column into a list of entry strings.

    psycopg2 does not know the aclitem type so it returns the array literal,
    e.g. '{postgres=arwdDxt/postgres,"\\"Mixed Case\\"=r/postgres"}', as is.
    Values which have already been split are returned as a list.
    """
    if value is None:
        return []

    if not isinstance(value, str):
        return list(value)

    array_str = value.strip()
    if not (array_str.startswith("{") and array_str.endswith("}")):
        return [array_str] if array_str else []

    tokenizer = shlex.shlex(array_str[1:-1], posix=True)
    tokenizer.whitespace = ","
    tokenizer.whitespace_split = True
    tokenizer.commenters = ""
    tokenizer.quotes = '"'
    try:
        return [token for token in tokenizer if token]
    except ValueError as exc:
        # Unbalanced quote or dangling backslash
        log.debug(f"Cannot split ACL array {value!r}: {exc}")
        return []
