from .acl_utils import AclItem, match_acl_item, split_acl_array
from .privilege import PRIVILEGE_CODES, PRIVILEGE_LABELS, Privilege, parse_acl, resolve_privilege_code
from .quoting import RESERVED_KEYWORDS, quote_ident

__version__ = "0.10.0"
