import email.errors
import re
from email.headerregistry import Address

_RE_WHITESPACE = re.compile(r"\s")


def is_valid_mailbox(addr_spec: str) -> bool:
    """Whether the text is a syntactically valid RFC 5322 `addr-spec`

    >>> is_valid_mailbox("user@localhost")
    True
    >>> is_valid_mailbox("well hello there")
    False
    >>> is_valid_mailbox("")
    False
    """
    if not addr_spec or _RE_WHITESPACE.search(addr_spec):
        return False
    try:
        address = Address(addr_spec=addr_spec)
    except (ValueError, email.errors.HeaderParseError):
        return False
    return bool(address.username) and bool(address.domain)
