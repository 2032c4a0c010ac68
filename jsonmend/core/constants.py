"""
Common constants and mappings used across the jsonmend library.
"""

from enum import Enum


class Delimiter(Enum):
    """Kind of an open structure tracked on the delimiter stack."""

    OBJECT = "object"
    LIST = "list"


QUOTE = '"'
ESCAPE = "\\"
KEY_SEPARATOR = ":"
ITEM_SEPARATOR = ","
NULL_LITERAL = "null"

# Opening characters and the structure kind they start
OPENERS = {
    "{": Delimiter.OBJECT,
    "[": Delimiter.LIST,
}

# Closing characters and the structure kind they end
CLOSERS = {
    "}": Delimiter.OBJECT,
    "]": Delimiter.LIST,
}

# Closing character emitted when a truncated structure is balanced
CLOSING_TOKEN = {
    Delimiter.OBJECT: "}",
    Delimiter.LIST: "]",
}

# Raw control characters that are rewritten as two-character escapes
# inside strings; every other code point below FIRST_PRINTABLE is dropped.
CONTROL_ESCAPE_MAP = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

FIRST_PRINTABLE = 0x20

# A \u escape is followed by exactly four hex digits
UNICODE_ESCAPE = "u"
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
