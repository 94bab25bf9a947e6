"""Request header parsing and validation."""

from __future__ import annotations

import re

from .models import InvalidHeader

# RFC 7230 token characters
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# Visible ASCII, space and horizontal tab
_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")


def parse_header(header: str) -> tuple[str, str]:
    """Parse a header string in the format "Name: Value".

    Only the first colon is significant; surrounding whitespace is trimmed
    from both name and value.

    Args:
        header: Raw header string.

    Returns:
        Tuple of (name, value).

    Raises:
        InvalidHeader: If the string contains no colon.
    """
    name, sep, value = header.partition(":")
    if not sep:
        raise InvalidHeader(header, reason="syntax")
    return name.strip(), value.strip()


def is_valid_name(name: str) -> bool:
    return bool(_TOKEN_RE.fullmatch(name))


def is_valid_value(value: str) -> bool:
    return bool(_VALUE_RE.fullmatch(value))


def validate_header(name: str, value: str) -> None:
    """Check that a header can be sent on the wire.

    Raises:
        InvalidHeader: If the name is not a token or the value holds
            control characters, line breaks or non-ASCII text.
    """
    if not is_valid_name(name):
        raise InvalidHeader(name, value, reason="name")
    if not is_valid_value(value):
        raise InvalidHeader(name, value, reason="value")
