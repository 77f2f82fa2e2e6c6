# storefront/repositories/utils.py
from storefront.core.errors import InvalidArgument

# SQLite INTEGER columns are signed 64-bit.
MAX_INT64 = 2**63 - 1


def is_positive_int(value) -> bool:
    """True for a non-bool int in 1..MAX_INT64."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_INT64


def require_positive_id(value, what: str = "user ID") -> int:
    """
    Return `value` as an int if it is a positive integer that fits a
    SQLite INTEGER.

    ASCII digit strings are accepted (path parameters arrive as text);
    bools, floats and everything else raise InvalidArgument.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdecimal():
            value = int(text)
    if not is_positive_int(value):
        raise InvalidArgument(f"Valid {what} is required")
    return value


def clean_text(value) -> str:
    """Trimmed string, or "" for None / non-string input."""
    if not isinstance(value, str):
        return ""
    return value.strip()
