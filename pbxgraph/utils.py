import re
from typing import Any, Optional

# Characters Xcode leaves unquoted in a bare string
_BARE_STRING = re.compile(r"^[A-Za-z0-9_$./]+$")


def unquote(value: Optional[Any]) -> str:
    """
    Strip one pair of surrounding double quotes.

    Args:
        value: A wire value as stored in the graph, quoted or not.

    Returns:
        The value without its outer quotes, or an empty string for None.
    """
    if value is None:
        return ""
    text = str(value)
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def quote(value: str) -> str:
    return f'"{value}"'


def quote_if_needed(value: str) -> str:
    """
    Quote a string the way Xcode does: bare when it only holds identifier-like
    characters, quoted otherwise (including the empty string).
    """
    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        return value
    if _BARE_STRING.match(value):
        return value
    return quote(value.replace("\\", "\\\\").replace('"', '\\"'))


def same_value(left: Optional[Any], right: Optional[Any]) -> bool:
    # quote-tolerant comparison of two wire values
    return left is not None and right is not None and unquote(left) == unquote(right)
