import logging
import re
import xml.etree.ElementTree as ET
from re import Pattern
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_NUMBER_DIGITS = 6

NUMBER_RE: Pattern[str] = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
LENGTH_RE: Pattern[str] = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px)?\s*$")
FUNCIRI_RE: Pattern[str] = re.compile(r"^url\(\s*['\"]?#([^'\")]+)['\"]?\s*\)$")


def strip_namespace(tag: str) -> str:
    """Remove the ``{namespace}`` prefix from an element tag."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def num2str(num: int | float | bool, digit: int = DEFAULT_NUMBER_DIGITS) -> str:
    """Convert a number to a string, using the specified format for floats."""
    if isinstance(num, bool):
        return "true" if num else "false"
    if isinstance(num, int):
        return str(num)
    if isinstance(num, float):
        if num.is_integer():
            return str(int(num))
        # Format float with specified number of digits, and trim trailing zeros
        number = f"{num:.{digit}f}"
        return f"{number[0]}{number[1:].rstrip('0').rstrip('.')}"
    raise ValueError(f"Unsupported type: {type(num)}")


def seq2str(
    seq: Sequence[int | float | bool],
    sep: str = " ",
    digit: int = DEFAULT_NUMBER_DIGITS,
) -> str:
    """Convert a sequence of numbers to a string, using the specified format for floats."""
    return sep.join(num2str(n, digit) for n in seq)


def parse_numbers(value: Optional[str]) -> list[float]:
    """Parse a comma or whitespace separated list of numbers."""
    if not value:
        return []
    return [float(n) for n in NUMBER_RE.findall(value)]


def parse_length(value: Optional[str], default: Optional[float] = None) -> Optional[float]:
    """Parse a user-unit length such as ``"12"`` or ``"12px"``.

    Other units and percentages are not resolved; ``default`` is returned.
    """
    if value is None:
        return default
    match = LENGTH_RE.match(value)
    if match is None:
        logger.debug("Unsupported length %r, using %s", value, default)
        return default
    return float(match.group(1))


def parse_style(value: Optional[str]) -> dict[str, str]:
    """Parse a ``style`` attribute into a property dictionary."""
    styles: dict[str, str] = {}
    if not value:
        return styles
    for declaration in value.split(";"):
        if ":" not in declaration:
            continue
        key, _, item = declaration.partition(":")
        key = key.strip()
        if key:
            styles[key] = item.strip()
    return styles


def get_funciri(value: str) -> Optional[str]:
    """Return the id referenced by ``url(#id)``, or None."""
    match = FUNCIRI_RE.match(value.strip())
    return match.group(1) if match else None


def get_text(node: ET.Element) -> str:
    """Concatenated text content of a node, whitespace-normalized."""
    return " ".join("".join(node.itertext()).split())
