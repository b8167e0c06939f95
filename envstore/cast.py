"""
Best-effort typed interpretation of textual config values.

Each caster step is a (matches, convert) pair tried in order; the first
step whose predicate accepts the value wins. Anything no step claims is
returned as the original string.
"""
import json
import re
from decimal import Decimal

NUMERIC_PATTERN = re.compile(
    r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$', re.ASCII
)

# O:<len>:"<ClassName>":<count>:{...}
LEGACY_OBJECT_PATTERN = re.compile(r'^O:\d+:"[\w\\]+":\d+:\{.*\}$', re.DOTALL)

# Larger exponents fall back to float
MAX_EXACT_DIGITS = 4300


def is_numeric(value: str) -> bool:
    return bool(NUMERIC_PATTERN.match(value))


def to_number(value: str) -> int | float:
    """Integer when there is no decimal point, float otherwise."""
    text = value.strip()
    if '.' in text:
        return float(text)
    try:
        return int(text)
    except ValueError:
        # exponent form such as 1e3
        number = Decimal(text)
        if number == number.to_integral_value() and number.adjusted() < MAX_EXACT_DIGITS:
            return int(number)
        return float(text)


def parse_json_structure(value: str) -> dict | list | None:
    """Decode JSON text, keeping only non-empty objects and arrays."""
    try:
        result = json.loads(value)
    except (ValueError, RecursionError):
        return None
    if isinstance(result, (dict, list)) and result:
        return result
    return None


def is_legacy_serialized(value: str) -> bool:
    """
    Recognise the legacy single-object serialization format.

    These values are never decoded; they are kept as plain text.
    """
    return bool(LEGACY_OBJECT_PATTERN.match(value))


CASTERS = [
    (lambda v: v.lower() == 'null', lambda v: None),
    (lambda v: v.lower() == 'true', lambda v: True),
    (lambda v: v.lower() == 'false', lambda v: False),
    (is_numeric, to_number),
    (lambda v: parse_json_structure(v) is not None, parse_json_structure),
]


def cast_value(value):
    """Convert a raw value into None, bool, int, float, list, dict or str."""
    if not isinstance(value, str):
        return value
    for matches, convert in CASTERS:
        if matches(value):
            return convert(value)
    return value
