"""
Pure-Python .env line parser.
Turns KEY=VALUE lines into (key, value) pairs without touching any environment.
"""


def clean_value(value: str | None) -> str | None:
    """Strip whitespace and one matching pair of surrounding quotes."""
    if value is None:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        value = value[1:-1]
    return value


def parse_line(line: str) -> tuple[str, str | None] | None:
    """Parse a single line. Returns None for blanks and comments."""
    if not line.strip() or line.strip().startswith('#'):
        return None
    key, sep, raw_value = line.partition('=')
    return key.strip(), clean_value(raw_value) if sep else None


def parse_env_lines(lines) -> list[tuple[str, str | None]]:
    """Parse KEY=VALUE lines, keeping file order and repeated keys."""
    pairs = []
    for line in lines:
        parsed = parse_line(line.rstrip('\r\n'))
        if parsed is None:
            continue
        key, value = parsed
        # Skip empty keys
        if not key:
            continue
        pairs.append((key, value))
    return pairs

