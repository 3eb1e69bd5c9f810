from typing import Iterable, Optional, Tuple
from urllib.parse import quote_plus


def strip_trailing_dot(s: str) -> str:
    if s.endswith("."):
        return s[:-1]
    return s


def strip_suffix(s: str, suffix: str) -> str:
    if suffix and s.endswith(suffix):
        return s[:-len(suffix)]
    return s


def safe_float(value) -> Optional[float]:
    # Padded or digit-grouped strings are labels, not numbers
    if isinstance(value, str) and (value != value.strip() or "_" in value):
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def encode_ordered_form(fields: Iterable[Tuple[str, str]]) -> str:
    # The modem rejects logins whose form fields arrive in any other order.
    return "&".join(f"{quote_plus(name)}={quote_plus(value)}" for name, value in fields)
