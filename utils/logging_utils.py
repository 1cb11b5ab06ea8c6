from typing import Any, Dict, Iterable


def mask_value(value: Any) -> Any:
    """Mask emails and long secrets before they reach a log line."""
    if not isinstance(value, str):
        return value
    if "@" in value:  # email
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def sanitize_payload(payload: Dict, allowed_keys: Iterable[str], masked_keys: Iterable[str] = ("email",)) -> Dict:
    """
    Return a copy of payload with only allowed keys.

    Values under masked_keys are passed through mask_value; passwords never
    appear unless explicitly allowed, and then only masked.
    """
    masked = set(masked_keys) | {"password", "current_password"}
    result = {}
    for key in allowed_keys:
        if key in payload:
            result[key] = mask_value(payload[key]) if key in masked else payload[key]
    return result
