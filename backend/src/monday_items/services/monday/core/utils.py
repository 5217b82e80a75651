# Helpers shared by the column mapper and the relation aggregator
# Best-effort JSON decoding, text coercion, numeric sums

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


# Returned by try_parse_json when the payload is not JSON
UNPARSABLE = object()


# ============================================================================
# JSON PAYLOADS
# ============================================================================


def try_parse_json(raw: Any) -> Any:
    """
    Decode a serialized column payload.

    Monday returns ``value`` and ``settings_str`` as JSON-encoded strings, but
    the shape varies by column type and some columns carry plain text.
    Returns ``UNPARSABLE`` for non-strings and for strings that are not JSON,
    so callers can tell a parsed ``null`` from a failed parse.
    """
    if not isinstance(raw, str):
        return UNPARSABLE
    try:
        return json.loads(raw)
    except ValueError:
        return UNPARSABLE


def parse_json_object(raw: Any) -> Optional[dict[str, Any]]:
    """Decode ``raw`` and return it only if it is a JSON object."""
    parsed = try_parse_json(raw)
    if isinstance(parsed, dict):
        return parsed
    return None


def linked_pulse_ids(raw_value: Any) -> list[str]:
    """
    Extract ``linkedPulseIds[].linkedPulseId`` from a serialized relation value.

    Input: '{"linkedPulseIds":[{"linkedPulseId":42}]}'
    Output: ["42"]
    """
    obj = parse_json_object(raw_value)
    if obj is None:
        return []
    pulses = obj.get("linkedPulseIds")
    if not isinstance(pulses, list):
        return []
    ids = []
    for pulse in pulses:
        if not isinstance(pulse, dict):
            continue
        pulse_id = pulse.get("linkedPulseId")
        if pulse_id is None or str(pulse_id) == "":
            continue
        ids.append(str(pulse_id))
    return ids


# ============================================================================
# TEXT AND NUMBERS
# ============================================================================


def optional_str(value: Any) -> Optional[str]:
    """Coerce a raw scalar to ``str``, keeping ``None``."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


def is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


# Numeric literals as Monday's display strings spell them: plain decimals with
# optional exponent, or 0x / 0o / 0b integers. No digit separators.
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_RADIX_LITERAL = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


def to_decimal(text: Optional[str]) -> Optional[Decimal]:
    """
    Numeric coercion of a display string.

    Surrounding whitespace is ignored and a whitespace-only string counts as
    zero. Hex, octal and binary integer literals are accepted; underscores,
    ``NaN`` and ``Infinity`` are not. The empty string yields ``None``.

    Input: " 2.5 " -> Decimal("2.5"), "0x10" -> Decimal(16), "1_000" -> None
    """
    if text is None or text == "":
        return None
    stripped = text.strip()
    if stripped == "":
        return Decimal(0)
    if _RADIX_LITERAL.fullmatch(stripped):
        return Decimal(int(stripped, 0))
    if not _DECIMAL_LITERAL.fullmatch(stripped):
        return None
    try:
        return Decimal(stripped)
    except InvalidOperation:
        return None


def format_decimal(number: Decimal) -> str:
    """Render a sum without exponent or trailing zeros ("20", "2.5", "1000")."""
    if number == 0:
        return "0"
    return format(number.normalize(), "f")
