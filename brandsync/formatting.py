from __future__ import annotations

import re

from .schemas import FieldType

CURRENCY_SYMBOL = "$"

_NON_DIGIT_RE = re.compile(r"\D")
_NON_AMOUNT_RE = re.compile(r"[^0-9.]")
_THOUSANDS_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")


def format_phone(raw: str) -> str:
    digits = _NON_DIGIT_RE.sub("", raw or "")
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"


def format_currency(raw: str) -> str:
    """
    Normalize a typed amount to "$1,234.50".

    Only the first "." separates decimals, and only the segment right after
    it is kept. A trailing "." is preserved so typing can continue.

    Cents are always padded to two digits, so a second cent digit cannot be
    appended one keystroke at a time: "1.5" becomes "$1.50", and "$1.505"
    stays "$1.50". Amounts such as "1.05" have to be entered in one go.
    """
    stripped = _NON_AMOUNT_RE.sub("", raw or "")
    parts = stripped.split(".")
    whole = parts[0] or "0"
    decimals = ""
    if len(parts) > 1:
        cents = parts[1][:2]
        decimals = "." + cents.ljust(2, "0") if cents else "."
    return f"{CURRENCY_SYMBOL}{_THOUSANDS_RE.sub(',', whole)}{decimals}"


def format_field(raw: str, field_type: FieldType | str | None) -> str:
    """Apply the keystroke formatter for a field type; other types pass through."""
    if field_type == FieldType.TEL:
        return format_phone(raw)
    if field_type == FieldType.CURRENCY:
        return format_currency(raw)
    return raw
