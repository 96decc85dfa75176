"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from doppik.domain.entities import CENT


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal with two fractional digits.

    Handles:
    - "123.45", "-123.45", "€123.45", "123,45 €"
    - "1,234.56" and the German "1.234,56"
    - "(123.45)" (negative in parentheses)
    - "" as zero (an empty side of a journal line)

    When both separators occur, the last one is the decimal separator. A
    lone comma followed by one or two digits is a decimal comma. Dots that
    each precede exactly three digits, as in "1.234" or "12.345.678", are
    German thousands separators. Amounts are never rounded: more than two
    fractional digits are rejected.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two fractional digits

    Raises:
        ValueError: If amount string cannot be parsed or has sub-cent digits
    """
    text = amount_str.strip()
    if not text:
        return Decimal("0.00")

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[$€£¥\s]", "", text)
    text = text.replace("EUR", "")

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if re.search(r",\d{1,2}$", text):
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
    elif re.fullmatch(r"[+-]?[1-9]\d{0,2}(\.\d{3})+", text):
        text = text.replace(".", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if amount != amount.quantize(CENT):
        raise ValueError(f"Amount '{amount_str}' has more than two decimal places")

    amount = amount.quantize(CENT)
    return -amount if is_negative else amount
