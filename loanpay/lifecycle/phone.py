"""
Kenyan MSISDN normalization.
"""
from __future__ import annotations

import re
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Return ``2547XXXXXXXX`` for a recognised number, else ``None``.

    >>> normalize_phone("0712 345 678")
    '254712345678'
    """
    if phone is None:
        return None
    digits = _NON_DIGITS.sub("", str(phone))
    if len(digits) == 9 and digits.startswith("7"):
        return "254" + digits
    if len(digits) == 10 and digits.startswith("07"):
        return "254" + digits[1:]
    if len(digits) == 12 and digits.startswith("254"):
        return digits
    return None
