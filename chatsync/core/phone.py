"""Phone numbers are secondary identity keys; every stored and queried phone goes through here."""
from __future__ import annotations

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Digits only (``+7 (900) 123-45-67`` -> ``79001234567``); None when nothing is left."""
    if not phone:
        return None
    digits = _NON_DIGITS.sub("", phone)
    return digits or None
