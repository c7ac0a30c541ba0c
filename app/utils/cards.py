import re
from typing import Tuple

from app.core.exceptions import InvalidCardData

CARD_NUMBER_RE = re.compile(r"^\d{12,19}$")
EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/(\d{2}|\d{4})$")


def mask_card(number: str, expiry: str) -> Tuple[str, str]:
    """Validate raw card input and return (last four digits, expiry).

    The full number is dropped here and must not be stored or logged by callers.
    """
    digits = re.sub(r"[\s-]", "", number or "")
    if not CARD_NUMBER_RE.match(digits):
        raise InvalidCardData("Card number must contain 12 to 19 digits")

    expiry = (expiry or "").strip()
    if not EXPIRY_RE.match(expiry):
        raise InvalidCardData("Card expiry must be in MM/YY format")

    return digits[-4:], expiry
