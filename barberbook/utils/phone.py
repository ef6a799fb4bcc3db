# barberbook/utils/phone.py
"""Phone number normalization (US numbers, E.164)"""
import re

PHONE_PATTERN = re.compile(r"^\+?1?[-.\s]?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})$")


def normalize_phone_number(phone: str) -> str:
    """
    Normalize a US phone number to +1XXXXXXXXXX.

    Raises:
        ValueError: if the input is not a recognizable US number
    """
    phone = (phone or "").strip()
    if not PHONE_PATTERN.match(phone):
        raise ValueError("Please enter a valid phone number")

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    raise ValueError("Please enter a valid phone number")


def mask_phone(phone: str) -> str:
    """Mask a phone number for logs and admin previews: ***-***-7890"""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) < 4:
        return "***"
    return f"***-***-{digits[-4:]}"
