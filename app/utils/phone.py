# app/utils/phone.py
from typing import Optional

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat


def normalize_phone(raw: Optional[str], default_region: str = "BR") -> Optional[str]:
    """
    E.164 form of a phone number (e.g. +5511987654321), or None when it
    cannot be parsed or is not a valid number. Numbers without a country
    code are read in `default_region`.
    """
    if not raw or not raw.strip():
        return None
    try:
        number = phonenumbers.parse(raw, default_region)
    except NumberParseException:
        return None
    if not phonenumbers.is_valid_number(number):
        return None
    return phonenumbers.format_number(number, PhoneNumberFormat.E164)
