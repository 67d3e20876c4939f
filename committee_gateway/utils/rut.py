"""RUT (Chilean national ID) helpers"""

import re

_RUT_FORMAT = re.compile(r"^[0-9]{1,2}\.[0-9]{3}\.[0-9]{3}-[0-9kK]$")


def clean_rut(value: str) -> str:
    """Keep only digits and the K check digit"""
    return re.sub(r"[^0-9kK]", "", value or "")


def normalize_rut(value: str) -> str:
    """Comparison key: '12.345.678-K' and '12345678k' normalize the same"""
    return clean_rut(value).lower()


def format_rut(value: str) -> str:
    """
    Format a RUT with thousands dots and dash.

    Example:
        "12345678k" -> "12.345.678-k"
    """
    cleaned = clean_rut(value)
    if len(cleaned) <= 1:
        return cleaned

    body, check_digit = re.sub(r"[^0-9]", "", cleaned[:-1]), cleaned[-1]
    if not body:
        return cleaned.lower()
    body = f"{int(body):,}".replace(",", ".")
    return f"{body}-{check_digit.lower()}"


def compute_check_digit(body: str) -> str:
    """Modulo 11 check digit for the numeric body of a RUT"""
    total = 0
    factor = 2
    for digit in reversed(body):
        total += int(digit) * factor
        factor = 2 if factor == 7 else factor + 1

    remainder = 11 - (total % 11)
    if remainder == 11:
        return "0"
    if remainder == 10:
        return "k"
    return str(remainder)


def is_valid_rut(value: str) -> bool:
    """Formatted as XX.XXX.XXX-D and the check digit matches"""
    if not value or not _RUT_FORMAT.match(value):
        return False
    cleaned = normalize_rut(value)
    return compute_check_digit(cleaned[:-1]) == cleaned[-1]
