"""Shared validation utilities"""

import re
import uuid
from datetime import time

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_hhmm(value: str) -> str:
    """
    Validate a 24-hour ``HH:MM`` time string.

    Args:
        value: Time string such as "09:30"

    Returns:
        The stripped time string

    Raises:
        ValueError: If the format is invalid
    """
    if not isinstance(value, str):
        raise ValueError("Time must be a string in HH:MM format")

    value = value.strip()
    if not HHMM_PATTERN.match(value):
        raise ValueError("Time must be in 24-hour HH:MM format")

    return value


def parse_hhmm(value: str) -> time:
    hours, minutes = validate_hhmm(value).split(":")
    return time(int(hours), int(minutes))


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"
