"""
Utility functions for the dental chatbot.
"""
from datetime import datetime, timezone
from typing import Optional
import re
import uuid


LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def generate_id() -> str:
    """Return a new opaque unique identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_leading_int(text: str) -> Optional[int]:
    """
    Parse the integer at the start of a user reply.

    Args:
        text: Raw user input, e.g. "30" or "30 tuổi"

    Returns:
        The parsed integer, or None if the text does not start with one
    """
    if not text:
        return None
    match = LEADING_INT_PATTERN.match(text)
    if not match:
        return None
    return int(match.group(1))


def format_vnd(amount: float) -> str:
    """
    Format a number with Vietnamese grouping (1.500.000; decimals after a comma).

    Args:
        amount: Amount to format

    Returns:
        Formatted amount without currency suffix
    """
    value = round(float(amount), 3)
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):.3f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    if fraction:
        return f"{sign}{grouped},{fraction}"
    return f"{sign}{grouped}"


def validate_image_extension(filename: str, allowed_extensions: list) -> bool:
    """
    Validate if an uploaded file name carries an allowed image extension.

    Args:
        filename: Original file name from the client
        allowed_extensions: Lower-case extensions including the dot

    Returns:
        True if the extension is allowed, False otherwise
    """
    if not filename:
        return False
    match = re.search(r"(\.[^.]+)$", filename.lower())
    return bool(match) and match.group(1) in allowed_extensions


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"
