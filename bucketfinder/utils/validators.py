"""
Input validation utilities.
"""

import re


BUCKET_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9.-]*[a-z0-9]$")


def is_valid_bucket_name(name: str) -> bool:
    """
    Check if a string is a usable bucket name.

    Names are 3-63 characters of lowercase letters, digits, dots and
    hyphens, and may not start or end with a dot or hyphen.
    """
    if not isinstance(name, str) or not 3 <= len(name) <= 63:
        return False
    return bool(BUCKET_NAME_PATTERN.match(name))


def parse_seed_keywords(raw: str) -> list[str]:
    """
    Split a keyword argument into seed keywords.

    Examples:
        "acme" -> ["acme"]
        "acme, Example.com" -> ["acme", "example.com"]
        "acme widgets" -> ["acme", "widgets"]
    """
    if not raw:
        return []

    parts = raw.split(",") if "," in raw else raw.split()
    seeds = []
    for part in parts:
        part = part.strip().lower()
        if part:
            seeds.append(part)
    return seeds
