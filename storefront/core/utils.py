"""
Shared utility functions for the storefront API.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

from slugify import slugify

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.

    Args:
        prefix: Optional prefix (e.g., "user", "order", "cat")

    Returns:
        A unique ID like "user_a1b2c3d4e5f6"
    """
    uid = uuid.uuid4().hex[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def is_valid_email(email: str) -> bool:
    """Loose shape check: something@something.something, no whitespace."""
    return bool(EMAIL_PATTERN.match(email))


def make_slug(name: str) -> str:
    """Lower-case, dash-separated slug for category names."""
    return slugify(name)
