"""
Core data models and shared utilities.
"""

from vidshare.core.models import (
    Account,
    AccountRole,
    Comment,
    Video,
)
from vidshare.core.utils import generate_id, utc_now

__all__ = [
    "Account",
    "AccountRole",
    "Comment",
    "Video",
    "generate_id",
    "utc_now",
]
