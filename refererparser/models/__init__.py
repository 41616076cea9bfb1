"""Data models for referer classification."""

from refererparser.models.referers import (
    EmailReferer,
    InternalReferer,
    Medium,
    PaidReferer,
    Referer,
    RefererLookup,
    SearchReferer,
    SocialReferer,
    UnknownReferer,
)

__all__ = [
    "EmailReferer",
    "InternalReferer",
    "Medium",
    "PaidReferer",
    "Referer",
    "RefererLookup",
    "SearchReferer",
    "SocialReferer",
    "UnknownReferer",
]
