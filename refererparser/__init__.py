"""refererparser - Classify referer URLs by attribution medium."""

from refererparser.dataset import CorruptReferersError, load_referers, load_referers_json
from refererparser.models import (
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
from refererparser.parser import Parser

__version__ = "0.1.0"

__all__ = [
    "CorruptReferersError",
    "EmailReferer",
    "InternalReferer",
    "Medium",
    "PaidReferer",
    "Parser",
    "Referer",
    "RefererLookup",
    "SearchReferer",
    "SocialReferer",
    "UnknownReferer",
    "load_referers",
    "load_referers_json",
]
