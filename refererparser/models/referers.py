"""Mediums, dataset entries and classification results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional


class Medium(Enum):
    """Coarse attribution category of a referer source."""

    UNKNOWN = "unknown"
    SEARCH = "search"
    INTERNAL = "internal"
    SOCIAL = "social"
    EMAIL = "email"
    PAID = "paid"

    @classmethod
    def from_string(cls, s: str) -> Optional["Medium"]:
        """Map a canonical lowercase name to a Medium.

        Matching is exact and case-sensitive. Unrecognized names return
        None rather than defaulting to UNKNOWN.
        """
        for medium in cls:
            if medium.value == s:
                return medium
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RefererLookup:
    """One known referer source, as stored in the dataset.

    Attributes:
        medium: Attribution category of the source
        source: Human-readable source name (e.g., "Google")
        parameters: Query parameter names holding the search term
    """

    medium: Medium
    source: str
    parameters: tuple[str, ...] = ()


@dataclass(frozen=True)
class Referer:
    """Base class for classification results."""

    medium: ClassVar[Medium]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {"medium": self.medium.value}


@dataclass(frozen=True)
class InternalReferer(Referer):
    """Referer from the current site."""

    medium: ClassVar[Medium] = Medium.INTERNAL


@dataclass(frozen=True)
class UnknownReferer(Referer):
    """Valid referer with no known source."""

    medium: ClassVar[Medium] = Medium.UNKNOWN


@dataclass(frozen=True)
class SearchReferer(Referer):
    """Referer from a search engine, with the extracted search term if any."""

    medium: ClassVar[Medium] = Medium.SEARCH

    source: str
    term: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"medium": self.medium.value, "source": self.source, "term": self.term}


@dataclass(frozen=True)
class SocialReferer(Referer):
    medium: ClassVar[Medium] = Medium.SOCIAL

    source: str

    def to_dict(self) -> dict[str, Any]:
        return {"medium": self.medium.value, "source": self.source}


@dataclass(frozen=True)
class EmailReferer(Referer):
    medium: ClassVar[Medium] = Medium.EMAIL

    source: str

    def to_dict(self) -> dict[str, Any]:
        return {"medium": self.medium.value, "source": self.source}


@dataclass(frozen=True)
class PaidReferer(Referer):
    medium: ClassVar[Medium] = Medium.PAID

    source: str

    def to_dict(self) -> dict[str, Any]:
        return {"medium": self.medium.value, "source": self.source}
