"""Referer classification against a referers dataset.

Matching is exact with fallback. For a referer such as
"http://www.google.com/images/1?q=x" the dataset is probed with
path-major, host-minor candidates:

    www.google.com/images/1, google.com/images/1, com/images/1,
    www.google.com/images,   google.com/images,   com/images,
    www.google.com,          google.com,          com

and the first key present wins.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional, Union
from urllib.parse import SplitResult, unquote_plus, urlsplit

from refererparser.dataset import load_default_referers, load_referers_file, load_referers_json
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

logger = logging.getLogger(__name__)

VALID_SCHEMES = ("http", "https")

UriLike = Union[str, SplitResult]


def hosts_to_try(host: str) -> list[str]:
    """Split a hostname into lookup candidates, most specific first.

    For instance, hosts_to_try("www.google.com") == ["www.google.com", "google.com", "com"]
    """
    # Trailing dots of a fully qualified name add no label
    trimmed = host.rstrip(".")
    if not trimmed:
        return []
    labels = trimmed.split(".")
    return [".".join(labels[i:]) for i in range(len(labels))]


def paths_to_try(path: str) -> list[str]:
    """Split a path into lookup candidates: full path, first segment, no path.

    For instance, paths_to_try("/images/1/2/3") == ["/images/1/2/3", "/images", ""]
    """
    first_segment = next((segment for segment in path.split("/") if segment), None)
    if first_segment is None:
        return [""]
    return [path, "/" + first_segment, ""]


def extract_query_params(query: str) -> list[tuple[str, str]]:
    """Split a raw query string into decoded (key, value) pairs, in order."""
    params = []
    for piece in query.split("&"):
        # "=foo" has an empty key; no parameter name is ever empty
        key, _, value = piece.partition("=")
        params.append((unquote_plus(key), unquote_plus(value)))
    return params


def extract_search_term(query: str, parameters: Iterable[str]) -> Optional[str]:
    """Return the value of the first query parameter named in `parameters`.

    Args:
        query: Raw (still percent-encoded) query string
        parameters: Parameter names that carry the search term

    Returns:
        Decoded search term, or None if no parameter matches
    """
    names = set(parameters)
    for key, value in extract_query_params(query):
        if key in names:
            return value
    return None


def _split_uri(uri: UriLike) -> Optional[SplitResult]:
    if isinstance(uri, SplitResult):
        return uri
    if not uri:
        return None
    try:
        parts = urlsplit(uri)
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return None
    return parts


def _scheme_of(uri: UriLike, parts: SplitResult) -> str:
    """Scheme as written; urlsplit lowercases it."""
    if isinstance(uri, str):
        return uri.partition(":")[0]
    return parts.scheme


def _host_of(parts: SplitResult) -> str:
    """Host component of a split URI, case preserved, without userinfo or port."""
    hostinfo = parts.netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        return hostinfo.partition("]")[0] + "]"
    return hostinfo.partition(":")[0]


class Parser:
    """Classifies referer URLs using an immutable referers dataset.

    Usage:
        parser = Parser.from_default()
        parser.parse("https://www.google.com/search?q=shoes")
        # SearchReferer(source='Google', term='shoes')
    """

    def __init__(self, referers: Mapping[str, RefererLookup]) -> None:
        """Initialize the parser.

        Args:
            referers: Dataset built by refererparser.dataset
        """
        self._referers = referers

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "Parser":
        return cls(load_referers_json(raw))

    @classmethod
    def from_file(cls, path: Path) -> "Parser":
        return cls(load_referers_file(path))

    @classmethod
    def from_default(cls) -> "Parser":
        return cls(load_default_referers())

    @property
    def referers(self) -> Mapping[str, RefererLookup]:
        return self._referers

    def parse(
        self,
        referer: UriLike,
        page_host: Optional[UriLike] = None,
        internal_domains: Optional[Iterable[str]] = None,
        *,
        page_url: Optional[UriLike] = None,
    ) -> Optional[Referer]:
        """Classify a referer URL.

        Args:
            referer: Referer URL, as a string or an already split URI
            page_host: Host of the current page, or a split page URI
            internal_domains: Extra hosts to treat as internal
            page_url: Full URL of the current page, used when page_host is not given

        Returns:
            A Referer result, or None if the referer is not a valid
            http(s) URL with a host
        """
        parts = _split_uri(referer)
        if parts is None:
            logger.debug(f"Referer is not a URI: {referer!r}")
            return None

        host = _host_of(parts)
        if _scheme_of(referer, parts) not in VALID_SCHEMES or not host:
            logger.debug(f"Referer is not an http(s) URL with a host: {referer!r}")
            return None

        if page_host is None and page_url is not None:
            page_parts = _split_uri(page_url)
            page_host = _host_of(page_parts) if page_parts is not None else None
        elif isinstance(page_host, SplitResult):
            page_host = _host_of(page_host)

        if self._is_internal(host, page_host, internal_domains or ()):
            return InternalReferer()

        lookup = self.lookup_referer(host, parts.path)
        if lookup is None:
            return UnknownReferer()

        return self._to_referer(lookup, parts.query)

    @staticmethod
    def _is_internal(host: str, page_host: Optional[str], internal_domains: Iterable[str]) -> bool:
        if page_host is not None and page_host == host:
            return True
        return any(domain.strip() == host for domain in internal_domains)

    def lookup_referer(self, host: str, path: str) -> Optional[RefererLookup]:
        """Find the most specific dataset entry for a host and path.

        Paths are tried outermost, hosts innermost; the first hit wins.
        """
        hosts = hosts_to_try(host)
        for candidate_path in paths_to_try(path):
            for candidate_host in hosts:
                lookup = self._referers.get(candidate_host + candidate_path)
                if lookup is not None:
                    return lookup
        return None

    @staticmethod
    def _to_referer(lookup: RefererLookup, query: str) -> Referer:
        if lookup.medium is Medium.SEARCH:
            term = extract_search_term(query, lookup.parameters) if query else None
            return SearchReferer(source=lookup.source, term=term)
        if lookup.medium is Medium.SOCIAL:
            return SocialReferer(source=lookup.source)
        if lookup.medium is Medium.EMAIL:
            return EmailReferer(source=lookup.source)
        if lookup.medium is Medium.PAID:
            return PaidReferer(source=lookup.source)
        if lookup.medium is Medium.INTERNAL:
            return InternalReferer()
        return UnknownReferer()
