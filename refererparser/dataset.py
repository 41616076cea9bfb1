"""Loading and validation of the referers dataset.

The dataset document is nested by medium, then by source name:

    {
        "search": {
            "Google": {"domains": ["google.com"], "parameters": ["q"]}
        },
        "social": {
            "Facebook": {"domains": ["facebook.com", "m.facebook.com"]}
        }
    }

It is flattened into a read-only mapping from domain (host, optionally
followed by a path such as "google.com/imgres") to a RefererLookup.
"""

import json
import logging
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

from refererparser.models import Medium, RefererLookup

logger = logging.getLogger(__name__)

DEFAULT_REFERERS_RESOURCE = "referers.json"


class CorruptReferersError(ValueError):
    """Raised when a referers document cannot be turned into a dataset."""


def load_referers(document: Any) -> Mapping[str, RefererLookup]:
    """Validate a parsed referers document and flatten it.

    Args:
        document: Parsed JSON value (medium -> source -> entry)

    Returns:
        Read-only mapping from "host" + "path" key to lookup entry

    Raises:
        CorruptReferersError: If any part of the document is malformed.
            Nothing is returned for a partially valid document.
    """
    if not isinstance(document, Mapping):
        raise CorruptReferersError("Referers json must be an object")

    referers: dict[str, RefererLookup] = {}

    for medium_key, sources in document.items():
        medium = Medium.from_string(medium_key)
        if medium is None:
            raise CorruptReferersError(f"Unrecognized medium: '{medium_key}'")
        if not isinstance(sources, Mapping):
            raise CorruptReferersError(f"Medium '{medium_key}' not an object")

        for source, entry in sources.items():
            domains, parameters = _parse_source_entry(medium_key, source, entry)
            lookup = RefererLookup(medium=medium, source=source, parameters=parameters)

            for domain in domains:
                if domain in referers:
                    logger.debug(
                        f"Duplicate referer key '{domain}': "
                        f"{referers[domain].source} replaced by {source}"
                    )
                referers[domain] = lookup

    logger.info(f"Loaded {len(referers)} referer entries")
    return MappingProxyType(referers)


def _parse_source_entry(
    medium_key: str,
    source: str,
    entry: Any,
) -> tuple[list[str], tuple[str, ...]]:
    """Validate a single {domains, parameters} source entry."""
    where = f"source '{source}' in medium '{medium_key}'"

    if not isinstance(entry, Mapping):
        raise CorruptReferersError(f"Entry for {where} not an object")

    if "domains" not in entry:
        raise CorruptReferersError(f"Missing 'domains' for {where}")
    domains = entry["domains"]
    if not _is_string_list(domains):
        raise CorruptReferersError(f"'domains' for {where} must be a list of strings")

    parameters = entry.get("parameters")
    if parameters is None:
        parameters = []
    elif not _is_string_list(parameters):
        raise CorruptReferersError(f"'parameters' for {where} must be a list of strings")

    return list(domains), tuple(parameters)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def load_referers_json(raw: Union[str, bytes]) -> Mapping[str, RefererLookup]:
    """Parse raw JSON text and load it as a referers dataset.

    Raises:
        CorruptReferersError: If the text is not valid JSON or the document
            is malformed
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptReferersError(f"Referers json is not valid JSON: {e}") from e
    return load_referers(document)


def load_referers_file(path: Path) -> Mapping[str, RefererLookup]:
    """Load a referers dataset from a JSON file on disk."""
    path = Path(path).expanduser()
    logger.info(f"Loading referers from {path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CorruptReferersError(f"Cannot read referers file {path}: {e}") from e
    return load_referers_json(raw)


def load_default_referers() -> Mapping[str, RefererLookup]:
    """Load the dataset bundled with the package."""
    raw = resources.files("refererparser.data").joinpath(DEFAULT_REFERERS_RESOURCE).read_bytes()
    return load_referers_json(raw)


def get_dataset_stats(referers: Mapping[str, RefererLookup]) -> dict[str, dict[str, int]]:
    """Count keys and distinct sources per medium.

    Returns:
        Dict mapping medium name to {"sources": n, "keys": n}
    """
    stats: dict[str, dict[str, Any]] = {}
    for lookup in referers.values():
        medium_stats = stats.setdefault(lookup.medium.value, {"sources": set(), "keys": 0})
        medium_stats["sources"].add(lookup.source)
        medium_stats["keys"] += 1

    return {
        medium: {"sources": len(s["sources"]), "keys": s["keys"]}
        for medium, s in sorted(stats.items())
    }
