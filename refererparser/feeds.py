"""Referers dataset feed manager.

Downloads and caches the published referers dataset so that deployments
can track new sources without a package upgrade.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import requests

from refererparser.dataset import (
    CorruptReferersError,
    get_dataset_stats,
    load_referers_file,
    load_referers_json,
)
from refererparser.models import RefererLookup

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = (
    "https://s3-eu-west-1.amazonaws.com/snowplow-hosted-assets/"
    "third-party/referer-parser/referers-latest.json"
)
CACHE_FILENAME = "referers.json"


class ReferersFeedManager:
    """Manages downloading and caching of the referers dataset."""

    def __init__(
        self,
        cache_dir: Path,
        url: str = DEFAULT_FEED_URL,
        update_interval_hours: int = 168,
        timeout_seconds: int = 30,
    ) -> None:
        """Initialize the feed manager.

        Args:
            cache_dir: Directory to cache the downloaded dataset
            url: Feed URL serving a referers JSON document
            update_interval_hours: How often to refresh the cache
            timeout_seconds: HTTP request timeout
        """
        self.cache_dir = Path(cache_dir).expanduser()
        self.url = url
        self.update_interval = timedelta(hours=update_interval_hours)
        self.timeout = timeout_seconds
        self._referers: Optional[Mapping[str, RefererLookup]] = None

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / CACHE_FILENAME

    def load(self) -> Mapping[str, RefererLookup]:
        """Get the referers dataset, refreshing the cache if it is stale.

        Returns:
            Read-only referers mapping

        Raises:
            CorruptReferersError: If there is no usable cached dataset
        """
        if self._referers is not None:
            return self._referers

        self.update()

        if not self.cache_file.exists():
            raise CorruptReferersError(
                f"No cached referers dataset at {self.cache_file} and download failed"
            )

        self._referers = load_referers_file(self.cache_file)
        return self._referers

    def update(self, force: bool = False) -> bool:
        """Download the feed if the cache is missing or stale.

        A failed download keeps the existing cache.

        Args:
            force: Download even when the cache is fresh

        Returns:
            True if the cache was replaced
        """
        if not force and not self._is_stale():
            logger.debug(f"Referers cache {self.cache_file} is up to date")
            return False

        logger.info(f"Updating referers dataset from {self.url}")
        try:
            self._download_feed()
        except requests.RequestException as e:
            logger.warning(f"Failed to download referers dataset: {e}")
            return False
        except CorruptReferersError as e:
            logger.warning(f"Discarding downloaded referers dataset: {e}")
            return False

        # Clear loaded dataset to force reload
        self._referers = None
        return True

    def _is_stale(self) -> bool:
        """Check if the cached dataset is missing or older than update_interval."""
        if not self.cache_file.exists():
            return True

        mtime = datetime.fromtimestamp(self.cache_file.stat().st_mtime)
        age = datetime.now() - mtime
        return age > self.update_interval

    def _download_feed(self) -> None:
        """Download the feed, validate it and save it to the cache.

        Raises:
            requests.RequestException: If download fails
            CorruptReferersError: If the payload is not a valid dataset
        """
        resp = requests.get(self.url, timeout=self.timeout)
        resp.raise_for_status()

        referers = load_referers_json(resp.content)

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        # Write to temp file first, then rename (atomic)
        temp_file = self.cache_file.with_suffix(".tmp")
        temp_file.write_bytes(resp.content)
        temp_file.replace(self.cache_file)

        logger.info(
            f"Downloaded {self.cache_file.name} ({len(resp.content)} bytes, "
            f"{len(referers)} entries)"
        )

    def get_stats(self) -> dict:
        """Get statistics about the cached dataset.

        Returns:
            Dict with cache location, age and per-medium counts
        """
        stats: dict = {"url": self.url, "cache_file": str(self.cache_file), "cached": False}

        if not self.cache_file.exists():
            return stats

        mtime = datetime.fromtimestamp(self.cache_file.stat().st_mtime)
        age = datetime.now() - mtime
        stats.update(
            {
                "cached": True,
                "updated": mtime.strftime("%Y-%m-%d %H:%M:%S"),
                "age_hours": int(age.total_seconds() / 3600),
                "mediums": get_dataset_stats(load_referers_file(self.cache_file)),
            }
        )
        return stats
