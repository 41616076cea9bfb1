"""Configuration loading for refererparser.

Loads settings from TOML config file with CLI override support.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli

from refererparser.feeds import DEFAULT_FEED_URL

logger = logging.getLogger(__name__)


def get_config_search_paths() -> list[Path]:
    """Get list of paths to search for config file."""
    return [
        Path("refererparser.toml"),  # Current directory
        Path.home() / ".config" / "refererparser" / "refererparser.toml",
        Path("/etc/refererparser/refererparser.toml"),
    ]


def find_config_file() -> Optional[Path]:
    """Find the first existing config file."""
    for path in get_config_search_paths():
        if path.exists():
            return path
    return None


@dataclass
class Config:
    """Loaded configuration with all sections."""

    # Dataset
    dataset_path: Optional[Path] = None
    dataset_url: Optional[str] = None
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".cache" / "refererparser")
    update_interval_hours: int = 168  # 1 week
    timeout_seconds: int = 30

    # Parser
    page_host: Optional[str] = None
    internal_domains: list[str] = field(default_factory=list)

    # Summary
    summary_cache_size: int = 10000
    summary_top: int = 10


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from TOML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Config object with loaded values
    """
    config = Config()

    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not config_path.exists():
        logger.debug("No config file found, using defaults")
        return config

    logger.info(f"Loading config from {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config file: {e}")
        return config

    # Dataset section
    if "dataset" in data:
        dataset = data["dataset"]
        if "path" in dataset:
            config.dataset_path = Path(dataset["path"]).expanduser()
        if "url" in dataset:
            # An empty url selects the default published feed
            config.dataset_url = dataset["url"] or DEFAULT_FEED_URL
        if "cache_dir" in dataset:
            config.cache_dir = Path(dataset["cache_dir"]).expanduser()
        if "update_interval_hours" in dataset:
            config.update_interval_hours = dataset["update_interval_hours"]
        if "timeout_seconds" in dataset:
            config.timeout_seconds = dataset["timeout_seconds"]

    # Parser section
    if "parser" in data:
        parser = data["parser"]
        if "page_host" in parser:
            config.page_host = parser["page_host"]
        if "internal_domains" in parser:
            config.internal_domains = list(parser["internal_domains"])

    # Summary section
    if "summary" in data:
        summary = data["summary"]
        if "cache_size" in summary:
            config.summary_cache_size = summary["cache_size"]
        if "top" in summary:
            config.summary_top = summary["top"]

    return config


def merge_cli_options(config: Config, **cli_options: Any) -> Config:
    """Merge CLI options into config (CLI takes precedence).

    Args:
        config: Base config from file
        **cli_options: CLI option overrides (None values are ignored)

    Returns:
        Config with CLI overrides applied
    """
    mappings = {
        "dataset": "dataset_path",
        "page_host": "page_host",
        "internal_domain": "internal_domains",
        "top": "summary_top",
    }

    for cli_name, config_name in mappings.items():
        if cli_name in cli_options:
            value = cli_options[cli_name]
            # Only override if CLI value is meaningful
            if value is not None and value != () and value != "":
                if cli_name == "internal_domain" and isinstance(value, tuple):
                    value = list(value)
                if cli_name == "dataset":
                    value = Path(value)
                setattr(config, config_name, value)

    return config
