"""Tests for configuration loading."""

from pathlib import Path

from refererparser.config import Config, load_config, merge_cli_options
from refererparser.feeds import DEFAULT_FEED_URL


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "missing.toml")

        assert config.dataset_path is None
        assert config.dataset_url is None
        assert config.internal_domains == []
        assert config.update_interval_hours == 168

    def test_all_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "refererparser.toml"
        path.write_text(
            """
[dataset]
path = "/data/referers.json"
url = "https://example.com/referers.json"
cache_dir = "/tmp/referers-cache"
update_interval_hours = 24
timeout_seconds = 5

[parser]
page_host = "www.example.com"
internal_domains = ["example.com", "blog.example.com"]

[summary]
cache_size = 50
top = 3
"""
        )

        config = load_config(path)

        assert config.dataset_path == Path("/data/referers.json")
        assert config.dataset_url == "https://example.com/referers.json"
        assert config.cache_dir == Path("/tmp/referers-cache")
        assert config.update_interval_hours == 24
        assert config.timeout_seconds == 5
        assert config.page_host == "www.example.com"
        assert config.internal_domains == ["example.com", "blog.example.com"]
        assert config.summary_cache_size == 50
        assert config.summary_top == 3

    def test_empty_url_selects_default_feed(self, tmp_path: Path) -> None:
        path = tmp_path / "refererparser.toml"
        path.write_text('[dataset]\nurl = ""\n')

        assert load_config(path).dataset_url == DEFAULT_FEED_URL

    def test_invalid_toml_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "refererparser.toml"
        path.write_text("[parser\npage_host = ")

        config = load_config(path)
        assert config.page_host is None


class TestMergeCliOptions:
    def test_cli_overrides(self) -> None:
        config = merge_cli_options(
            Config(page_host="a.com"),
            page_host="b.com",
            internal_domain=("x.com", "y.com"),
            dataset="/tmp/referers.json",
            top=5,
        )

        assert config.page_host == "b.com"
        assert config.internal_domains == ["x.com", "y.com"]
        assert config.dataset_path == Path("/tmp/referers.json")
        assert config.summary_top == 5

    def test_empty_values_ignored(self) -> None:
        config = merge_cli_options(
            Config(page_host="a.com", internal_domains=["x.com"]),
            page_host=None,
            internal_domain=(),
            dataset=None,
        )

        assert config.page_host == "a.com"
        assert config.internal_domains == ["x.com"]
        assert config.dataset_path is None
