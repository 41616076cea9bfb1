"""Tests for referers dataset loading and validation."""

import pytest

from refererparser.dataset import (
    CorruptReferersError,
    get_dataset_stats,
    load_default_referers,
    load_referers,
    load_referers_file,
    load_referers_json,
)
from refererparser.models import Medium, RefererLookup


class TestMedium:
    def test_from_string_known(self) -> None:
        assert Medium.from_string("search") is Medium.SEARCH
        assert Medium.from_string("unknown") is Medium.UNKNOWN
        assert Medium.from_string("paid") is Medium.PAID

    def test_from_string_is_case_sensitive(self) -> None:
        assert Medium.from_string("Search") is None
        assert Medium.from_string("SOCIAL") is None

    def test_from_string_unrecognized(self) -> None:
        assert Medium.from_string("bogus") is None
        assert Medium.from_string("") is None

    def test_str_is_lowercase_name(self) -> None:
        assert str(Medium.EMAIL) == "email"


class TestLoadReferers:
    def test_flattens_domains(self, sample_document: dict) -> None:
        referers = load_referers(sample_document)

        assert referers["google.com"] == RefererLookup(Medium.SEARCH, "Google", ("q", "query"))
        assert referers["google.co.uk"] == referers["google.com"]
        assert referers["m.facebook.com"] == RefererLookup(Medium.SOCIAL, "Facebook", ())

    def test_path_scoped_domains_keep_their_path(self, sample_document: dict) -> None:
        referers = load_referers(sample_document)

        assert referers["google.com/imgres"].source == "Google Images"
        assert referers["www.google.com/aclk"].medium is Medium.PAID

    def test_parameters_default_to_empty(self, sample_document: dict) -> None:
        referers = load_referers(sample_document)
        assert referers["mail.google.com"].parameters == ()

    def test_dataset_is_read_only(self, sample_document: dict) -> None:
        referers = load_referers(sample_document)
        with pytest.raises(TypeError):
            referers["evil.com"] = RefererLookup(Medium.SEARCH, "Evil")  # type: ignore[index]

    def test_last_write_wins_on_duplicate_keys(self) -> None:
        referers = load_referers(
            {
                "search": {"Engine": {"domains": ["shared.com"], "parameters": ["q"]}},
                "social": {"Network": {"domains": ["shared.com"]}},
            }
        )
        assert referers["shared.com"] == RefererLookup(Medium.SOCIAL, "Network", ())

    def test_loading_twice_gives_equal_datasets(self, sample_document: dict) -> None:
        assert dict(load_referers(sample_document)) == dict(load_referers(sample_document))

    def test_empty_document(self) -> None:
        assert len(load_referers({})) == 0


class TestLoadErrors:
    def test_unrecognized_medium(self) -> None:
        with pytest.raises(CorruptReferersError, match="bogus"):
            load_referers({"search": {}, "bogus": {}})

    def test_document_not_an_object(self) -> None:
        with pytest.raises(CorruptReferersError, match="must be an object"):
            load_referers(["search"])

    def test_medium_not_an_object(self) -> None:
        with pytest.raises(CorruptReferersError, match="Medium 'social' not an object"):
            load_referers({"social": ["Facebook"]})

    def test_source_not_an_object(self) -> None:
        with pytest.raises(CorruptReferersError, match="Facebook"):
            load_referers({"social": {"Facebook": "facebook.com"}})

    def test_missing_domains(self) -> None:
        with pytest.raises(CorruptReferersError, match="Missing 'domains'.*Google"):
            load_referers({"search": {"Google": {"parameters": ["q"]}}})

    def test_domains_not_a_list(self) -> None:
        with pytest.raises(CorruptReferersError, match="'domains'"):
            load_referers({"search": {"Google": {"domains": "google.com"}}})

    def test_parameters_not_strings(self) -> None:
        with pytest.raises(CorruptReferersError, match="'parameters'"):
            load_referers({"search": {"Google": {"domains": ["google.com"], "parameters": [1]}}})

    def test_invalid_json(self) -> None:
        with pytest.raises(CorruptReferersError, match="not valid JSON"):
            load_referers_json("{not json")

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            load_referers_json("[]")


class TestLoadFromText:
    def test_load_json_string(self, sample_json: str) -> None:
        referers = load_referers_json(sample_json)
        assert referers["search.yahoo.com"].parameters == ("p",)

    def test_load_json_bytes(self, sample_json: str) -> None:
        referers = load_referers_json(sample_json.encode("utf-8"))
        assert "facebook.com" in referers

    def test_load_file(self, tmp_path, sample_json: str) -> None:
        path = tmp_path / "referers.json"
        path.write_text(sample_json)

        referers = load_referers_file(path)
        assert referers["mail.google.com"].source == "Gmail"

    def test_load_missing_file(self, tmp_path) -> None:
        with pytest.raises(CorruptReferersError, match="Cannot read"):
            load_referers_file(tmp_path / "missing.json")


class TestDefaultDataset:
    def test_bundled_dataset_loads(self) -> None:
        referers = load_default_referers()

        assert referers["google.com"].medium is Medium.SEARCH
        assert referers["facebook.com"].medium is Medium.SOCIAL
        assert referers["mail.google.com"].medium is Medium.EMAIL

    def test_bundled_dataset_covers_every_medium_but_internal(self) -> None:
        stats = get_dataset_stats(load_default_referers())
        assert set(stats) == {"search", "social", "email", "paid", "unknown"}


class TestDatasetStats:
    def test_counts_sources_and_keys(self, sample_document: dict) -> None:
        stats = get_dataset_stats(load_referers(sample_document))

        assert stats["search"] == {"sources": 3, "keys": 4}
        assert stats["paid"] == {"sources": 1, "keys": 2}
        assert list(stats) == sorted(stats)
