"""Unit tests for dataset loading and cloning."""

from __future__ import annotations

import json

import pytest

from core.data import Dataset, clone_dataset, load_dashboard_data, load_dataset, parse_dataset
from core.errors import LoadError

pytestmark = pytest.mark.unit


def test_from_dict_keeps_label_order(payload) -> None:
    dataset = Dataset.from_dict(payload)
    assert list(dataset.mapping("demographics", "age_groups")) == ["18-25 years", "26-35 years"]
    assert dataset.to_dict() == payload


def test_missing_leaves_load_as_empty_mappings() -> None:
    dataset = Dataset.from_dict({"demographics": {"age_groups": {"18-25": 4}}})
    assert dataset.mapping("insights", "problems_faced") == {}
    assert dataset.mapping("satisfaction_metrics", "overspending") == {}


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"demographics": {"age_groups": {"18-25": -1}}},
        {"demographics": {"age_groups": {"18-25": "many"}}},
        {"behavior": "not a section"},
    ],
)
def test_structurally_invalid_payload_is_a_load_error(raw) -> None:
    with pytest.raises(LoadError):
        Dataset.from_dict(raw)


def test_parse_dataset_rejects_malformed_json() -> None:
    with pytest.raises(LoadError):
        parse_dataset("{not json")


def test_load_dataset_missing_file(tmp_path) -> None:
    with pytest.raises(LoadError):
        load_dataset(tmp_path / "missing.json")


def test_load_dataset_rejects_invalid_utf8(tmp_path) -> None:
    path = tmp_path / "dashboard_data.json"
    path.write_bytes(b'{"demographics": {"age_groups": {"\xff\xfe": 1}}}')
    with pytest.raises(LoadError, match="not valid UTF-8"):
        load_dataset(path)


def test_load_dashboard_data_reads_file(tmp_path, payload) -> None:
    path = tmp_path / "dashboard_data.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert load_dashboard_data(path).to_dict() == payload


def test_clone_is_fully_independent(dataset) -> None:
    copy = clone_dataset(dataset)
    copy.demographics["age_groups"]["18-25 years"] = 0
    assert dataset.mapping("demographics", "age_groups")["18-25 years"] == 40


def test_bundled_dataset_is_valid() -> None:
    dataset = load_dataset()
    assert sum(dataset.mapping("demographics", "age_groups").values()) > 0


def test_mapping_is_read_only(dataset) -> None:
    ages = dataset.mapping("demographics", "age_groups")
    with pytest.raises(TypeError):
        ages["18-25 years"] = 0
    with pytest.raises(TypeError):
        dataset.mapping("insights", "unknown")["x"] = 1
    assert dataset.demographics["age_groups"]["18-25 years"] == 40
