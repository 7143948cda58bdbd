"""Unit tests for job document ingestion."""

import json

import pytest

from jobgraph.config import DEFAULT_NODE_COLOR
from jobgraph.core.errors import InvalidFormatError
from jobgraph.ingest import load_jobs, loads_jobs, parse_jobs, sample_jobs


def entry(name, deps=(), **extra):
    data = {"job": name, "dependencies": list(deps), "sources": [], "targets": []}
    data.update(extra)
    return data


class TestParseJobs:
    def test_array_document(self):
        records = parse_jobs([entry("a"), entry("b", ["a"], color="#fff000")])

        assert [r.id for r in records] == ["a", "b"]
        assert records[1].dependencies == ("a",)
        assert records[1].color == "#fff000"
        assert records[0].color == DEFAULT_NODE_COLOR

    def test_single_object(self):
        records = parse_jobs(entry("solo"))
        assert [r.id for r in records] == ["solo"]

    def test_malformed_entries_skipped(self, caplog):
        data = [
            entry("good"),
            {"job": "no-lists"},
            {"dependencies": [], "sources": [], "targets": []},
            entry("bad-deps", dependencies="a"),
            "not an object",
        ]
        with caplog.at_level("WARNING"):
            records = parse_jobs(data)

        assert [r.id for r in records] == ["good"]
        assert "Skipped 4 malformed job entries" in caplog.text

    @pytest.mark.parametrize("data", [42, "text", None, {"name": "x"}])
    def test_invalid_structure(self, data):
        with pytest.raises(InvalidFormatError, match="Invalid JSON structure"):
            parse_jobs(data)

    def test_single_object_needs_lists(self):
        with pytest.raises(InvalidFormatError):
            parse_jobs({"job": "x", "dependencies": "y"})

    def test_id_key_accepted(self):
        array = parse_jobs([{"id": "A", "dependencies": [], "sources": [], "targets": []}])
        single = parse_jobs({"id": "B", "dependencies": ["A"], "sources": [], "targets": []})

        assert [r.id for r in array] == ["A"]
        assert single[0].id == "B"
        assert single[0].dependencies == ("A",)

    def test_non_string_list_item_skips_entry(self, caplog):
        data = [entry("good"), entry("bad", [1]), entry("also-good", ["good"])]
        with caplog.at_level("WARNING"):
            records = parse_jobs(data)

        assert [r.id for r in records] == ["good", "also-good"]
        assert "Skipped 1 malformed job entry" in caplog.text

    def test_single_object_with_bad_item_raises(self):
        with pytest.raises(InvalidFormatError, match="Invalid job 'bad'"):
            parse_jobs(entry("bad", [1]))

    def test_sample_pipeline(self):
        records = sample_jobs()
        assert len(records) == 5
        assert records[2].dependencies == ("Frontend Build", "Backend Build")


class TestLoadJobs:
    def test_loads_string(self):
        records = loads_jobs(json.dumps([entry("a")]))
        assert records[0].id == "a"

    def test_not_json(self):
        with pytest.raises(InvalidFormatError, match="Failed to parse JSON"):
            loads_jobs("{not json")

    def test_load_file(self, tmp_path):
        f = tmp_path / "jobs.json"
        f.write_text(json.dumps([entry("a"), entry("b", ["a"])]))
        assert [r.id for r in load_jobs(f)] == ["a", "b"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidFormatError, match="Failed to read file"):
            load_jobs(tmp_path / "missing.json")
