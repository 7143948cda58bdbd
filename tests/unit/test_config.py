"""Unit tests for config loading."""

from jobgraph.config import load_layout_settings


class TestLoadLayoutSettings:
    def test_missing_file(self, tmp_path):
        assert load_layout_settings(tmp_path / "nope.yaml") == {}

    def test_reads_layout_section(self, tmp_path):
        f = tmp_path / "config.yaml"
        f.write_text("layout:\n  direction: LR\n  spacing: 20\nother: 1\n")
        assert load_layout_settings(f) == {"direction": "LR", "spacing": 20}

    def test_empty_file(self, tmp_path):
        f = tmp_path / "config.yaml"
        f.write_text("")
        assert load_layout_settings(f) == {}

    def test_invalid_yaml(self, tmp_path, caplog):
        f = tmp_path / "config.yaml"
        f.write_text("layout: [unclosed\n")
        with caplog.at_level("WARNING"):
            assert load_layout_settings(f) == {}
        assert "Ignoring unreadable config" in caplog.text

    def test_non_mapping_section(self, tmp_path):
        f = tmp_path / "config.yaml"
        f.write_text("layout:\n  - force\n")
        assert load_layout_settings(f) == {}
