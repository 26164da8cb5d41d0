"""Tests for configuration, the dataset runner and the command line."""

import json
from datetime import timedelta

import pytest
from tolerantdiff import (
    ComparatorConfig,
    ConfigError,
    DatasetRunner,
    TolerantBasicEqualer,
    build_differ,
    load_config,
    run_datasets,
)
from tolerantdiff.cli import main
from tolerantdiff.config import config_from_dict, merge_overrides
from tolerantdiff.models import DiffResult


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


class TestConfig:
    """Test loading and validating configuration."""

    def test_defaults(self):
        config = config_from_dict(None)
        assert config == ComparatorConfig()
        assert config.to_dict()["time_layout"] == "ISO8601"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "tolerantdiff.yaml"
        path.write_text(
            "float_tolerance: 0.05\n"
            "int_tolerance: 1\n"
            "time_tolerance: 1s\n"
            "strip_pattern: '_[^_]*$'\n"
            "ignore_paths:\n"
            "  - $..updatedAt\n"
            "color: true\n"
        )
        config = load_config(path)

        assert config.float_tolerance == 0.05
        assert config.int_tolerance == 1
        assert config.time_tolerance == "1s"
        assert config.strip_pattern == "_[^_]*$"
        assert config.ignore_paths == ["$..updatedAt"]
        assert config.color is True

    def test_load_json(self, tmp_path):
        path = write_json(tmp_path / "config.json", {"float_tolerance": 1})
        assert load_config(path).float_tolerance == 1.0

    def test_build_equaler(self):
        config = ComparatorConfig(float_tolerance=0.1, time_tolerance="500ms", strip_pattern=" .*$")
        equaler = config.build_equaler()

        assert isinstance(equaler, TolerantBasicEqualer)
        assert equaler.time_tolerance == timedelta(milliseconds=500)
        assert equaler.equal_float(1.6, 1.544) is True
        assert equaler.equal_str("Hello Alice!", "Hello Bob!") is True

    def test_build_differ(self):
        differ = build_differ(ComparatorConfig(float_tolerance=0.1, ignore_paths=["$.id"]))
        assert differ.equal('{"id": 1, "x": 1.6}', '{"id": 2, "x": 1.57}') is True

    @pytest.mark.parametrize("data, key", [
        ({"tolerance": 1}, "tolerance"),
        ({"float_tolerance": "high"}, "float_tolerance"),
        ({"int_tolerance": 1.5}, "int_tolerance"),
        ({"int_tolerance": True}, "int_tolerance"),
        ({"float_tolerance": -1}, "float_tolerance"),
        ({"time_tolerance": "soon"}, "time_tolerance"),
        ({"strip_pattern": "("}, "strip_pattern"),
        ({"ignore_paths": "$.a"}, "ignore_paths"),
        ({"ignore_paths": ["$.a["]}, "ignore_paths"),
        ({"ignore_paths": [1]}, "ignore_paths"),
        ({"color": "yes"}, "color"),
    ])
    def test_invalid_values(self, data, key):
        with pytest.raises(ConfigError) as exc_info:
            config_from_dict(data)
        assert exc_info.value.key == key
        assert key in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("float_tolerance: [1\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_merge_overrides(self):
        config = ComparatorConfig(float_tolerance=0.1, ignore_paths=["$.a"])
        merged = merge_overrides(config, {
            "float_tolerance": None,
            "int_tolerance": 3,
            "ignore_paths": ["$.b"],
        })
        assert merged.float_tolerance == 0.1
        assert merged.int_tolerance == 3
        assert merged.ignore_paths == ["$.a", "$.b"]
        assert config.ignore_paths == ["$.a"]


class TestDatasetRunner:
    """Test running folders of datasets."""

    def setup_method(self):
        self.runner = DatasetRunner(ComparatorConfig(float_tolerance=0.1))

    def test_run_dataset(self):
        result = self.runner.run_dataset(
            {"left": {"x": 1.6}, "right": {"x": 1.57}}, "close", "close.json"
        )
        assert result.passed is True
        assert result.diff is None

    def test_expected_difference(self):
        result = self.runner.run_dataset(
            {"left": [1], "right": [1, 2], "expected_equal": False}, "grown", "grown.json"
        )
        assert result.passed is True
        assert result.diff["changes"] == [{"path": "$[1]", "kind": "ADDED"}]
        assert result.diff_text == " [\n   0: 1\n+  1: 2\n ]\n"

    def test_unexpected_difference(self):
        result = self.runner.run_dataset({"left": "a", "right": "b"}, "strings", "strings.json")
        assert result.passed is False
        assert result.to_dict()["diff_text"] == '- "a"\n+ "b"\n'

    def test_invalid_dataset(self):
        result = self.runner.run_dataset({"left": 1}, "broken", "broken.json")
        assert result.passed is False
        assert "right" in result.error

    def test_numbers_in_diff_text(self):
        result = self.runner.run_dataset(
            {"left": {"x": 1.6, "n": 1e6}, "right": {"x": 2.5, "n": 1e6}}, "numbers", "numbers.json"
        )
        assert result.passed is False
        assert result.diff_text == ' {\n   "n": 1e+06,\n-  "x": 1.6\n+  "x": 2.5\n }\n'

    def test_formatting_error_fails_scenario(self, tmp_path, monkeypatch):
        def broken_format(self, color=False):
            raise ValueError("Type mismatch")

        monkeypatch.setattr(DiffResult, "format", broken_format)
        write_json(tmp_path / "a.json", {"left": [1], "right": [2]})
        write_json(tmp_path / "b.json", {"left": [1], "right": [1]})

        report = self.runner.run_folder(tmp_path, print_report=False)

        assert report.total == 2
        assert report.scenarios[0].passed is False
        assert report.scenarios[0].error == "Type mismatch"
        assert report.scenarios[1].passed is True

    def test_run_folder(self, tmp_path, capsys):
        write_json(tmp_path / "a_same.json", {"left": {"a": 1}, "right": {"a": 1}})
        write_json(tmp_path / "b_removed.json", {"name": "removed", "left": [1, 2], "right": [1]})
        write_json(tmp_path / "c_added.json", {"left": {}, "right": {"z": 0}, "expected_equal": False})
        (tmp_path / "d_broken.json").write_text("{not json")
        (tmp_path / "notes.txt").write_text("ignored")

        report = self.runner.run_folder(tmp_path)

        assert report.total == 4
        assert report.passed == 2
        assert report.failed == 2
        assert [s.name for s in report.scenarios] == ["a_same", "removed", "c_added", "d_broken"]
        assert report.breakdown["no_changes"] == ["a_same"]
        assert report.breakdown["with_changes"] == ["removed", "c_added"]
        assert report.breakdown["entries_removed"] == ["removed"]
        assert report.breakdown["entries_added"] == ["c_added"]
        assert report.breakdown["errors"] == ["d_broken"]

        out = capsys.readouterr().out
        assert "PASS: a_same" in out
        assert "FAIL: removed" in out
        assert "-  1: 2" in out
        assert "Test Results: 2/4 passed (50.0%)" in out

    def test_report_to_dict(self, tmp_path):
        write_json(tmp_path / "one.json", {"left": 1, "right": 1})
        report = self.runner.run_folder(tmp_path, print_report=False)
        data = report.to_dict()

        assert data["summary"] == {
            "total_scenarios": 1,
            "passed": 1,
            "failed": 0,
            "pass_rate": "100.0%"
        }
        assert data["scenarios"][0]["name"] == "one"
        assert data["timestamp"].endswith("Z")

    def test_run_datasets_with_config(self, tmp_path):
        datasets = tmp_path / "datasets"
        datasets.mkdir()
        write_json(datasets / "ts.json", {
            "left": {"at": "2018-03-30T16:41:11.509Z", "id": "a"},
            "right": {"at": "2018-03-30T16:41:12.000Z", "id": "b"},
        })
        config = tmp_path / "config.yaml"
        config.write_text("time_tolerance: 1s\nignore_paths: ['$.id']\n")

        report = run_datasets(datasets, config, print_report=False)
        assert report.passed == 1

    def test_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_datasets(tmp_path / "missing", print_report=False)


class TestCommandLine:
    """Test the tolerantdiff command."""

    def test_diff_equal(self, tmp_path, capsys):
        left = write_json(tmp_path / "left.json", {"x": 1.6})
        right = write_json(tmp_path / "right.json", {"x": 1.57})

        assert main(["diff", str(left), str(right), "--float-tolerance", "0.1"]) == 0
        assert capsys.readouterr().out == ""

    def test_diff_different(self, tmp_path, capsys):
        left = write_json(tmp_path / "left.json", {"x": 1.6, "y": [3.8, "hello"]})
        right = write_json(tmp_path / "right.json", {"x": 1.57, "y": [3.6, "hello"], "z": 0})

        assert main(["diff", str(left), str(right), "--float-tolerance", "0.1"]) == 1
        assert capsys.readouterr().out == (
            ' {\n'
            '   "x": 1.6,\n'
            '   "y": [\n'
            '-    0: 3.8,\n'
            '+    0: 3.6,\n'
            '     1: "hello"\n'
            '   ]\n'
            '+  "z": 0\n'
            ' }\n'
        )

    def test_diff_quiet(self, tmp_path, capsys):
        left = write_json(tmp_path / "left.json", [1])
        right = write_json(tmp_path / "right.json", [2])

        assert main(["diff", str(left), str(right), "-q"]) == 1
        assert capsys.readouterr().out == ""

    def test_diff_with_config_and_ignores(self, tmp_path):
        left = write_json(tmp_path / "left.json", {"id": 1, "v": "a_1", "at": 5})
        right = write_json(tmp_path / "right.json", {"id": 2, "v": "a_2", "at": 7})
        config = tmp_path / "config.yaml"
        config.write_text("strip_pattern: '_.*$'\nignore_paths: ['$.id']\n")

        assert main(["diff", str(left), str(right), "-c", str(config), "-q"]) == 1
        assert main(["diff", str(left), str(right), "-c", str(config), "--ignore", "$.at", "-q"]) == 0

    def test_diff_color(self, tmp_path, capsys):
        left = write_json(tmp_path / "left.json", "hi")
        right = write_json(tmp_path / "right.json", "hello")

        assert main(["diff", str(left), str(right), "--color"]) == 1
        assert "\x1b[30;42m" in capsys.readouterr().out

    def test_diff_invalid_json(self, tmp_path, capsys):
        left = tmp_path / "left.json"
        left.write_text("{")
        right = write_json(tmp_path / "right.json", {})

        assert main(["diff", str(left), str(right)]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_diff_missing_file(self, tmp_path, capsys):
        right = write_json(tmp_path / "right.json", {})
        assert main(["diff", str(tmp_path / "nope.json"), str(right)]) == 2

    def test_diff_invalid_config(self, tmp_path):
        left = write_json(tmp_path / "left.json", {})
        config = tmp_path / "config.yaml"
        config.write_text("unknown: 1\n")

        assert main(["diff", str(left), str(left), "-c", str(config)]) == 2

    def test_run_writes_report(self, tmp_path, capsys):
        datasets = tmp_path / "datasets"
        datasets.mkdir()
        write_json(datasets / "ok.json", {"left": [1, 2], "right": [1, 2]})
        write_json(datasets / "bad.json", {"left": [1, 2], "right": [1, 3]})
        report_path = tmp_path / "report.json"

        assert main(["run", str(datasets), "-r", str(report_path), "-q"]) == 1
        assert capsys.readouterr().out == ""

        report = json.loads(report_path.read_text())
        assert report["summary"]["total_scenarios"] == 2
        assert report["summary"]["failed"] == 1
        assert report["breakdown"]["with_changes"] == ["bad"]

    def test_run_all_passing(self, tmp_path):
        write_json(tmp_path / "ok.json", {"left": {"a": None}, "right": {"a": None}})
        assert main(["run", str(tmp_path), "-q"]) == 0

    def test_run_missing_folder(self, tmp_path):
        assert main(["run", str(tmp_path / "missing"), "-q"]) == 2
