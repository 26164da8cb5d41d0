"""Runs folders of JSON comparison datasets."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import build_differ, load_config
from .exceptions import ParseError, TolerantDiffError
from .models import ComparatorConfig, DeltaKind

logger = logging.getLogger(__name__)


@dataclass
class ScenarioResult:
    """Result of a single dataset."""
    name: str
    dataset_path: str
    passed: bool
    expected_equal: bool = True
    diff: Optional[dict] = None
    diff_text: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "dataset_path": self.dataset_path,
            "passed": self.passed,
            "expected_equal": self.expected_equal,
        }
        if self.diff:
            result["diff"] = self.diff
        if self.diff_text:
            result["diff_text"] = self.diff_text
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class GlobalReport:
    """Report across all datasets of a run."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    scenarios: list[ScenarioResult] = field(default_factory=list)
    breakdown: dict[str, list[str]] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        if not self.breakdown:
            self.breakdown = {
                "no_changes": [],
                "with_changes": [],
                "errors": [],
                "entries_removed": [],
                "entries_added": []
            }

    @property
    def pass_rate(self) -> str:
        return f"{(self.passed / self.total * 100):.1f}%" if self.total > 0 else "0.0%"

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "summary": {
                "total_scenarios": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "pass_rate": self.pass_rate
            },
            "breakdown": self.breakdown,
            "scenarios": [s.to_dict() for s in self.scenarios]
        }

    def print_summary(self):
        print(f"\nTest Results: {self.passed}/{self.total} passed ({self.pass_rate})")
        if self.failed > 0:
            print(f"  Failed: {self.failed}")

        if self.breakdown.get("no_changes"):
            print(f"  No changes: {len(self.breakdown['no_changes'])} datasets")
        if self.breakdown.get("with_changes"):
            print(f"  With changes: {len(self.breakdown['with_changes'])} datasets")
        if self.breakdown.get("errors"):
            print(f"  Errors: {len(self.breakdown['errors'])} datasets")
        if self.breakdown.get("entries_removed"):
            print(f"  Entries removed: {len(self.breakdown['entries_removed'])} datasets")
        if self.breakdown.get("entries_added"):
            print(f"  Entries added: {len(self.breakdown['entries_added'])} datasets")


class DatasetRunner:
    """
    Compares the left and right documents of every dataset in a folder.

    A dataset is a JSON file of the form::

        {"name": "...", "left": ..., "right": ..., "expected_equal": true}

    ``name`` defaults to the file stem, ``expected_equal`` to true. A dataset
    passes when the documents compare as expected.
    """

    def __init__(self, config: Optional[ComparatorConfig] = None):
        self.config = config or ComparatorConfig()
        self.differ = build_differ(self.config)

    def run_dataset(self, dataset: dict, name: str, dataset_path: str) -> ScenarioResult:
        """Run a single dataset."""
        expected_equal = dataset.get("expected_equal", True)

        try:
            if not isinstance(expected_equal, bool):
                raise ParseError(f"expected_equal must be a boolean, got {type(expected_equal).__name__}")
            if "left" not in dataset or "right" not in dataset:
                raise ParseError("Dataset needs both 'left' and 'right' documents")

            result = self.differ.compare_values(dataset["left"], dataset["right"])
            diff = result.to_dict() if result.modified else None
            diff_text = result.format() if result.modified else None
        except (TolerantDiffError, ValueError) as e:
            logger.debug("Dataset %s failed with an error: %s", name, e)
            return ScenarioResult(
                name=name,
                dataset_path=dataset_path,
                passed=False,
                expected_equal=bool(expected_equal),
                error=str(e)
            )

        equal = not result.modified
        passed = equal == expected_equal
        logger.debug("Dataset %s: equal=%s expected_equal=%s", name, equal, expected_equal)

        return ScenarioResult(
            name=name,
            dataset_path=dataset_path,
            passed=passed,
            expected_equal=expected_equal,
            diff=diff,
            diff_text=diff_text
        )

    def run_folder(self, folder: str | Path, print_report: bool = True) -> GlobalReport:
        """Run all dataset files in a folder, in file name order."""
        report = GlobalReport()
        folder_path = Path(folder)

        for dataset_file in sorted(folder_path.glob("*.json")):
            dataset_path = str(dataset_file)
            try:
                with open(dataset_file, encoding="utf-8") as f:
                    dataset = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.debug("Cannot read dataset %s: %s", dataset_file, e)
                result = ScenarioResult(dataset_file.stem, dataset_path, passed=False, error=str(e))
            else:
                if isinstance(dataset, dict):
                    name = dataset.get("name", dataset_file.stem)
                    result = self.run_dataset(dataset, name, dataset_path)
                else:
                    result = ScenarioResult(
                        dataset_file.stem, dataset_path, passed=False,
                        error="Dataset must be a JSON object"
                    )

            self._record(report, result, print_report)

        if print_report:
            report.print_summary()

        return report

    @staticmethod
    def _record(report: GlobalReport, result: ScenarioResult, print_report: bool):
        report.scenarios.append(result)
        report.total += 1

        if result.passed:
            report.passed += 1
            if print_report:
                print(f"PASS: {result.name}")
        else:
            report.failed += 1
            if print_report:
                print(f"FAIL: {result.name}")

        if result.error:
            report.breakdown["errors"].append(result.name)
            if print_report:
                print(f"  error: {result.error}")
            return

        if not result.diff:
            report.breakdown["no_changes"].append(result.name)
            return

        report.breakdown["with_changes"].append(result.name)
        kinds = {change["kind"] for change in result.diff["changes"]}
        if DeltaKind.DELETED.value in kinds:
            report.breakdown["entries_removed"].append(result.name)
        if DeltaKind.ADDED.value in kinds:
            report.breakdown["entries_added"].append(result.name)

        if print_report and not result.passed:
            for line in result.diff_text.splitlines():
                print(f"  {line}")


def run_datasets(
    test_folder: str | Path,
    config_path: Optional[str | Path] = None,
    print_report: bool = True
) -> GlobalReport:
    """
    Run every dataset of a folder.

        from tolerantdiff.runner import run_datasets
        report = run_datasets("tests/datasets", "tolerantdiff.yaml")

    Args:
        test_folder: Folder containing dataset JSON files
        config_path: Optional YAML config file
        print_report: Whether to print per-dataset results and a summary

    Raises:
        FileNotFoundError: if the folder doesn't exist
        ConfigError: if the config file is invalid
    """
    folder = Path(test_folder)
    if not folder.exists():
        raise FileNotFoundError(f"Test folder not found: {folder}")

    config = load_config(config_path) if config_path else ComparatorConfig()
    return DatasetRunner(config).run_folder(folder, print_report)
