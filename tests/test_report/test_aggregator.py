"""Tests for kubevalidator.report -- verdict aggregation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from kubevalidator.annotations import Annotation
from kubevalidator.report import (
    CheckStatus,
    Conclusion,
    build_config_invalid_report,
    build_config_missing_report,
    build_error_report,
    build_final_report,
    build_initial_report,
    conclusion_for,
    title_for,
)

STARTED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
COMPLETED = STARTED + timedelta(seconds=3)


def _annotation(path: str = "a.yaml") -> Annotation:
    return Annotation(path=path, title="t", message="m")


class TestTitle:
    @pytest.mark.parametrize(
        "files,errors,expected",
        [
            (1, 1, "1 file checked, 1 error"),
            (2, 0, "2 files checked, 0 errors"),
            (1, 3, "1 file checked, 3 errors"),
            (4, 1, "4 files checked, 1 error"),
        ],
    )
    def test_pluralisation(self, files: int, errors: int, expected: str) -> None:
        assert title_for(files, errors) == expected


class TestConclusion:
    def test_neutral_without_candidates(self) -> None:
        assert conclusion_for(0, 0) is Conclusion.neutral

    def test_failure_with_annotations(self) -> None:
        assert conclusion_for(2, 1) is Conclusion.failure

    def test_success_without_annotations(self) -> None:
        assert conclusion_for(2, 0) is Conclusion.success


class TestFinalReport:
    def test_no_matching_files(self) -> None:
        report = build_final_report(
            0, [], [], STARTED, COMPLETED, config_url="https://github.com/o/r/blob/sha/.github/kubevalidator.yaml",
        )
        assert report.conclusion is Conclusion.neutral
        assert report.title == "No files to validate"
        assert ".github/kubevalidator.yaml" in report.summary
        assert "https://github.com/o/r/blob/sha/.github/kubevalidator.yaml" in report.summary

    def test_failure_lists_candidates(self) -> None:
        items = ["* [`./a.yaml`](https://blob/a)", "* [`./b.yaml`](https://blob/b)"]
        report = build_final_report(2, [_annotation()], items, STARTED, COMPLETED)
        assert report.conclusion is Conclusion.failure
        assert report.title == "2 files checked, 1 error"
        assert report.summary == "\n".join(items)
        assert report.status is CheckStatus.completed
        assert report.started_at == STARTED
        assert report.completed_at == COMPLETED

    def test_success(self) -> None:
        report = build_final_report(1, [], ["* [`./a.yaml`]()"], STARTED, COMPLETED)
        assert report.conclusion is Conclusion.success
        assert report.title == "1 file checked, 0 errors"

    def test_check_run_payload(self) -> None:
        payload = build_final_report(1, [], ["x"], STARTED, COMPLETED).to_check_run()
        assert payload["name"] == "Kubernetes YAML"
        assert payload["status"] == "completed"
        assert payload["conclusion"] == "success"
        assert payload["started_at"] == STARTED.isoformat()
        assert payload["completed_at"] == COMPLETED.isoformat()
        assert payload["output"] == {"title": "1 file checked, 0 errors", "summary": "x"}


class TestLifecycleReports:
    def test_initial_report_is_in_progress(self) -> None:
        report = build_initial_report(STARTED)
        assert report.status is CheckStatus.in_progress
        assert report.conclusion is None
        assert report.title == "Validating..."
        payload = report.to_check_run()
        assert "conclusion" not in payload
        assert "completed_at" not in payload

    def test_config_missing(self) -> None:
        report = build_config_missing_report(STARTED, COMPLETED, "https://github.com/o/r/new/main")
        assert report.conclusion is Conclusion.neutral
        assert report.title == "No configuration"
        assert "https://github.com/o/r/new/main" in report.summary
        assert report.annotations == []

    def test_config_invalid(self) -> None:
        annotation = _annotation(".github/kubevalidator.yaml")
        report = build_config_invalid_report(STARTED, COMPLETED, "https://new", [annotation])
        assert report.conclusion is Conclusion.failure
        assert report.title == "Configuration invalid"
        assert report.annotations == [annotation]

    def test_run_error(self) -> None:
        report = build_error_report(STARTED, COMPLETED, "HTTP 502")
        assert report.status is CheckStatus.completed
        assert report.conclusion is Conclusion.failure
        assert report.title == "Validation could not complete"
        assert "HTTP 502" in report.summary
        assert report.to_check_run()["completed_at"] == COMPLETED.isoformat()
