"""Run-level verdicts."""

from kubevalidator.report.aggregator import (
    build_config_invalid_report,
    build_config_missing_report,
    build_error_report,
    build_final_report,
    build_initial_report,
    conclusion_for,
    title_for,
)
from kubevalidator.report.models import CheckStatus, Conclusion, Report

__all__ = [
    "CheckStatus",
    "Conclusion",
    "Report",
    "build_config_invalid_report",
    "build_config_missing_report",
    "build_error_report",
    "build_final_report",
    "build_initial_report",
    "conclusion_for",
    "title_for",
]
