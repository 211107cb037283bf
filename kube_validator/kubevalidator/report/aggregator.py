"""Fold per-file annotations into a single check verdict."""

from __future__ import annotations

from datetime import datetime

from kubevalidator.annotations.models import Annotation
from kubevalidator.report.models import CheckStatus, Conclusion, Report
from kubevalidator.settings import CONFIG_FILE_NAME

INITIAL_SUMMARY = "Validating..."
NO_MATCHING_FILES = "No files to validate"
RUN_ERROR_TITLE = "Validation could not complete"
DOCS_URL = "https://github.com/urcomputeringpal/kubevalidator#configuration"


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def conclusion_for(candidate_count: int, annotation_count: int) -> Conclusion:
    if candidate_count == 0:
        return Conclusion.neutral
    if annotation_count > 0:
        return Conclusion.failure
    return Conclusion.success


def title_for(candidate_count: int, annotation_count: int) -> str:
    """``"2 files checked, 1 error"``, pluralising each count independently."""
    files = _plural(candidate_count, "file", "files")
    errors = _plural(annotation_count, "error", "errors")
    return f"{files} checked, {errors}"


def no_matching_files_summary(config_url: str) -> str:
    return (
        "To save CPU resources, kubevalidator only validates changes to files that "
        "a) are associated with an open Pull Request and b) match the configuration "
        f"in [`{CONFIG_FILE_NAME}`]({config_url})."
    )


def configuration_help(new_config_url: str) -> str:
    return (
        "kubevalidator needs a tiny bit of configuration to know where to find the "
        "Kubernetes YAML in your Repository.\n\n"
        f"1. Check out the [documentation and examples]({DOCS_URL}).\n"
        f"1. Add your configuration to [`{CONFIG_FILE_NAME}`]({new_config_url})"
    )


def build_final_report(
    candidate_count: int,
    annotations: list[Annotation],
    list_items: list[str],
    started_at: datetime,
    completed_at: datetime,
    config_url: str = "",
) -> Report:
    """Aggregate a whole run.

    ``list_items`` are the Markdown reference lines of every candidate, in
    display order; they become the summary when any file was checked.
    """
    if candidate_count == 0:
        title = NO_MATCHING_FILES
        summary = no_matching_files_summary(config_url)
    else:
        title = title_for(candidate_count, len(annotations))
        summary = "\n".join(list_items)

    return Report(
        status=CheckStatus.completed,
        conclusion=conclusion_for(candidate_count, len(annotations)),
        title=title,
        summary=summary,
        annotations=list(annotations),
        started_at=started_at,
        completed_at=completed_at,
    )


def build_initial_report(started_at: datetime) -> Report:
    return Report(
        status=CheckStatus.in_progress,
        title=INITIAL_SUMMARY,
        summary=INITIAL_SUMMARY,
        started_at=started_at,
    )


def build_config_missing_report(
    started_at: datetime, completed_at: datetime, new_config_url: str,
) -> Report:
    return Report(
        conclusion=Conclusion.neutral,
        title="No configuration",
        summary=configuration_help(new_config_url),
        started_at=started_at,
        completed_at=completed_at,
    )


def build_config_invalid_report(
    started_at: datetime,
    completed_at: datetime,
    new_config_url: str,
    annotations: list[Annotation],
) -> Report:
    return Report(
        conclusion=Conclusion.failure,
        title="Configuration invalid",
        summary=configuration_help(new_config_url),
        annotations=list(annotations),
        started_at=started_at,
        completed_at=completed_at,
    )


def build_error_report(started_at: datetime, completed_at: datetime, error: Exception | str) -> Report:
    """Terminal report for a run that could not finish talking to GitHub."""
    return Report(
        conclusion=Conclusion.failure,
        title=RUN_ERROR_TITLE,
        summary=f"kubevalidator could not complete this check:\n\n```\n{error}\n```",
        started_at=started_at,
        completed_at=completed_at,
    )
