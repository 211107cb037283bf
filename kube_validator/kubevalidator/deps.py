"""Shared FastAPI dependencies."""

from __future__ import annotations

from kubevalidator.github.client import GitHubClient
from kubevalidator.github.handler import CheckSuiteHandler
from kubevalidator.settings import Settings

_settings: Settings | None = None
_github_client: GitHubClient | None = None
_check_suite_handler: CheckSuiteHandler | None = None


def get_settings() -> Settings:
    """FastAPI dependency: return the process Settings."""
    assert _settings is not None, "Settings not initialised"
    return _settings


def get_github_client() -> GitHubClient:
    """FastAPI dependency: return the shared GitHubClient."""
    assert _github_client is not None, "GitHubClient not initialised"
    return _github_client


def get_check_suite_handler() -> CheckSuiteHandler:
    """FastAPI dependency: return the shared CheckSuiteHandler."""
    assert _check_suite_handler is not None, "CheckSuiteHandler not initialised"
    return _check_suite_handler
