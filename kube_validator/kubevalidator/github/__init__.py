"""GitHub integration: content, pull request files and check runs."""

from kubevalidator.github.client import GitHubClient, RepositoryContent
from kubevalidator.github.handler import CheckSuiteHandler

__all__ = ["CheckSuiteHandler", "GitHubClient", "RepositoryContent"]
