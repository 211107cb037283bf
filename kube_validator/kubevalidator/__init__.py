"""Kubernetes YAML validation check with source-line localization."""

__version__ = "0.1.0"
