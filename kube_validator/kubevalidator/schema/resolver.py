"""Resolve a SchemaSpec to schema locations and display names.

Everything here is a pure function of SchemaSpec fields.
"""

from __future__ import annotations

from kubevalidator.schema.models import SchemaSpec

SCHEMA_HOST = "https://raw.githubusercontent.com"
FALLBACK_NAME = "master"

DEFAULT_SCHEMA = SchemaSpec()


def _normalised_version(version: str) -> str:
    if not version or version == FALLBACK_NAME:
        return FALLBACK_NAME
    return version if version.startswith("v") else f"v{version}"


def schema_location(spec: SchemaSpec) -> str:
    """Return the directory URL holding the standalone schemas for ``spec``."""
    strict_suffix = "-strict" if spec.strict else ""
    return (
        f"{SCHEMA_HOST}/{spec.schema_fork}/{spec.config_type.value}-json-schema/master/"
        f"{_normalised_version(spec.version)}-standalone{strict_suffix}"
    )


def schema_url(location: str, kind: str, api_version: str, openshift: bool = False) -> str:
    """Return the URL of the schema for one resource kind.

    Kubernetes schema files carry a group/version suffix derived from
    ``apiVersion`` (``apps/v1`` -> ``deployment-apps-v1.json``); OpenShift
    schema files are named after the kind alone.
    """
    kind = kind.lower()
    if openshift:
        return f"{location}/{kind}.json"

    group_parts = api_version.split("/")
    suffix = "-" + group_parts[0].split(".")[0].lower()
    if len(group_parts) > 1:
        suffix += "-" + group_parts[1].lower()
    return f"{location}/{kind}{suffix}.json"


def display_name(spec: SchemaSpec) -> str:
    """Name shown in annotation titles: name, then version, then ``master``."""
    if spec.name:
        return spec.name
    if spec.version:
        return spec.version
    return FALLBACK_NAME
