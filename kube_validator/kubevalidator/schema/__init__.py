"""Schema references and their resolution to concrete locations."""

from kubevalidator.schema.models import ConfigType, LineNumberMode, SchemaSpec
from kubevalidator.schema.resolver import (
    DEFAULT_SCHEMA,
    display_name,
    schema_location,
    schema_url,
)

__all__ = [
    "ConfigType",
    "DEFAULT_SCHEMA",
    "LineNumberMode",
    "SchemaSpec",
    "display_name",
    "schema_location",
    "schema_url",
]
