"""Repository configuration."""

from kubevalidator.config.loader import (
    CONFIG_FILE_NAME,
    ConfigError,
    manifest_for,
    match_candidates,
    parse_config,
)
from kubevalidator.config.models import ConfigSpec, KubeValidatorConfig, ManifestConfig

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigSpec",
    "KubeValidatorConfig",
    "ManifestConfig",
    "manifest_for",
    "match_candidates",
    "parse_config",
]
