"""Schema spec data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfigType(str, Enum):
    """Platform variant whose JSON schemas are used."""

    kubernetes = "kubernetes"
    openshift = "openshift"


class LineNumberMode(str, Enum):
    """Whether violations are localized to source lines."""

    off = "off"
    default = "default"


class SchemaSpec(BaseModel):
    """A declarative reference to one versioned set of schemas."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = "master"
    schema_fork: str = Field("garethr", alias="schemaFork")
    config_type: ConfigType = Field(ConfigType.kubernetes, alias="configType")
    strict: bool = True
    name: str | None = None
    line_numbers: LineNumberMode = Field(LineNumberMode.default, alias="lineNumbers")

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> object:
        # YAML reads `version: 1.10` as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("config_type", mode="before")
    @classmethod
    def _alias_openstack(cls, value: object) -> object:
        if value == "openstack":
            return ConfigType.openshift
        return value

    @field_validator("line_numbers", mode="before")
    @classmethod
    def _coerce_line_numbers(cls, value: object) -> object:
        if isinstance(value, bool):
            return LineNumberMode.default if value else LineNumberMode.off
        return value

    @property
    def openshift(self) -> bool:
        return self.config_type == ConfigType.openshift

    @property
    def pinned(self) -> bool:
        """True when pinned to a numbered release rather than master."""
        return bool(self.version) and self.version != "master"
