"""Repository configuration models (``.github/kubevalidator.yaml``)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from kubevalidator.schema.models import SchemaSpec


class ManifestConfig(BaseModel):
    """A glob of manifest files and the schemas they are validated against."""

    model_config = ConfigDict(extra="forbid")

    glob: str = Field(..., min_length=1)
    schemas: list[SchemaSpec] = Field(default_factory=list)


class ConfigSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    manifests: list[ManifestConfig] = Field(..., min_length=1)


class KubeValidatorConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field("v1beta1", alias="apiVersion")
    kind: Literal["KubeValidator"] = "KubeValidator"
    spec: ConfigSpec
