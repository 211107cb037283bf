"""Process settings loaded from the environment."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

CONFIG_FILE_NAME = ".github/kubevalidator.yaml"


class Settings(BaseModel):
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    max_concurrency: int = Field(8, ge=1)
    http_timeout: float = Field(30.0, gt=0)
    webhook_secret: str = ""
    dev_mode: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            github_token=os.environ.get("GITHUB_TOKEN", ""),
            github_api_url=os.environ.get("GITHUB_API_URL", "https://api.github.com"),
            max_concurrency=int(os.environ.get("KUBEVALIDATOR_MAX_CONCURRENCY", "8")),
            http_timeout=float(os.environ.get("KUBEVALIDATOR_HTTP_TIMEOUT", "30")),
            webhook_secret=os.environ.get("KUBEVALIDATOR_WEBHOOK_SECRET", ""),
            dev_mode=os.environ.get("KUBEVALIDATOR_DEV_MODE", "").lower() == "true",
        )
