"""Load and match repository configuration."""

from __future__ import annotations

import fnmatch
import logging
from io import StringIO

from pydantic import ValidationError
from ruamel.yaml import YAML, YAMLError

from kubevalidator.annotations.models import Annotation
from kubevalidator.candidate import Candidate, ChangedFile
from kubevalidator.config.models import KubeValidatorConfig, ManifestConfig
from kubevalidator.settings import CONFIG_FILE_NAME

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The configuration file exists but cannot be used."""

    def __init__(self, title: str, message: str, line: int = 1) -> None:
        self.title = title
        self.message = message
        self.line = line
        super().__init__(f"{title}: {message}")

    def to_annotation(self, blob_href: str = "") -> Annotation:
        return Annotation(
            path=CONFIG_FILE_NAME,
            blob_href=blob_href,
            start_line=self.line,
            end_line=self.line,
            title=self.title,
            message=self.message,
        )


def parse_config(data: bytes) -> KubeValidatorConfig:
    """Parse and validate configuration bytes.

    Raises ConfigError for YAML that cannot be read ("Unmarshaling error")
    and for content that does not match the configuration model
    ("Schema validation error").
    """
    yaml = YAML(typ="safe", pure=True)
    try:
        raw = yaml.load(StringIO(data.decode("utf-8")))
    except (YAMLError, UnicodeDecodeError) as e:
        line = 1
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
        raise ConfigError("Unmarshaling error", str(e), line) from e

    if not isinstance(raw, dict):
        raise ConfigError("Schema validation error", "Configuration must be a mapping")

    try:
        return KubeValidatorConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError("Schema validation error", str(e)) from e


def glob_variants(glob: str) -> list[str]:
    """Expand ``**/`` so it can also match zero directories.

    ``fnmatch`` already lets ``*`` cross ``/``, so the kept form covers one
    or more directories and the dropped form covers none.
    """
    head, sep, tail = glob.partition("**/")
    if not sep:
        return [glob]
    return [head + sep + rest for rest in glob_variants(tail)] + [
        head + rest for rest in glob_variants(tail)
    ]


def glob_matches(filename: str, glob: str) -> bool:
    return any(fnmatch.fnmatchcase(filename, g) for g in glob_variants(glob))


def manifest_for(filename: str, config: KubeValidatorConfig) -> ManifestConfig | None:
    """Return the first manifest entry whose glob matches ``filename``."""
    for manifest in config.spec.manifests:
        if glob_matches(filename, manifest.glob):
            return manifest
    return None


def match_candidates(files: list[ChangedFile], config: KubeValidatorConfig) -> list[Candidate]:
    """Build one Candidate per matching, non-removed file (first listing wins)."""
    candidates: dict[str, Candidate] = {}
    for file in files:
        if file.status == "removed" or file.filename in candidates:
            continue
        manifest = manifest_for(file.filename, config)
        if manifest is None:
            continue
        candidates[file.filename] = Candidate(file, manifest.schemas)
    logger.info("%d of %d changed file(s) match the configuration", len(candidates), len(files))
    return list(candidates.values())
