"""Loading of YAML configuration and package-source files."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .models import NpmOptions, PackageSource

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def load_package_sources(path: Path) -> list[PackageSource]:
    """
    Load package sources from a YAML file.

    Expected format:

        sources:
          - name: internal-npm
            type: npm
            url: https://proget.example.com/npm/internal/
            username: ci
            password: s3cret
          - name: public
            url: https://registry.npmjs.org/
            api_key: abc123

    `type` defaults to npm.

    Raises:
        ConfigError: If the file cannot be read or a source is invalid
    """
    data = _load_yaml(path)

    sources = []
    for index, source_data in enumerate(data.get("sources") or []):
        try:
            sources.append(PackageSource.model_validate(source_data))
        except ValidationError as e:
            raise ConfigError(f"{path}: invalid source #{index + 1}: {e}") from e

    logger.info(f"Loaded {len(sources)} package source(s) from {path}")
    return sources


def load_options(path: Optional[Path], **overrides: Any) -> NpmOptions:
    """
    Build NpmOptions from an optional YAML file plus explicit overrides.

    Keys in the file use the NpmOptions field names. Overrides that are
    None, False or empty leave the file's value in place, so unset command
    line flags do not clear configured values.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    data = _load_yaml(path) if path else {}

    for key, value in overrides.items():
        if value is None or value is False or value == () or value == []:
            continue
        data[key] = list(value) if isinstance(value, tuple) else value

    try:
        return NpmOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid npm options: {e}") from e
