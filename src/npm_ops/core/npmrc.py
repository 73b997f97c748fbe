"""Generation of the per-run .npmrc file."""

import base64
import re
from enum import Enum
from typing import Callable, Iterable, Optional

from .models import RegistrySource, ToolVersion

NPMRC_FILE_NAME = ".npmrc"

# npm 9 dropped the username/_password pair in favour of _auth
MODERN_MIN_MAJOR_VERSION = 9

# User name npm registries expect when authenticating with an API key
API_KEY_USER_NAME = "api"

_SCHEME_PATTERN = re.compile(r"^https?://")


class ConfigFormat(str, Enum):
    """Credential layout of the generated .npmrc."""

    LEGACY = "legacy"  # npm 8 and older
    MODERN = "modern"  # npm 9 and newer


def select_format(version: Optional[ToolVersion]) -> ConfigFormat:
    """Pick the .npmrc format for an npm version; unknown versions get LEGACY."""
    if version is not None and version.major >= MODERN_MIN_MAJOR_VERSION:
        return ConfigFormat.MODERN
    return ConfigFormat.LEGACY


def normalize_registry(url: str) -> str:
    """Turn a registry URL into the host-relative key npm uses for credentials."""
    return _SCHEME_PATTERN.sub("//", url)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _legacy_credentials(registry_key: str, user_name: str, secret: str) -> list[str]:
    return [
        f"{registry_key}:username={user_name}",
        f'{registry_key}:_password="{_b64(secret)}"',
    ]


def _modern_credentials(registry_key: str, user_name: str, secret: str) -> list[str]:
    return [f'{registry_key}:_auth="{_b64(f"{user_name}:{secret}")}"']


_CREDENTIAL_WRITERS: dict[ConfigFormat, Callable[[str, str, str], list[str]]] = {
    ConfigFormat.LEGACY: _legacy_credentials,
    ConfigFormat.MODERN: _modern_credentials,
}


def _credentials(source: RegistrySource) -> tuple[str, str]:
    if source.user_name and source.user_name.strip():
        return source.user_name, source.password or ""
    return API_KEY_USER_NAME, source.api_key or source.password or ""


def render_npmrc(
    source: RegistrySource,
    config_format: ConfigFormat,
    scopes: Iterable[str] = (),
    allow_self_signed_certificate: bool = False,
) -> str:
    """
    Render .npmrc contents for a registry.

    Args:
        source: Registry and optional credentials
        config_format: Credential layout for the installed npm
        scopes: Scopes (e.g. "@acme") routed to the same registry
        allow_self_signed_certificate: Emit strict-ssl=false first

    Returns:
        File contents, one setting per line
    """
    lines = []
    if allow_self_signed_certificate:
        lines.append("strict-ssl=false")

    lines.append(f"registry={source.registry_url}")
    for scope in scopes:
        if scope.strip():
            lines.append(f"{scope.strip()}:registry={source.registry_url}")

    if source.has_credentials:
        lines.append("always-auth=true")
        user_name, secret = _credentials(source)
        writer = _CREDENTIAL_WRITERS[config_format]
        lines.extend(writer(normalize_registry(source.registry_url), user_name, secret))

    return "".join(f"{line}\n" for line in lines)
