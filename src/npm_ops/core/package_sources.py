"""Resolution of package-source identifiers to npm registries."""

from typing import Optional

from ..agents.abc import PackageSourceLookup
from .models import PackageSourceReference, RegistrySource
from .oplog import OperationLog

NPM_SOURCE_TYPE = "npm"


async def resolve_registry_source(
    identifier: str, lookup: PackageSourceLookup, log: OperationLog
) -> Optional[RegistrySource]:
    """
    Resolve a package source name or registry URL.

    Literal URLs are used directly, without credentials. Names are looked
    up in the package-source store and must refer to an npm source.

    Args:
        identifier: Source name or http(s) URL
        lookup: Package-source store
        log: Operation log that receives resolution errors

    Returns:
        The registry, or None after logging why it could not be resolved
    """
    reference = PackageSourceReference(identifier.strip())
    if reference.is_url:
        return RegistrySource(registry_url=reference.value, source_id=reference.value)

    source = await lookup.get_package_source(reference)
    if source is None:
        log.error(f'Package source "{identifier}" not found.')
        return None

    if source.source_type != NPM_SOURCE_TYPE:
        log.error(
            f'Package source "{identifier}" is a {source.source_type} source; '
            "it must be a npm source for use with this operation."
        )
        return None

    return RegistrySource(
        registry_url=source.url,
        user_name=source.user_name,
        password=source.password,
        api_key=source.api_key,
        source_id=source.name,
    )


def list_npm_sources(lookup: PackageSourceLookup) -> list[str]:
    """Names of the npm sources in the store, for suggestions and listings."""
    return [
        source.name
        for source in lookup.list_package_sources()
        if source.source_type == NPM_SOURCE_TYPE
    ]
