"""Composer adapter for the Packagist p2 metadata endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants
from common.http_client import get_json

from .base import RegistryAdapter
from .models import Dependency, Ecosystem, Package, VersionRecord

logger = logging.getLogger(__name__)


def is_platform_requirement(name: str) -> bool:
    """True for ``php`` and ``ext-*`` entries, which are not installable packages."""
    return name in Constants.COMPOSER_PLATFORM_PACKAGES or name.startswith(
        Constants.COMPOSER_PLATFORM_PREFIXES
    )


def parse_require(require: Any) -> Tuple[Dependency, ...]:
    """Build dependencies from a ``require`` map, skipping platform entries."""
    if not isinstance(require, dict):
        return ()
    deps: List[Dependency] = []
    for dep_name, dep_spec in require.items():
        if is_platform_requirement(dep_name):
            continue
        deps.append(
            Dependency(
                ecosystem=Ecosystem.COMPOSER,
                name=dep_name,
                version_spec=str(dep_spec) if dep_spec is not None else "",
            )
        )
    return tuple(deps)


class ComposerAdapter(RegistryAdapter):
    """Adapter for https://repo.packagist.org/p2/{vendor/package}.json.

    ``latest_version`` is the first entry Packagist returns, which follows
    the API's ordering and is not guaranteed to be the highest version.
    """

    label = "composer"

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.COMPOSER

    def package_url(self, full_name: str) -> str:
        return f"{Constants.REGISTRY_URL_PACKAGIST}{full_name}.json"

    def fetch_package(self, name: str) -> Optional[Package]:
        status, _, data = get_json(self.package_url(name), timeout=self.config.request_timeout)
        if status != 200 or not isinstance(data, dict):
            return None
        package = self.build_package(name, data)
        if package is None:
            logger.error("No versions returned for composer package '%s'", name)
        return package

    def build_package(self, full_name: str, data: Dict[str, Any]) -> Optional[Package]:
        """Normalize a decoded p2 document; None if the package key is absent."""
        entries = (data.get("packages") or {}).get(full_name)
        if not entries or not isinstance(entries, list):
            return None

        records = []
        latest = None
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            ver = entry.get("version")
            if not ver:
                continue
            if latest is None:
                latest = ver
            dist = entry.get("dist") if isinstance(entry.get("dist"), dict) else {}
            records.append(
                VersionRecord(
                    version=ver,
                    released_at=entry.get("time"),
                    download_url=dist.get("url"),
                    dependencies=parse_require(entry.get("require")),
                )
            )

        first = entries[0] if isinstance(entries[0], dict) else {}
        source = first.get("source") if isinstance(first.get("source"), dict) else {}
        return Package(
            ecosystem=Ecosystem.COMPOSER,
            name=full_name,
            normalized_name=full_name.lower(),
            latest_version=latest,
            summary=first.get("description") or "",
            homepage=first.get("homepage") or "",
            source_url=source.get("url") or "",
            versions=tuple(records),
        )
