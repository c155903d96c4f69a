"""Ecosystem dispatch and version selection.

The set of adapters is closed: one per Ecosystem member. Lookups by tag
are case-insensitive and an unknown tag is reported as not found.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Type, Union

from config import AppConfig
from common.errors import UnsupportedEcosystemError

from .base import RegistryAdapter
from .composer import ComposerAdapter
from .models import Ecosystem, Package, VersionInfo
from .oss import OSSAdapter
from .pypi import PyPIAdapter

logger = logging.getLogger(__name__)

ADAPTERS: Dict[Ecosystem, Type[RegistryAdapter]] = {
    Ecosystem.PYPI: PyPIAdapter,
    Ecosystem.COMPOSER: ComposerAdapter,
    Ecosystem.OSS: OSSAdapter,
}

EcosystemLike = Union[Ecosystem, str]


def get_adapter(ecosystem: EcosystemLike, config: Optional[AppConfig] = None) -> RegistryAdapter:
    """Return the adapter for ``ecosystem``.

    Raises:
        UnsupportedEcosystemError: For tags outside pypi/composer/oss.
    """
    eco = ecosystem if isinstance(ecosystem, Ecosystem) else Ecosystem.parse(ecosystem)
    return ADAPTERS[eco](config)


def get_package(ecosystem: EcosystemLike, name: str, config: Optional[AppConfig] = None) -> Optional[Package]:
    """Fetch ``name`` from ``ecosystem``; None when unsupported or not found."""
    try:
        adapter = get_adapter(ecosystem, config)
    except UnsupportedEcosystemError as exc:
        logger.error("%s", exc)
        return None
    return adapter.fetch_package(name)


def get_version_info(
    ecosystem: EcosystemLike,
    package: Package,
    version: str,
    config: Optional[AppConfig] = None,
) -> Optional[VersionInfo]:
    """Resolve ``version`` of an already fetched package."""
    try:
        adapter = get_adapter(ecosystem, config)
    except UnsupportedEcosystemError as exc:
        logger.error("%s", exc)
        return None
    return adapter.resolve_version(package, version)


def resolve_version(package: Package, version: Optional[str]) -> Optional[str]:
    """Return ``version`` or, when omitted, the package's latest version.

    Substituting latest is announced at INFO; a package without any latest
    version yields None.
    """
    if version:
        return version
    latest = package.latest_version
    logger.info("No version specified; using latest: %s", latest or "")
    if not latest:
        logger.error("No version available.")
        return None
    return latest
