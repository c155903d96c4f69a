"""Abstract base for registry adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from config import AppConfig
from .models import Ecosystem, Package, VersionInfo

logger = logging.getLogger(__name__)


class RegistryAdapter(ABC):
    """Map one registry's response shape onto the common Package model.

    Subclasses implement ``fetch_package`` and may override
    ``resolve_version`` when their lookup differs from an exact match over
    ``Package.versions`` with per-version dependencies.
    """

    label = "registry"

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Ecosystem served by this adapter."""

    @abstractmethod
    def fetch_package(self, name: str) -> Optional[Package]:
        """Fetch and normalize ``name``; None when missing or on fetch failure."""

    def resolve_version(self, package: Package, version: str) -> Optional[VersionInfo]:
        """Exact-match ``version`` against the package's version records."""
        record = package.find_version(version)
        if record is None:
            logger.error(
                "Version '%s' not found for %s package '%s'",
                version,
                self.label,
                package.name,
            )
            return None
        return VersionInfo(
            ecosystem=self.ecosystem,
            name=package.name,
            version=record.version,
            download_url=record.download_url,
            released_at=record.released_at,
            dependencies=record.dependencies,
        )
