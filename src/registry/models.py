"""Data models shared by every registry adapter.

All records are immutable and built fresh from a live fetch; nothing here
is cached or persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from common.errors import UnsupportedEcosystemError


class Ecosystem(Enum):
    """Enum for supported ecosystems."""
    PYPI = "pypi"
    COMPOSER = "composer"
    OSS = "oss"

    @classmethod
    def parse(cls, tag: str) -> "Ecosystem":
        """Map a case-insensitive CLI tag to an Ecosystem.

        Raises:
            UnsupportedEcosystemError: If the tag names no known ecosystem.
        """
        try:
            return cls(str(tag or "").strip().lower())
        except ValueError:
            raise UnsupportedEcosystemError(tag) from None


@dataclass(frozen=True)
class Dependency:
    """A declared requirement; version_spec is opaque display text."""
    ecosystem: Ecosystem
    name: str
    version_spec: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ecosystem": self.ecosystem.value,
            "name": self.name,
            "version_spec": self.version_spec,
        }


@dataclass(frozen=True)
class VersionRecord:
    """Lightweight per-release entry listed on a Package."""
    version: str
    released_at: Optional[str] = None
    download_url: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["dependencies"] = [d.to_dict() for d in self.dependencies]
        return data


@dataclass(frozen=True)
class Package:
    """One resolved registry entry.

    ``dependencies`` is only populated for PyPI, whose registry reports a
    single list for the whole project. Composer and OSS carry dependencies
    on each VersionRecord instead.
    """
    ecosystem: Ecosystem
    name: str
    normalized_name: str
    latest_version: Optional[str] = None
    summary: str = ""
    homepage: str = ""
    source_url: str = ""
    versions: Tuple[VersionRecord, ...] = ()
    dependencies: Tuple[Dependency, ...] = ()

    def find_version(self, version: str) -> Optional[VersionRecord]:
        """Return the record whose version string equals ``version`` exactly."""
        for record in self.versions:
            if record.version == version:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ecosystem": self.ecosystem.value,
            "name": self.name,
            "normalized_name": self.normalized_name,
            "latest_version": self.latest_version,
            "summary": self.summary,
            "homepage": self.homepage,
            "source_url": self.source_url,
            "versions": [v.to_dict() for v in self.versions],
            "dependencies": [d.to_dict() for d in self.dependencies],
        }


@dataclass(frozen=True)
class VersionInfo:
    """One concrete release; download_url None means not installable."""
    ecosystem: Ecosystem
    name: str
    version: str
    download_url: Optional[str] = None
    released_at: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ecosystem": self.ecosystem.value,
            "name": self.name,
            "version": self.version,
            "download_url": self.download_url,
            "released_at": self.released_at,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }
