"""PyPI adapter: project JSON to Package, plus requires_dist parsing."""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple, Union
from urllib.parse import quote

from packaging.version import InvalidVersion, Version

from constants import Constants
from common.http_client import get_json

from .base import RegistryAdapter
from .models import Dependency, Ecosystem, Package, VersionInfo, VersionRecord

logger = logging.getLogger(__name__)

# "name (spec)" with everything after ";" already removed
_REQUIREMENT_RE = re.compile(r"^([^(\s]+)\s*(\((.*)\))?$")


def parse_requires_dist(entry: str) -> Optional[Dependency]:
    """Best-effort parse of one ``requires_dist`` string.

    Accepts only ``name`` or ``name (spec)``; the environment marker after
    the first ``;`` is discarded. Anything else yields None rather than an
    error, e.g. ``"idna<4,>=2.5"`` (no parentheses) does not match.
    """
    if not isinstance(entry, str):
        return None
    head = entry.split(";", 1)[0].strip()
    match = _REQUIREMENT_RE.match(head)
    if not match:
        return None
    spec = match.group(3)
    return Dependency(
        ecosystem=Ecosystem.PYPI,
        name=match.group(1),
        version_spec=spec.strip() if spec else "",
    )


def parse_requires_dist_list(entries: Optional[Iterable[str]]) -> Tuple[Dependency, ...]:
    if not entries or isinstance(entries, (str, bytes)):
        return ()
    deps: List[Dependency] = []
    for entry in entries:
        dep = parse_requires_dist(entry)
        if dep is not None:
            deps.append(dep)
    return tuple(deps)


def version_sort_key(version: str) -> Tuple[int, Union[Version, str]]:
    """Sort key following PyPI's own version ordering (PEP 440).

    Strings that are not valid versions sort before every valid one and
    lexicographically among themselves.
    """
    try:
        return (1, Version(version))
    except InvalidVersion:
        return (0, version)


def sort_versions(records: Iterable[VersionRecord]) -> Tuple[VersionRecord, ...]:
    return tuple(sorted(records, key=lambda r: version_sort_key(r.version)))


class PyPIAdapter(RegistryAdapter):
    """Adapter for https://pypi.org JSON API."""

    label = "PyPI"

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.PYPI

    def package_url(self, name: str) -> str:
        return f"{Constants.REGISTRY_URL_PYPI}{quote(name, safe='')}/json"

    def fetch_package(self, name: str) -> Optional[Package]:
        """Fetch ``name`` from PyPI; None on 404, transport or parse failure."""
        url = self.package_url(name)
        status, _, data = get_json(
            url,
            headers={"Accept": "application/json"},
            timeout=self.config.request_timeout,
        )
        if status != 200 or not isinstance(data, dict):
            logger.debug("PyPI lookup for %s returned status %s", name, status)
            return None
        return self.build_package(name, data)

    def build_package(self, requested_name: str, data: dict) -> Package:
        """Normalize a decoded PyPI project document."""
        info = data.get("info") or {}
        releases = data.get("releases") or {}

        records = []
        for ver, files in releases.items():
            if not files or not isinstance(files, list):
                continue
            first = files[0] if isinstance(files[0], dict) else {}
            records.append(
                VersionRecord(
                    version=ver,
                    released_at=first.get("upload_time_iso_8601"),
                    download_url=first.get("url"),
                )
            )

        name = info.get("name") or requested_name
        return Package(
            ecosystem=Ecosystem.PYPI,
            name=name,
            normalized_name=name.lower(),
            latest_version=info.get("version") or None,
            summary=info.get("summary") or "",
            homepage=info.get("home_page") or "",
            source_url=f"{Constants.PYPI_PROJECT_URL}{name}/",
            versions=sort_versions(records),
            dependencies=parse_requires_dist_list(info.get("requires_dist")),
        )

    def resolve_version(self, package: Package, version: str) -> Optional[VersionInfo]:
        """Exact match; the project-wide dependency list is attached."""
        record = package.find_version(version)
        if record is None:
            logger.error("Version '%s' not found for PyPI package '%s'", version, package.name)
            return None
        return VersionInfo(
            ecosystem=Ecosystem.PYPI,
            name=package.name,
            version=version,
            download_url=record.download_url,
            released_at=record.released_at,
            dependencies=package.dependencies,
        )
