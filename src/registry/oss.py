"""OSS adapter: a GitHub repository and its releases viewed as a package."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from common.http_client import get_json

from .base import RegistryAdapter
from .models import Ecosystem, Package, VersionInfo, VersionRecord

logger = logging.getLogger(__name__)


def release_download_url(release: Dict[str, Any]) -> Optional[str]:
    """First asset's browser download URL, else the release source tarball."""
    assets = release.get("assets")
    if assets and isinstance(assets, list) and isinstance(assets[0], dict):
        url = assets[0].get("browser_download_url")
        if url:
            return url
    return release.get("tarball_url") or None


class OSSAdapter(RegistryAdapter):
    """Adapter for ``owner/repo`` names resolved through the GitHub REST API.

    Releases come back newest-first, so the first tag is treated as latest.
    Repositories without releases fall back to their default branch.
    """

    label = "oss"

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.OSS

    def _repo_url(self, full_name: str) -> str:
        return f"{self.config.github_api_base}/repos/{full_name}"

    def tarball_url(self, full_name: str, ref: str) -> str:
        return f"{self._repo_url(full_name)}/tarball/{quote(ref, safe='')}"

    def fetch_package(self, name: str) -> Optional[Package]:
        headers = self.config.github_headers()
        timeout = self.config.request_timeout

        status, _, repo = get_json(self._repo_url(name), headers=headers, timeout=timeout)
        if status != 200 or not isinstance(repo, dict):
            logger.error("GitHub repo '%s' not found or API error.", name)
            return None

        # Sequential on purpose: a missing release list is not an error
        _, _, releases = get_json(f"{self._repo_url(name)}/releases", headers=headers, timeout=timeout)
        if not isinstance(releases, list):
            releases = []
        return self.build_package(name, repo, releases)

    def build_package(self, full_name: str, repo: Dict[str, Any], releases: List[Any]) -> Package:
        records = []
        for release in releases:
            if not isinstance(release, dict):
                continue
            tag = release.get("tag_name")
            if not tag:
                continue
            records.append(
                VersionRecord(
                    version=tag,
                    released_at=release.get("published_at"),
                    download_url=release_download_url(release),
                )
            )

        if records:
            latest = records[0].version
        else:
            latest = repo.get("default_branch") or "main"

        return Package(
            ecosystem=Ecosystem.OSS,
            name=full_name,
            normalized_name=full_name.lower(),
            latest_version=latest,
            summary=repo.get("description") or "",
            homepage=repo.get("homepage") or "",
            source_url=repo.get("html_url") or "",
            versions=tuple(records),
        )

    def resolve_version(self, package: Package, version: str) -> Optional[VersionInfo]:
        """Exact tag match, else a tarball of ``version`` as an arbitrary ref."""
        record = package.find_version(version)
        if record is not None:
            return VersionInfo(
                ecosystem=Ecosystem.OSS,
                name=package.name,
                version=record.version,
                download_url=record.download_url,
                released_at=record.released_at,
                dependencies=record.dependencies,
            )
        logger.info("No release tag '%s' found; using tarball for ref '%s'.", version, version)
        return VersionInfo(
            ecosystem=Ecosystem.OSS,
            name=package.name,
            version=version,
            download_url=self.tarball_url(package.name, version),
            released_at=None,
            dependencies=(),
        )
