"""Artifact installer: deterministic cache paths and idempotent downloads.

Artifacts land under ``{root}/{ecosystem}/{safe name}/{safe version}/{file}``.
An existing file at that path is reported as already downloaded and never
re-fetched or re-validated.
"""
from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from constants import Constants
from config import AppConfig
from common.errors import DownloadError
from common.http_client import download_file
from registry.models import Ecosystem, VersionInfo

logger = logging.getLogger(__name__)

STATUS_DOWNLOADED = "downloaded"
STATUS_ALREADY_DOWNLOADED = "already_downloaded"

_UNSAFE_TABLE = str.maketrans({ch: "_" for ch in Constants.UNSAFE_PATH_CHARS})


def sanitize_component(value: str) -> str:
    """Replace ``\\ / : " * ? < > |`` with ``_`` for use as one path segment."""
    return str(value).translate(_UNSAFE_TABLE)


def artifact_filename(url: str, name: str, version: str) -> str:
    """Basename of the URL path, or ``{name}-{version}.tgz`` when it has none."""
    path = urlparse(url).path or ""
    base = posixpath.basename(path)
    if base in ("", "/"):
        return sanitize_component(f"{name}-{version}.tgz")
    return base


def artifact_dir(root: str, ecosystem: Ecosystem, name: str, version: str) -> str:
    return os.path.join(root, ecosystem.value, sanitize_component(name), sanitize_component(version))


def artifact_path(root: str, ecosystem: Ecosystem, name: str, version: str, url: str) -> str:
    return os.path.join(artifact_dir(root, ecosystem, name, version), artifact_filename(url, name, version))


def guidance(ecosystem: Ecosystem, dest_path: str) -> List[str]:
    """Advisory text printed after a successful install."""
    if ecosystem == Ecosystem.PYPI:
        return [f'You can now install with e.g.:  pip install "{dest_path}"']
    if ecosystem == Ecosystem.COMPOSER:
        return ["You can reference this dist in composer.json or unpack as needed."]
    return ["This is a GitHub release asset/tarball; unpack or use as appropriate."]


@dataclass
class InstallResult:
    """Outcome of one install; ``fetched`` is False when the cache was hit."""
    ecosystem: Ecosystem
    name: str
    version: str
    url: str
    path: str
    directory: str
    status: str
    bytes_written: int = 0
    notes: List[str] = field(default_factory=list)

    @property
    def fetched(self) -> bool:
        return self.status == STATUS_DOWNLOADED

    def to_dict(self) -> dict:
        return {
            "ecosystem": self.ecosystem.value,
            "name": self.name,
            "version": self.version,
            "url": self.url,
            "path": self.path,
            "directory": self.directory,
            "status": self.status,
            "bytes_written": self.bytes_written,
            "notes": list(self.notes),
        }


def install_artifact(info: VersionInfo, config: AppConfig, root: Optional[str] = None) -> InstallResult:
    """Download ``info.download_url`` into the cache unless already present.

    Args:
        info: Resolved version to install.
        config: Supplies the cache root, timeouts and GitHub headers.
        root: Overrides ``config.meta_root``.

    Raises:
        DownloadError: If the version has no download URL or the fetch fails.
    """
    url = info.download_url
    if not url:
        raise DownloadError(
            f"No download_url for {info.ecosystem.value} package '{info.name}' version '{info.version}'"
        )

    root = root or config.meta_root
    directory = artifact_dir(root, info.ecosystem, info.name, info.version)
    dest_path = os.path.join(directory, artifact_filename(url, info.name, info.version))

    if os.path.exists(dest_path):
        logger.info("Already downloaded: %s", dest_path)
        return InstallResult(
            ecosystem=info.ecosystem,
            name=info.name,
            version=info.version,
            url=url,
            path=dest_path,
            directory=directory,
            status=STATUS_ALREADY_DOWNLOADED,
            notes=guidance(info.ecosystem, dest_path),
        )

    logger.info("Downloading %s:%s:%s", info.ecosystem.value, info.name, info.version)
    logger.info("  URL  : %s", url)
    logger.info("  Dest : %s", dest_path)

    headers = config.github_headers() if info.ecosystem == Ecosystem.OSS else None
    written = download_file(url, dest_path, headers=headers, timeout=config.download_timeout)
    return InstallResult(
        ecosystem=info.ecosystem,
        name=info.name,
        version=info.version,
        url=url,
        path=dest_path,
        directory=directory,
        status=STATUS_DOWNLOADED,
        bytes_written=written,
        notes=guidance(info.ecosystem, dest_path),
    )
