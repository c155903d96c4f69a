"""Registry adapters normalizing PyPI, Packagist and GitHub metadata."""

from .models import Dependency, Ecosystem, Package, VersionInfo, VersionRecord
from .base import RegistryAdapter
from .pypi import PyPIAdapter
from .composer import ComposerAdapter
from .oss import OSSAdapter
from .resolver import get_adapter, get_package, get_version_info, resolve_version

__all__ = [
    "Dependency",
    "Ecosystem",
    "Package",
    "VersionInfo",
    "VersionRecord",
    "RegistryAdapter",
    "PyPIAdapter",
    "ComposerAdapter",
    "OSSAdapter",
    "get_adapter",
    "get_package",
    "get_version_info",
    "resolve_version",
]
