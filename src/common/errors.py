"""Exception types shared by registry, repository and installer code."""

from __future__ import annotations

from typing import Iterable, Optional


class MetaPkgError(Exception):
    """Base class for reportable, non-fatal failures."""


class UnsupportedEcosystemError(MetaPkgError, ValueError):
    """Raised when an ecosystem tag is not one of pypi, composer, oss."""

    def __init__(self, tag: str):
        super().__init__(f"Unsupported ecosystem '{tag}'")
        self.tag = tag


class TokenRequiredError(MetaPkgError):
    """Raised before any request when a write operation has no token."""

    def __init__(self, action: str):
        super().__init__(f"GITHUB_TOKEN env var is required to {action}.")
        self.action = action


class CategoryNotFoundError(MetaPkgError):
    """Raised when a discussion category name has no match in the repository."""

    def __init__(self, category: str, available: Iterable[str] = ()):
        names = sorted(available)
        message = f"Discussion category '{category}' not found"
        if names:
            message += f" (available: {', '.join(names)})"
        super().__init__(message)
        self.category = category
        self.available = names


class GitHubApiError(MetaPkgError):
    """Raised when a GitHub write call fails or returns an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DownloadError(MetaPkgError):
    """Raised when an artifact cannot be fetched or persisted."""
