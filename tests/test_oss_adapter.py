"""Tests for the GitHub-backed OSS adapter."""

import logging
from unittest.mock import patch

from registry.models import Ecosystem
from registry.oss import OSSAdapter, release_download_url
from registry.resolver import get_version_info

REPO = {
    "full_name": "psf/requests",
    "description": "A simple, yet elegant, HTTP library.",
    "homepage": "https://requests.readthedocs.io",
    "html_url": "https://github.com/psf/requests",
    "default_branch": "main",
}

RELEASES = [
    {
        "tag_name": "v2.31.0",
        "published_at": "2023-05-22T15:12:44Z",
        "assets": [{"browser_download_url": "https://github.com/psf/requests/releases/download/v2.31.0/requests.tar.gz"}],
        "tarball_url": "https://api.github.com/repos/psf/requests/tarball/v2.31.0",
    },
    {
        "tag_name": "v2.30.0",
        "published_at": "2023-05-03T15:03:00Z",
        "assets": [],
        "tarball_url": "https://api.github.com/repos/psf/requests/tarball/v2.30.0",
    },
]


class TestReleaseDownloadUrl:
    """Test asset vs tarball preference."""

    def test_prefers_first_asset(self):
        assert release_download_url(RELEASES[0]).endswith("/requests.tar.gz")

    def test_falls_back_to_tarball(self):
        assert release_download_url(RELEASES[1]) == "https://api.github.com/repos/psf/requests/tarball/v2.30.0"

    def test_none_when_nothing_available(self):
        assert release_download_url({"assets": []}) is None


class TestBuildPackage:
    """Test repo plus releases normalization."""

    def test_latest_is_first_release(self):
        pkg = OSSAdapter().build_package("psf/requests", REPO, RELEASES)
        assert pkg.latest_version == "v2.31.0"
        assert [v.version for v in pkg.versions] == ["v2.31.0", "v2.30.0"]
        assert pkg.source_url == "https://github.com/psf/requests"

    def test_no_releases_uses_default_branch(self):
        repo = dict(REPO, default_branch="develop")
        pkg = OSSAdapter().build_package("psf/requests", repo, [])
        assert pkg.latest_version == "develop"
        assert pkg.versions == ()

    def test_no_default_branch_uses_main(self):
        pkg = OSSAdapter().build_package("o/r", {}, [])
        assert pkg.latest_version == "main"


class TestFetchPackage:
    """Test the two sequential GitHub calls."""

    @patch("registry.oss.get_json")
    def test_fetches_repo_then_releases(self, mock_get_json):
        mock_get_json.side_effect = [(200, {}, REPO), (200, {}, RELEASES)]

        pkg = OSSAdapter().fetch_package("psf/requests")

        assert pkg.latest_version == "v2.31.0"
        urls = [c[0][0] for c in mock_get_json.call_args_list]
        assert urls == [
            "https://api.github.com/repos/psf/requests",
            "https://api.github.com/repos/psf/requests/releases",
        ]

    @patch("registry.oss.get_json")
    def test_release_failure_is_tolerated(self, mock_get_json):
        mock_get_json.side_effect = [(200, {}, REPO), (500, {}, None)]
        pkg = OSSAdapter().fetch_package("psf/requests")
        assert pkg is not None
        assert pkg.latest_version == "main"

    @patch("registry.oss.get_json")
    def test_missing_repo(self, mock_get_json, caplog):
        mock_get_json.return_value = (404, {}, None)
        with caplog.at_level("ERROR"):
            assert OSSAdapter().fetch_package("nobody/nothing") is None
        assert "GitHub repo 'nobody/nothing' not found" in caplog.text
        assert mock_get_json.call_count == 1


class TestResolveVersion:
    """Test tag matching and the tarball fallback."""

    def test_exact_tag(self):
        adapter = OSSAdapter()
        pkg = adapter.build_package("psf/requests", REPO, RELEASES)
        info = adapter.resolve_version(pkg, "v2.30.0")
        assert info.released_at == "2023-05-03T15:03:00Z"
        assert info.download_url.endswith("/tarball/v2.30.0")

    def test_unknown_ref_falls_back_to_tarball(self, caplog):
        pkg = OSSAdapter().build_package("psf/requests", REPO, RELEASES)

        with caplog.at_level(logging.INFO):
            info = get_version_info("oss", pkg, "nonexistent-ref")

        assert info is not None
        assert info.ecosystem == Ecosystem.OSS
        assert info.download_url == "https://api.github.com/repos/psf/requests/tarball/nonexistent-ref"
        assert info.released_at is None
        assert info.dependencies == ()
        fallback = [r for r in caplog.records if "using tarball" in r.getMessage()]
        assert fallback and all(r.levelno == logging.INFO for r in fallback)
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_ref_is_url_quoted(self):
        pkg = OSSAdapter().build_package("o/r", REPO, [])
        info = OSSAdapter().resolve_version(pkg, "feature/x y")
        assert info.download_url == "https://api.github.com/repos/o/r/tarball/feature%2Fx%20y"
