"""Tests for artifact paths and idempotent downloads."""

import os
from unittest.mock import patch

import pytest
import requests

from common.errors import DownloadError
from artifacts import (
    STATUS_ALREADY_DOWNLOADED,
    STATUS_DOWNLOADED,
    artifact_filename,
    artifact_path,
    install_artifact,
    sanitize_component,
)
from registry.models import Ecosystem, VersionInfo


def _info(ecosystem=Ecosystem.PYPI, name="a", version="1.0.0", url="https://files.example/a-1.0.0.tar.gz"):
    return VersionInfo(ecosystem=ecosystem, name=name, version=version, download_url=url)


class TestPaths:
    """Test sanitization and destination layout."""

    def test_sanitize_replaces_unsafe_characters(self):
        assert sanitize_component('a\\b/c:d"e*f?g<h>i|j') == "a_b_c_d_e_f_g_h_i_j"

    def test_sanitize_keeps_safe_characters(self):
        assert sanitize_component("monolog-1.2.3_rc.1") == "monolog-1.2.3_rc.1"

    def test_filename_from_url_path(self):
        assert artifact_filename("https://x/pkgs/a-1.0.tgz?sig=1", "a", "1.0") == "a-1.0.tgz"

    def test_filename_synthesized_for_trailing_slash(self):
        assert artifact_filename("https://x/download/", "a", "1.0") == "a-1.0.tgz"

    def test_filename_synthesized_for_query_only_url(self):
        assert artifact_filename("https://x?file=1", "o/r", "v1") == "o_r-v1.tgz"

    def test_path_layout(self, tmp_path):
        path = artifact_path(str(tmp_path), Ecosystem.OSS, "psf/requests", "v2.31.0",
                             "https://api.github.com/repos/psf/requests/tarball/v2.31.0")
        assert path == os.path.join(str(tmp_path), "oss", "psf_requests", "v2.31.0", "v2.31.0")

    def test_composer_path_layout(self, tmp_path):
        path = artifact_path(str(tmp_path), Ecosystem.COMPOSER, "monolog/monolog", "3.5.0",
                             "https://api.github.com/repos/Seldaek/monolog/zipball/c915e2")
        assert path == os.path.join(str(tmp_path), "composer", "monolog_monolog", "3.5.0", "c915e2")


class TestInstallArtifact:
    """Test download, idempotence and failure cleanup."""

    @patch("common.http_client.requests.request")
    def test_second_install_skips_fetch(self, mock_request, make_response, config):
        mock_request.return_value = make_response(content=b"artifact-bytes")
        info = _info()

        first = install_artifact(info, config)
        mock_request.return_value = make_response(content=b"different-bytes")
        second = install_artifact(info, config)

        assert mock_request.call_count == 1
        assert first.status == STATUS_DOWNLOADED
        assert first.fetched
        assert first.bytes_written == len(b"artifact-bytes")
        assert second.status == STATUS_ALREADY_DOWNLOADED
        assert not second.fetched
        assert second.path == first.path
        with open(first.path, "rb") as fh:
            assert fh.read() == b"artifact-bytes"

    @patch("common.http_client.requests.request")
    def test_destination_under_meta_root(self, mock_request, make_response, config):
        mock_request.return_value = make_response(content=b"x")
        result = install_artifact(_info(), config)
        assert result.path == os.path.join(config.home, ".metapkg", "pypi", "a", "1.0.0", "a-1.0.0.tar.gz")
        assert 'pip install' in result.notes[0]

    def test_missing_download_url(self, config):
        with pytest.raises(DownloadError) as excinfo:
            install_artifact(_info(url=None), config)
        assert "No download_url" in str(excinfo.value)

    @patch("common.http_client.requests.request")
    def test_interrupted_download_leaves_no_file(self, mock_request, make_response, config):
        res = make_response()
        res.iter_content.side_effect = requests.ConnectionError("connection reset")
        mock_request.return_value = res
        info = _info()

        with pytest.raises(DownloadError):
            install_artifact(info, config)

        directory = os.path.join(config.meta_root, "pypi", "a", "1.0.0")
        assert os.listdir(directory) == []

    @patch("common.http_client.requests.request")
    def test_http_error_leaves_no_file(self, mock_request, make_response, config):
        mock_request.return_value = make_response(status_code=404)

        with pytest.raises(DownloadError) as excinfo:
            install_artifact(_info(), config)

        assert "status 404" in str(excinfo.value)
        assert not os.path.exists(config.meta_root)

    @patch("artifacts.download_file")
    def test_github_headers_only_for_oss(self, mock_download, token_config):
        mock_download.return_value = 1

        install_artifact(_info(), token_config)
        assert mock_download.call_args.kwargs["headers"] is None

        install_artifact(_info(ecosystem=Ecosystem.OSS, name="o/r", version="v1",
                               url="https://api.github.com/repos/o/r/tarball/v1"), token_config)
        headers = mock_download.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer ghp_testtoken"
        assert headers["Accept"] == "application/vnd.github+json"
