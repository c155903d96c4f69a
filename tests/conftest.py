"""Shared fixtures for MetaPkg tests."""

import json
from unittest.mock import MagicMock

import pytest

from config import AppConfig


def _build_response(status_code=200, json_data=None, text=None, content=b"", headers=None):
    res = MagicMock()
    res.status_code = status_code
    res.ok = 200 <= status_code < 300
    res.headers = headers or {}
    if text is None and json_data is not None:
        text = json.dumps(json_data)
    res.text = text or ""
    if json_data is not None:
        res.json.return_value = json_data
    else:
        res.json.side_effect = ValueError("No JSON object could be decoded")
    res.iter_content.return_value = [content] if content else []
    return res


@pytest.fixture
def make_response():
    """Factory for stand-ins of requests.Response."""
    return _build_response


@pytest.fixture
def config(tmp_path):
    """Config rooted in a temporary home, without a token."""
    return AppConfig(home=str(tmp_path))


@pytest.fixture
def token_config(tmp_path):
    return AppConfig(home=str(tmp_path), github_token="ghp_testtoken")
