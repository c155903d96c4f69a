"""Shared HTTP helpers used across registry, repository and crawler clients.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. This module is dependency-light and can be
safely imported by registry/*, repository/* and crawler/* without cycles.

Every call is a single attempt: there is no retry loop and no response
cache. Transport and decode failures are logged and surfaced to callers as
a zero/None result instead of terminating the process.
"""
from __future__ import annotations

import logging
import os
import tempfile
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.errors import DownloadError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _request(
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> Optional[requests.Response]:
    """Issue one request, returning None on transport errors."""
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action=method,
                    target=safe_target,
                ),
            )
        try:
            res = requests.request(
                method,
                url,
                headers=headers,
                timeout=timeout or Constants.REQUEST_TIMEOUT,
                **kwargs,
            )
        except requests.Timeout:
            logger.error(
                "HTTP %s timed out after %s seconds for %s",
                method,
                timeout or Constants.REQUEST_TIMEOUT,
                safe_target,
            )
            return None
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("HTTP %s failed for %s: %s", method, safe_target, exc)
            return None

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action=method,
                    outcome="success" if res.ok else "non_2xx",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                ),
            )
        return res


def _decode(method: str, url: str, res: Optional[requests.Response]) -> Tuple[int, Dict[str, str], Optional[Any]]:
    if res is None:
        return 0, {}, None
    response_headers = dict(res.headers)
    if not res.ok:
        logger.error("HTTP %s failed for %s (status %s)", method, safe_url(url), res.status_code)
        return res.status_code, response_headers, None
    if not res.text:
        return res.status_code, response_headers, None
    try:
        return res.status_code, response_headers, res.json()
    except ValueError as exc:
        logger.error("JSON decode error for %s: %s", safe_url(url), exc)
        return res.status_code, response_headers, None


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a GET request and parse the JSON response.

    Args:
        url: Target URL
        headers: Optional request headers
        timeout: Seconds before giving up; defaults to Constants.REQUEST_TIMEOUT
        **kwargs: Additional requests parameters (e.g. params)

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none). A status of
        0 means the request never produced a response.
    """
    res = _request("GET", url, headers=headers, timeout=timeout, **kwargs)
    return _decode("GET", url, res)


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a POST with a JSON body and parse the JSON response.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none).
    """
    res = _request("POST", url, headers=headers, timeout=timeout, json=payload)
    return _decode("POST", url, res)


def get_text(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Fetch ``url`` and return the body as text, or None on any failure."""
    res = _request("GET", url, headers=headers, timeout=timeout)
    if res is None:
        return None
    if not res.ok:
        logger.error("HTTP GET failed for %s (status %s)", safe_url(url), res.status_code)
        return None
    return res.text


def download_file(
    url: str,
    dest_path: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> int:
    """Stream ``url`` into ``dest_path`` atomically.

    The body is written to a temporary file in the destination directory and
    renamed over ``dest_path`` only after the transfer completed, so a failed
    download never leaves a partial file at the final path.

    Returns:
        Number of bytes written.

    Raises:
        DownloadError: On transport errors, non-2xx responses or write errors.
    """
    safe_target = safe_url(url)
    directory = os.path.dirname(dest_path) or "."

    res = _request(
        "GET",
        url,
        headers=headers,
        timeout=timeout or Constants.DOWNLOAD_TIMEOUT,
        stream=True,
    )
    if res is None:
        raise DownloadError(f"Download failed for {safe_target}")
    if not res.ok:
        res.close()
        raise DownloadError(f"Download failed for {safe_target} (status {res.status_code})")

    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".part-", dir=directory)
    except OSError as exc:
        res.close()
        raise DownloadError(f"Cannot create {dest_path}: {exc}") from exc
    written = 0
    try:
        with os.fdopen(fd, "wb") as fh:
            for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    fh.write(chunk)
                    written += len(chunk)
        os.replace(tmp_path, dest_path)
    except (OSError, requests.RequestException) as exc:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise DownloadError(f"Failed to save {safe_target} to {dest_path}: {exc}") from exc
    finally:
        res.close()
    return written
