"""Best-effort scraper for the GitHub trending page.

The page has no stable contract; when its markup changes, blocks that no
longer expose a repository link are skipped rather than raising.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from config import AppConfig
from constants import Constants
from common.http_client import get_text

from .report import write_report

logger = logging.getLogger(__name__)

_REPO_HREF_RE = re.compile(r"^/([^/\s]+/[^/\s?#]+)/?$")
_STARS_RE = re.compile(r"([\d,]+)\s+stars?", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")

SOURCE = "github_trending"


def _clean(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def _repo_slug(block) -> Optional[str]:
    candidates = block.select("h2 a[href], h1 a[href]") or block.find_all("a", href=True)
    for anchor in candidates:
        match = _REPO_HREF_RE.match(anchor.get("href", ""))
        if match:
            return match.group(1)
    return None


def _stars(block) -> str:
    link = block.select_one('a[href$="/stargazers"]')
    if link is not None:
        text = _clean(link.get_text(" "))
        if text:
            return text
    match = _STARS_RE.search(block.get_text(" "))
    return match.group(1) if match else ""


def parse_trending(html: str) -> List[Dict[str, Any]]:
    """Extract ``{repo, link, description, stars}`` from trending HTML."""
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for block in soup.select(".Box-row"):
        repo = _repo_slug(block)
        if not repo:
            continue
        para = block.find("p")
        results.append({
            "repo": repo,
            "link": f"{Constants.GITHUB_WEB_BASE}/{repo}",
            "description": _clean(para.get_text(" ")) if para is not None else "",
            "stars": _stars(block),
        })
    return results


def crawl_trending(out_file: str, config: Optional[AppConfig] = None) -> Optional[Dict[str, Any]]:
    """Fetch the trending page and store the report at ``out_file``.

    Returns:
        The report written, or None when the page could not be fetched.
    """
    config = config or AppConfig()
    html = get_text(
        Constants.GITHUB_TRENDING_URL,
        headers={"User-Agent": config.user_agent},
        timeout=config.request_timeout,
    )
    if not html:
        logger.error("Failed to fetch GitHub Trending")
        return None
    results = parse_trending(html)
    report = {"source": SOURCE, "count": len(results), "results": results}
    write_report(out_file, report)
    return report
