"""Crawl GitHub repositories by topic into a JSON report."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config import AppConfig
from constants import Constants
from repository.github import GitHubClient

from .report import write_report

logger = logging.getLogger(__name__)

SOURCE = "github_topic"


def clamp_max_results(max_results: Optional[int]) -> int:
    if max_results is None:
        return Constants.CRAWL_TOPIC_DEFAULT
    return max(1, min(int(max_results), Constants.CRAWL_TOPIC_MAX))


def topic_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "full_name": item.get("full_name") or "",
        "html_url": item.get("html_url") or "",
        "description": item.get("description") or "",
        "language": item.get("language") or "",
        "stars": item.get("stargazers_count") or 0,
        "topics": item.get("topics") or [],
    }


def collect_topic(topic: str, max_results: Optional[int], client: GitHubClient) -> List[Dict[str, Any]]:
    """Page through ``topic:{topic} is:public`` search results, stars descending."""
    limit = clamp_max_results(max_results)
    query = f"topic:{topic} is:public"
    # Page offsets are page * per_page, so per_page stays fixed across pages
    per_page = min(Constants.GITHUB_PER_PAGE_MAX, limit)
    results: List[Dict[str, Any]] = []
    page = 1
    while len(results) < limit:
        items = client.search_repositories(query, per_page=per_page, page=page)
        if not items:
            break
        for item in items:
            results.append(topic_item(item))
            if len(results) >= limit:
                break
        if len(items) < per_page:
            break
        page += 1
    return results


def crawl_topic(
    topic: str,
    max_results: Optional[int],
    out_file: str,
    config: Optional[AppConfig] = None,
    client: Optional[GitHubClient] = None,
) -> Optional[Dict[str, Any]]:
    """Collect repositories for ``topic`` and write the report.

    Returns:
        The report, or None when nothing was found (no file is written).
    """
    client = client or GitHubClient(config)
    results = collect_topic(topic, max_results, client)
    if not results:
        logger.info("No repositories found for topic '%s'", topic)
        return None
    report = {"source": SOURCE, "topic": topic, "count": len(results), "results": results}
    write_report(out_file, report)
    return report
