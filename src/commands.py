"""Command handlers shared by the CLI and the web form.

Each handler performs one user-level action and returns a CommandResult.
Handlers never print and never exit; not-found and transport failures are
reported through the result (and the log), not raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from config import AppConfig
from constants import Constants
from common.errors import MetaPkgError, UnsupportedEcosystemError
from crawler import crawl_topic, crawl_trending
from artifacts import install_artifact
from registry import Package, RegistryAdapter, get_adapter, resolve_version
from render import CommandResult
from repository.github import GitHubClient

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch package info."


def _load_package(
    command: str, ecosystem: str, name: str, config: AppConfig
) -> Tuple[Optional[RegistryAdapter], Optional[Package], Optional[CommandResult]]:
    try:
        adapter = get_adapter(ecosystem, config)
    except UnsupportedEcosystemError as exc:
        return None, None, CommandResult.failure(command, str(exc))
    package = adapter.fetch_package(name)
    if package is None:
        return adapter, None, CommandResult.failure(command, FETCH_FAILED)
    return adapter, package, None


def info_lines(package: Package) -> List[str]:
    lines = [
        f"Ecosystem : {package.ecosystem.value}",
        f"Name      : {package.name}",
        f"Latest    : {package.latest_version or ''}",
        f"Summary   : {package.summary}",
        f"Homepage  : {package.homepage}",
        f"Source    : {package.source_url}",
        "",
    ]
    if not package.versions:
        lines.append("No explicit versions/releases found.")
        return lines
    lines.append("Versions / Releases:")
    for record in package.versions:
        line = f"  - {record.version}"
        if record.released_at:
            line += f"  ({record.released_at})"
        lines.append(line)
    return lines


def cmd_info(config: AppConfig, ecosystem: str, name: str) -> CommandResult:
    """Package summary and version list."""
    _, package, failure = _load_package("info", ecosystem, name, config)
    if failure:
        return failure
    return CommandResult("info", data=package.to_dict(), lines=info_lines(package))


def cmd_deps(config: AppConfig, ecosystem: str, name: str, version: Optional[str] = None) -> CommandResult:
    """Dependencies of the resolved version (latest when omitted)."""
    adapter, package, failure = _load_package("deps", ecosystem, name, config)
    if failure:
        return failure
    chosen = resolve_version(package, version)
    if not chosen:
        return CommandResult.failure("deps", "No version available.")
    info = adapter.resolve_version(package, chosen)
    if info is None:
        return CommandResult.failure("deps", f"Version '{chosen}' not found for '{package.name}'.")

    lines = [f"Dependencies for {package.name} {chosen} ({adapter.ecosystem.value}):"]
    if not info.dependencies:
        lines.append("  (none declared / not available)")
    for dep in info.dependencies:
        lines.append(f"  - [{dep.ecosystem.value}] {dep.name} {dep.version_spec}".rstrip())
    return CommandResult("deps", data=info.to_dict(), lines=lines)


def cmd_install(config: AppConfig, ecosystem: str, name: str, version: Optional[str] = None) -> CommandResult:
    """Download the artifact for the resolved version into the local cache."""
    adapter, package, failure = _load_package("install", ecosystem, name, config)
    if failure:
        return failure
    chosen = resolve_version(package, version)
    if not chosen:
        return CommandResult.failure("install", "No version available to install.")
    info = adapter.resolve_version(package, chosen)
    if info is None:
        return CommandResult.failure("install", f"Version '{chosen}' not found for '{package.name}'.")

    try:
        result = install_artifact(info, config)
    except MetaPkgError as exc:
        return CommandResult.failure("install", str(exc))

    lines = []
    if not result.fetched:
        lines.append(f"Already downloaded: {result.path}")
    lines += [
        "",
        "Downloaded artifact:",
        f"  {result.path}",
        "",
        "NOTE:",
        "  Artifacts are only downloaded/cached under:",
        f"    {result.directory}",
    ]
    lines += [f"  {note}" for note in result.notes]
    return CommandResult("install", data=result.to_dict(), lines=lines)


def search_lines(query: str, items: List[Dict[str, Any]]) -> List[str]:
    if not items:
        return [f"No repositories found for query: {query}"]
    lines = [f"Top repositories for '{query}':"]
    for item in items:
        full = item.get("full_name") or ""
        stars = item.get("stargazers_count") or 0
        desc = item.get("description") or ""
        lines.append(f"  {full:<35} ⭐ {stars:>6}  {desc}".rstrip())
    return lines


def cmd_search(config: AppConfig, query: str) -> CommandResult:
    """Top repositories by stars for a free-text query."""
    items = GitHubClient(config).search_repositories(query, per_page=Constants.SEARCH_RESULTS)
    if items is None:
        return CommandResult.failure("search", f"Repository search failed for query: {query}")
    return CommandResult("search", data=items, lines=search_lines(query, items))


# Issues

def _issue_row(item: Dict[str, Any]) -> str:
    return f"  #{item.get('number', '?'):<6} [{item.get('state', '')}] {item.get('title', '')}"


def _author(item: Dict[str, Any]) -> str:
    user = item.get("user") or item.get("author") or {}
    return user.get("login", "") if isinstance(user, dict) else ""


def _thread_lines(head: Dict[str, Any], comments: List[Dict[str, Any]], extra: Optional[str] = None) -> List[str]:
    lines = [f"#{head.get('number', '?')} {head.get('title', '')} [{head.get('state', '')}]"]
    if extra:
        lines.append(extra)
    lines += [
        f"Author : {_author(head)}",
        f"URL    : {head.get('html_url', '')}",
        "",
        head.get("body") or "(no description)",
    ]
    if comments:
        lines += ["", f"Comments ({len(comments)}):"]
        for comment in comments:
            lines += [
                f"--- {_author(comment)} at {comment.get('created_at', '')}",
                comment.get("body") or "",
            ]
    return lines


def cmd_issue(config: AppConfig, repo: str, title: str, body: str) -> CommandResult:
    """Create an issue (token required)."""
    try:
        issue = GitHubClient(config).create_issue(repo, title, body)
    except MetaPkgError as exc:
        return CommandResult.failure("issue", str(exc))
    return CommandResult(
        "issue",
        data=issue,
        lines=[f"Created issue #{issue.get('number', '?')} at {issue.get('html_url', '')}"],
    )


def cmd_issues_list(config: AppConfig, repo: str, state: str = "open", limit: int = Constants.ISSUE_LIST_DEFAULT) -> CommandResult:
    try:
        issues = GitHubClient(config).list_issues(repo, state=state, limit=limit)
    except ValueError as exc:
        return CommandResult.failure("issues-list", str(exc))
    if issues is None:
        return CommandResult.failure("issues-list", f"Failed to list issues for {repo}.")
    lines = [f"Issues for {repo} ({state}):"]
    lines += [_issue_row(item) for item in issues] or ["  (no issues)"]
    return CommandResult("issues-list", data=issues, lines=lines)


def cmd_issues_show(config: AppConfig, repo: str, number: int) -> CommandResult:
    shown = GitHubClient(config).show_issue(repo, number)
    if shown is None:
        return CommandResult.failure("issues-show", f"Issue #{number} not found in {repo}.")
    return CommandResult("issues-show", data=shown, lines=_thread_lines(shown["issue"], shown["comments"]))


def cmd_issues_comment(config: AppConfig, repo: str, number: int, body: str) -> CommandResult:
    try:
        comment = GitHubClient(config).comment_issue(repo, number, body)
    except MetaPkgError as exc:
        return CommandResult.failure("issues-comment", str(exc))
    return CommandResult(
        "issues-comment",
        data=comment,
        lines=[f"Added comment to issue #{number}: {comment.get('html_url', '')}"],
    )


# Discussions

def _category_name(item: Dict[str, Any]) -> str:
    category = item.get("category")
    return category.get("name", "") if isinstance(category, dict) else ""


def cmd_discuss_list(config: AppConfig, repo: str, limit: int = Constants.ISSUE_LIST_DEFAULT) -> CommandResult:
    discussions = GitHubClient(config).list_discussions(repo, limit=limit)
    if discussions is None:
        return CommandResult.failure("discuss-list", f"Failed to list discussions for {repo}.")
    lines = [f"Discussions for {repo}:"]
    for item in discussions:
        lines.append(f"  #{item.get('number', '?'):<6} [{_category_name(item)}] {item.get('title', '')}")
    if not discussions:
        lines.append("  (no discussions)")
    return CommandResult("discuss-list", data=discussions, lines=lines)


def cmd_discuss_show(config: AppConfig, repo: str, number: int) -> CommandResult:
    shown = GitHubClient(config).show_discussion(repo, number)
    if shown is None:
        return CommandResult.failure("discuss-show", f"Discussion #{number} not found in {repo}.")
    discussion = shown["discussion"]
    lines = _thread_lines(discussion, shown["comments"], extra=f"Category: {_category_name(discussion)}")
    return CommandResult("discuss-show", data=shown, lines=lines)


def cmd_discuss_comment(config: AppConfig, repo: str, number: int, body: str) -> CommandResult:
    try:
        comment = GitHubClient(config).comment_discussion(repo, number, body)
    except MetaPkgError as exc:
        return CommandResult.failure("discuss-comment", str(exc))
    return CommandResult(
        "discuss-comment",
        data=comment,
        lines=[f"Added comment to discussion #{number}: {comment.get('html_url', '')}"],
    )


def cmd_discuss_new(config: AppConfig, repo: str, category: str, title: str, body: str) -> CommandResult:
    try:
        discussion = GitHubClient(config).create_discussion(repo, category, title, body)
    except MetaPkgError as exc:
        return CommandResult.failure("discuss-new", str(exc))
    return CommandResult(
        "discuss-new",
        data=discussion,
        lines=[f"Created discussion #{discussion.get('number', '?')} at {discussion.get('html_url', '')}"],
    )


# Crawlers

def cmd_crawl_trending(config: AppConfig, out_file: str) -> CommandResult:
    try:
        report = crawl_trending(out_file, config)
    except OSError as exc:
        return CommandResult.failure("crawl", f"Failed to write JSON to {out_file}: {exc}")
    if report is None:
        return CommandResult.failure("crawl", "Failed to fetch GitHub Trending")
    return CommandResult(
        "crawl",
        data=report,
        lines=[f"Stored {report['count']} trending repos to {out_file}"],
    )


def cmd_crawl_tag(config: AppConfig, topic: str, out_file: str, max_results: Optional[int] = None) -> CommandResult:
    try:
        report = crawl_topic(topic, max_results, out_file, config)
    except OSError as exc:
        return CommandResult.failure("crawl", f"Failed to write JSON to {out_file}: {exc}")
    if report is None:
        return CommandResult("crawl", data=None, lines=[f"No repositories found for topic '{topic}'"])
    return CommandResult(
        "crawl",
        data=report,
        lines=[f"Stored {report['count']} repos for topic '{topic}' to {out_file}"],
    )


__all__ = [
    "cmd_info",
    "cmd_deps",
    "cmd_install",
    "cmd_search",
    "cmd_issue",
    "cmd_issues_list",
    "cmd_issues_show",
    "cmd_issues_comment",
    "cmd_discuss_list",
    "cmd_discuss_show",
    "cmd_discuss_comment",
    "cmd_discuss_new",
    "cmd_crawl_trending",
    "cmd_crawl_tag",
]
