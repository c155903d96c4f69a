"""GitHub API client for repository search, issues and discussions.

Provides a lightweight REST client. Read operations work anonymously
(subject to GitHub's unauthenticated rate limits); write operations need a
token and fail fast without one, before any request is made.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from config import AppConfig
from constants import Constants
from common.errors import CategoryNotFoundError, GitHubApiError, TokenRequiredError
from common.http_client import get_json, post_json

logger = logging.getLogger(__name__)


def is_pull_request(item: Dict[str, Any]) -> bool:
    """Issues endpoints also return pull requests, marked by a pull_request key."""
    return "pull_request" in item


class GitHubClient:
    """Lightweight REST client for GitHub collaboration endpoints.

    Headers and token come from the AppConfig given at construction.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize GitHub client.

        Args:
            config: Runtime configuration (API base, token, user agent)
        """
        self.config = config or AppConfig()
        self.base_url = self.config.github_api_base
        self.token = self.config.github_token

    def _get_headers(self) -> Dict[str, str]:
        return self.config.github_headers()

    def _repo_url(self, repo: str, suffix: str = "") -> str:
        return f"{self.base_url}/repos/{repo}{suffix}"

    def _require_token(self, action: str) -> None:
        if not self.token:
            raise TokenRequiredError(action)

    def _get(self, url: str, **params: Any) -> Optional[Any]:
        status, _, data = get_json(
            url,
            headers=self._get_headers(),
            timeout=self.config.request_timeout,
            params=params or None,
        )
        if status != 200:
            return None
        return data

    def _post(self, url: str, payload: Dict[str, Any], what: str) -> Dict[str, Any]:
        status, _, data = post_json(
            url,
            payload,
            headers=self._get_headers(),
            timeout=self.config.request_timeout,
        )
        if status not in (200, 201) or not isinstance(data, dict):
            message = data.get("message") if isinstance(data, dict) else None
            raise GitHubApiError(
                f"Failed to {what}" + (f": {message}" if message else f" (status {status})"),
                status_code=status or None,
            )
        return data

    def _get_paginated_results(
        self,
        url: str,
        limit: int,
        params: Optional[Dict[str, Any]] = None,
        keep: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Collect up to ``limit`` kept items across pages.

        Stops on the first empty, short or failed page, so the loop is
        bounded both by the count cap and by the remote running dry.

        Returns:
            The collected items, or None when the first page failed
        """
        if limit <= 0:
            return []
        per_page = min(Constants.GITHUB_PER_PAGE_MAX, limit)
        results: List[Dict[str, Any]] = []
        page = 1
        while len(results) < limit:
            data = self._get(url, **(params or {}), per_page=per_page, page=page)
            if not isinstance(data, list):
                if page == 1:
                    return None
                break
            if not data:
                break
            for item in data:
                if not isinstance(item, dict):
                    continue
                if keep is not None and not keep(item):
                    continue
                results.append(item)
                if len(results) >= limit:
                    break
            if len(data) < per_page:
                break
            page += 1
        return results

    # Search

    def search_repositories(
        self,
        query: str,
        per_page: int = Constants.SEARCH_RESULTS,
        page: int = 1,
    ) -> Optional[List[Dict[str, Any]]]:
        """Search repositories sorted by stars, descending.

        Returns:
            The page of items, or None when the request failed
        """
        data = self._get(
            f"{self.base_url}/search/repositories",
            q=query,
            sort="stars",
            order="desc",
            per_page=min(Constants.GITHUB_PER_PAGE_MAX, max(1, per_page)),
            page=page,
        )
        if not isinstance(data, dict):
            return None
        items = data.get("items") or []
        return [item for item in items if isinstance(item, dict)]

    # Issues

    def list_issues(self, repo: str, state: str = "open", limit: int = Constants.ISSUE_LIST_DEFAULT) -> Optional[List[Dict[str, Any]]]:
        """List issues, skipping pull requests (they do not count toward limit).

        Args:
            repo: ``owner/repo``
            state: open, closed or all
            limit: Maximum number of issues to return

        Returns:
            The issues, or None when the repository could not be listed
        """
        if state not in Constants.ISSUE_STATES:
            raise ValueError(f"Invalid issue state '{state}' (expected one of {', '.join(Constants.ISSUE_STATES)})")
        return self._get_paginated_results(
            self._repo_url(repo, "/issues"),
            limit,
            params={"state": state},
            keep=lambda item: not is_pull_request(item),
        )

    def get_issue(self, repo: str, number: int) -> Optional[Dict[str, Any]]:
        data = self._get(self._repo_url(repo, f"/issues/{number}"))
        return data if isinstance(data, dict) else None

    def list_issue_comments(self, repo: str, number: int, limit: int = Constants.COMMENTS_LIMIT) -> List[Dict[str, Any]]:
        data = self._get(self._repo_url(repo, f"/issues/{number}/comments"), per_page=limit)
        if not isinstance(data, list):
            return []
        return [c for c in data if isinstance(c, dict)][:limit]

    def show_issue(self, repo: str, number: int) -> Optional[Dict[str, Any]]:
        """Issue plus up to 50 comments (only fetched when it has any)."""
        issue = self.get_issue(repo, number)
        if issue is None:
            return None
        comments: List[Dict[str, Any]] = []
        if issue.get("comments"):
            comments = self.list_issue_comments(repo, number)
        return {"issue": issue, "comments": comments}

    def create_issue(self, repo: str, title: str, body: str) -> Dict[str, Any]:
        self._require_token("create issues")
        return self._post(self._repo_url(repo, "/issues"), {"title": title, "body": body}, "create issue")

    def comment_issue(self, repo: str, number: int, body: str) -> Dict[str, Any]:
        self._require_token("comment on issues")
        return self._post(
            self._repo_url(repo, f"/issues/{number}/comments"),
            {"body": body},
            f"comment on issue #{number}",
        )

    # Discussions

    def list_discussions(self, repo: str, limit: int = Constants.ISSUE_LIST_DEFAULT) -> Optional[List[Dict[str, Any]]]:
        return self._get_paginated_results(self._repo_url(repo, "/discussions"), limit)

    def get_discussion(self, repo: str, number: int) -> Optional[Dict[str, Any]]:
        data = self._get(self._repo_url(repo, f"/discussions/{number}"))
        return data if isinstance(data, dict) else None

    def list_discussion_comments(self, repo: str, number: int, limit: int = Constants.COMMENTS_LIMIT) -> List[Dict[str, Any]]:
        data = self._get(self._repo_url(repo, f"/discussions/{number}/comments"), per_page=limit)
        if not isinstance(data, list):
            return []
        return [c for c in data if isinstance(c, dict)][:limit]

    def show_discussion(self, repo: str, number: int) -> Optional[Dict[str, Any]]:
        discussion = self.get_discussion(repo, number)
        if discussion is None:
            return None
        comments: List[Dict[str, Any]] = []
        if discussion.get("comments"):
            comments = self.list_discussion_comments(repo, number)
        return {"discussion": discussion, "comments": comments}

    def comment_discussion(self, repo: str, number: int, body: str) -> Dict[str, Any]:
        self._require_token("comment on discussions")
        return self._post(
            self._repo_url(repo, f"/discussions/{number}/comments"),
            {"body": body},
            f"comment on discussion #{number}",
        )

    def list_discussion_categories(self, repo: str) -> List[Dict[str, Any]]:
        data = self._get(self._repo_url(repo, "/discussions/categories"))
        if not isinstance(data, list):
            return []
        return [c for c in data if isinstance(c, dict)]

    def find_category_id(self, repo: str, category: str) -> Any:
        """Resolve a category name (case-insensitive, exact) to its id.

        Raises:
            CategoryNotFoundError: When no category carries that name.
        """
        categories = self.list_discussion_categories(repo)
        wanted = category.strip().lower()
        for item in categories:
            if str(item.get("name", "")).lower() == wanted:
                return item.get("id")
        raise CategoryNotFoundError(category, [str(c.get("name", "")) for c in categories])

    def create_discussion(self, repo: str, category: str, title: str, body: str) -> Dict[str, Any]:
        self._require_token("create discussions")
        category_id = self.find_category_id(repo, category)
        logger.debug("Resolved discussion category '%s' to id %s", category, category_id)
        return self._post(
            self._repo_url(repo, "/discussions"),
            {"title": title, "body": body, "category_id": category_id},
            "create discussion",
        )
