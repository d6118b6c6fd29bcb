"""GitHub API client wrapper.

This wraps a REST session to keep GitHub calls out of CLI code and make tests easy.
Construction is offline; the only requests are the label listing and the label add.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small REST wrapper for the label operations a run needs."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "issue-change-labeler",
            }
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _issues_url(self, *, issue_number: int, suffix: str = "") -> str:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        if suffix and not suffix.startswith("/"):
            suffix = "/" + suffix
        return f"{self._rest_base_url}/repos/{self._repository_name}/issues/{issue_number}{suffix}"

    def _get_paginated_json_list(self, url: str) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list, following every page.

        A page shorter than ``per_page`` is the last one.
        """

        items: list[dict[str, Any]] = []
        per_page = 100
        page = 1
        while True:
            resp = self._session.get(
                url,
                params={"per_page": per_page, "page": page},
                timeout=30,
            )
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            if len(payload) < per_page:
                break
            page += 1
        return items

    def list_issue_labels(self, *, issue_number: int) -> set[str]:
        """Return the names of all labels currently on an issue."""

        url = self._issues_url(issue_number=issue_number, suffix="labels")
        names = {
            item["name"]
            for item in self._get_paginated_json_list(url)
            if isinstance(item.get("name"), str)
        }
        logger.debug(
            "Fetched issue labels",
            extra={
                "repo": self._repository_name,
                "issue_number": issue_number,
                "labels": sorted(names),
            },
        )
        return names

    def add_labels(self, *, issue_number: int, labels: list[str]) -> None:
        """Attach labels to an issue. Labels already present are left as they are."""

        normalized = [label for label in labels if label]
        if not normalized:
            raise ValueError("At least one label is required")

        url = self._issues_url(issue_number=issue_number, suffix="labels")
        resp = self._session.post(url, json={"labels": normalized}, timeout=30)
        resp.raise_for_status()
        logger.info(
            "Issue labels added",
            extra={
                "repo": self._repository_name,
                "issue_number": issue_number,
                "labels": normalized,
            },
        )

    def close(self) -> None:
        self._session.close()
