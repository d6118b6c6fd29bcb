"""Test configuration and fixtures."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from issue_change_labeler.labeler.logging import JsonFormatter
from issue_change_labeler.labeler.workflow.events import (
    EventType,
    IssueRef,
    LabelRef,
    PayloadData,
    ProjectCardRef,
    WebhookEvent,
)
from issue_change_labeler.labeler.workflow.policy import PolicyConfig

_SETTINGS_ENV_VARS = (
    "INPUT_REPO-TOKEN",
    "LABELER_GITHUB_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_BASE_URL",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "INPUT_CHANGED-LABEL",
    "CHANGED_LABEL",
    "INPUT_QUALIFYING-LABELS",
    "QUALIFYING_LABELS",
    "INPUT_STRIP-WHITESPACE",
    "STRIP_LABEL_WHITESPACE",
    "LOG_LEVEL",
    "GITHUB_OUTPUT",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with none of the labeler variables set.

    Tests may themselves run under an Actions runner, which sets several of these.
    """
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def policy_config() -> PolicyConfig:
    """Provide a test policy configuration."""
    return PolicyConfig(
        tracking_label="needs-sync",
        qualifying_labels=frozenset({"approved", "ready"}),
    )


@pytest.fixture
def make_event() -> Callable[..., WebhookEvent]:
    """Build a webhook event from keyword arguments."""

    def _make(
        event_name: str = "issues",
        action: str = "edited",
        *,
        issue_number: int | None = None,
        label: str | None = None,
        changes: dict[str, object] | None = None,
        content_url: str | None = None,
        with_card: bool = False,
    ) -> WebhookEvent:
        card = None
        if with_card or content_url is not None:
            card = ProjectCardRef(content_url=content_url)
        payload = PayloadData(
            changes=changes,
            label=LabelRef(name=label) if label is not None else None,
            issue=IssueRef(number=issue_number) if issue_number is not None else None,
            project_card=card,
        )
        return WebhookEvent(
            event_type=EventType.from_name(event_name),
            event_name=event_name,
            action=action,
            payload=payload,
        )

    return _make


@pytest.fixture
def write_event(tmp_path: Path) -> Callable[[dict[str, object]], Path]:
    """Write a webhook payload to disk and return its path."""

    def _write(payload: dict[str, object]) -> Path:
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Drop the handlers `configure_logging` installs during CLI tests."""
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(saved_level)
