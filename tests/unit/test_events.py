"""Unit tests for webhook payload parsing."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from issue_change_labeler.labeler.workflow.events import (
    EventLoadError,
    EventType,
    IssueRef,
    LabelRef,
    PayloadData,
    ProjectCardRef,
    WebhookEvent,
    load_event,
)


def test_event_type_maps_unknown_names_to_other() -> None:
    assert EventType.from_name("issues") == EventType.ISSUES
    assert EventType.from_name("project_card") == EventType.PROJECT_CARD
    assert EventType.from_name("pull_request") == EventType.OTHER


def test_payload_parses_issue_event() -> None:
    payload = PayloadData.from_json(
        {
            "action": "labeled",
            "label": {"name": "bug", "color": "d73a4a"},
            "issue": {"number": 5, "title": "Broken"},
        }
    )

    assert payload.label == LabelRef(name="bug")
    assert payload.issue == IssueRef(number=5)
    assert payload.changes is None
    assert payload.project_card is None


def test_payload_parses_project_card_event() -> None:
    payload = PayloadData.from_json(
        {
            "action": "moved",
            "changes": {"column_id": {"from": 10}},
            "project_card": {"content_url": "https://api.github.com/repos/o/r/issues/77"},
        }
    )

    assert payload.changes == {"column_id": {"from": 10}}
    assert payload.project_card == ProjectCardRef(
        content_url="https://api.github.com/repos/o/r/issues/77"
    )
    assert payload.issue is None


def test_payload_treats_malformed_fields_as_absent() -> None:
    payload = PayloadData.from_json(
        {
            "label": {"color": "fff"},
            "issue": {"number": True},
            "project_card": {"note": "todo"},
            "changes": "nope",
        }
    )

    assert payload.label is None
    assert payload.issue is None
    assert payload.changes is None
    assert payload.project_card == ProjectCardRef(content_url=None)


def test_webhook_event_from_json_keeps_raw_name() -> None:
    event = WebhookEvent.from_json("workflow_dispatch", {"inputs": {}})

    assert event.event_type == EventType.OTHER
    assert event.event_name == "workflow_dispatch"
    assert event.action == ""


def test_load_event_reads_file(write_event: Callable[[dict[str, object]], Path]) -> None:
    path = write_event({"action": "edited", "issue": {"number": 8}})

    event = load_event(event_name="issues", event_path=path)

    assert event.event_type == EventType.ISSUES
    assert event.action == "edited"
    assert event.payload.issue == IssueRef(number=8)


def test_load_event_requires_name_and_path(tmp_path: Path) -> None:
    with pytest.raises(EventLoadError):
        load_event(event_name="", event_path=tmp_path / "event.json")
    with pytest.raises(EventLoadError):
        load_event(event_name="issues", event_path=None)


def test_load_event_rejects_missing_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(EventLoadError):
        load_event(event_name="issues", event_path=tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(EventLoadError):
        load_event(event_name="issues", event_path=bad)

    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")
    with pytest.raises(EventLoadError):
        load_event(event_name="issues", event_path=listing)
