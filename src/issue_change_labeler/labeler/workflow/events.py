from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EventType(str, Enum):
    ISSUES = "issues"
    PROJECT_CARD = "project_card"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> EventType:
        normalized = name.strip()
        if normalized in (cls.ISSUES.value, cls.PROJECT_CARD.value):
            return cls(normalized)
        return cls.OTHER


class EventLoadError(ValueError):
    """The webhook payload for this run could not be read."""


@dataclass(frozen=True, slots=True)
class LabelRef:
    name: str


@dataclass(frozen=True, slots=True)
class IssueRef:
    number: int


@dataclass(frozen=True, slots=True)
class ProjectCardRef:
    content_url: str | None = None


@dataclass(frozen=True, slots=True)
class PayloadData:
    """The subset of a webhook payload the policy looks at.

    Every field is optional. ``None`` always means the key was absent (or unusable) in the
    payload; an empty ``changes`` object is still present.
    """

    changes: dict[str, object] | None = None
    label: LabelRef | None = None
    issue: IssueRef | None = None
    project_card: ProjectCardRef | None = None

    @staticmethod
    def from_json(obj: dict[str, object]) -> PayloadData:
        changes_raw = obj.get("changes")
        changes = changes_raw if isinstance(changes_raw, dict) else None

        label: LabelRef | None = None
        label_raw = obj.get("label")
        if isinstance(label_raw, dict) and isinstance(label_raw.get("name"), str):
            label = LabelRef(name=label_raw["name"])

        issue: IssueRef | None = None
        issue_raw = obj.get("issue")
        if isinstance(issue_raw, dict):
            number = issue_raw.get("number")
            # bool is an int subclass; a flag is never an issue number.
            if isinstance(number, int) and not isinstance(number, bool):
                issue = IssueRef(number=number)

        project_card: ProjectCardRef | None = None
        card_raw = obj.get("project_card")
        if isinstance(card_raw, dict):
            url = card_raw.get("content_url")
            project_card = ProjectCardRef(content_url=url if isinstance(url, str) else None)

        return PayloadData(changes=changes, label=label, issue=issue, project_card=project_card)


@dataclass(frozen=True, slots=True)
class WebhookEvent:
    """One webhook delivery: the trigger name, its action and the payload.

    ``event_name`` keeps the raw trigger name for logging; policy decisions use
    ``event_type``.
    """

    event_type: EventType
    event_name: str
    action: str
    payload: PayloadData

    @staticmethod
    def from_json(event_name: str, obj: dict[str, object]) -> WebhookEvent:
        action_raw = obj.get("action")
        return WebhookEvent(
            event_type=EventType.from_name(event_name),
            event_name=event_name.strip(),
            action=action_raw if isinstance(action_raw, str) else "",
            payload=PayloadData.from_json(obj),
        )


def load_event(*, event_name: str, event_path: Path | None) -> WebhookEvent:
    """Read the webhook payload from disk.

    Raises:
        EventLoadError: if the name or path is missing, or the file is not a JSON object.
    """

    if not event_name.strip():
        raise EventLoadError("Event name is required (GITHUB_EVENT_NAME)")
    if event_path is None:
        raise EventLoadError("Event payload path is required (GITHUB_EVENT_PATH)")

    try:
        raw = json.loads(event_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise EventLoadError(f"Unable to read event payload {event_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EventLoadError(f"Event payload {event_path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise EventLoadError(f"Event payload {event_path} must be a JSON object")
    return WebhookEvent.from_json(event_name, raw)
