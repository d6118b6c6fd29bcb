from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .events import EventType, PayloadData, WebhookEvent

ELIGIBLE_ACTIONS: dict[EventType, frozenset[str]] = {
    EventType.ISSUES: frozenset({"edited", "labeled", "unlabeled"}),
    EventType.PROJECT_CARD: frozenset({"moved", "deleted"}),
}


class SkipReason(str, Enum):
    UNSUPPORTED_TRIGGER = "unsupported_trigger"
    UNSUPPORTED_ACTION = "unsupported_action"
    CARD_MOVED_WITHIN_COLUMN = "card_moved_within_column"
    LABEL_DELETED = "label_deleted"
    TRACKING_LABEL_REMOVED = "tracking_label_removed"
    QUALIFYING_LABEL_TOGGLED = "qualifying_label_toggled"
    NO_QUALIFYING_LABEL = "no_qualifying_label"


class FailReason(str, Enum):
    CANNOT_DETERMINE_ISSUE = "cannot_determine_issue"
    COLLABORATOR_ERROR = "collaborator_error"


@dataclass(frozen=True, slots=True)
class PolicyConfig:
    tracking_label: str
    qualifying_labels: frozenset[str]

    def __post_init__(self) -> None:
        if not self.tracking_label:
            raise ValueError("tracking_label must be non-empty")
        if not self.qualifying_labels:
            raise ValueError("qualifying_labels must contain at least one label")


@dataclass(frozen=True, slots=True)
class Skip:
    """A normal no-op outcome.

    ``needs_review`` marks skips an operator should look at by hand.
    """

    kind: ClassVar[str] = "skip"

    reason: SkipReason
    message: str
    needs_review: bool = False

    def to_json(self) -> dict[str, object]:
        return {
            "decision": self.kind,
            "reason": self.reason.value,
            "message": self.message,
            "needs_review": self.needs_review,
        }


@dataclass(frozen=True, slots=True)
class Fail:
    kind: ClassVar[str] = "fail"

    reason: FailReason
    message: str

    def to_json(self) -> dict[str, object]:
        return {"decision": self.kind, "reason": self.reason.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class Apply:
    kind: ClassVar[str] = "apply"

    issue_number: int

    def to_json(self) -> dict[str, object]:
        return {"decision": self.kind, "issue_number": self.issue_number}


Decision = Skip | Fail | Apply


def parse_qualifying_labels(raw: str, *, strip: bool = False) -> frozenset[str]:
    """Split a comma-separated label list.

    Without ``strip`` the entries are kept exactly as written, so ``"a, b"`` yields
    ``{"a", " b"}``. With ``strip`` entries are trimmed and empty ones dropped.
    """

    if not raw:
        return frozenset()
    parts = raw.split(",")
    if strip:
        return frozenset(p.strip() for p in parts if p.strip())
    return frozenset(parts)


def resolve_issue_number(payload: PayloadData) -> int | Fail:
    """Map a payload to the issue it concerns.

    Issue events carry the number directly; project cards reference the issue through
    ``content_url`` whose last path segment is the number.
    """

    if payload.issue is not None:
        return payload.issue.number

    card = payload.project_card
    if card is not None and card.content_url:
        tail = card.content_url.rsplit("/", 1)[-1]
        if tail.isascii() and tail.isdigit() and int(tail) > 0:
            return int(tail)

    return Fail(
        reason=FailReason.CANNOT_DETERMINE_ISSUE,
        message="Unable to determine issue number.",
    )


def evaluate(event: WebhookEvent, config: PolicyConfig) -> Decision:
    """Policy: (event, config) -> decision.

    Rules are checked in order and the first match wins. An ``Apply`` result means the
    event is eligible; the issue still has to pass :func:`check_qualification`.
    This must not perform any I/O.
    """

    eligible = ELIGIBLE_ACTIONS.get(event.event_type)
    if eligible is None:
        return Skip(
            reason=SkipReason.UNSUPPORTED_TRIGGER,
            message=(
                f"Skipping since '{event.event_name}' is not supported; only 'issues' and "
                "'project_card' triggers are handled."
            ),
        )

    action = event.action
    if action not in eligible:
        return Skip(
            reason=SkipReason.UNSUPPORTED_ACTION,
            message=f"Skipping since '{event.event_name}.{action}' is not a handled action.",
        )

    payload = event.payload
    if action == "moved" and payload.changes is None:
        return Skip(
            reason=SkipReason.CARD_MOVED_WITHIN_COLUMN,
            message="Skipping since the card merely moved within the same project board column.",
        )

    label = payload.label
    if action == "unlabeled" and label is None:
        return Skip(
            reason=SkipReason.LABEL_DELETED,
            message=(
                "Skipping since a label was removed by deleting it from the repository; "
                "the removed label is unknown and the issue needs manual review."
            ),
            needs_review=True,
        )

    if action == "unlabeled" and label is not None and label.name == config.tracking_label:
        return Skip(
            reason=SkipReason.TRACKING_LABEL_REMOVED,
            message=f"Skipping since the '{label.name}' label was removed.",
        )

    if (
        action in ("labeled", "unlabeled")
        and label is not None
        and label.name in config.qualifying_labels
    ):
        verb = "applied" if action == "labeled" else "removed"
        return Skip(
            reason=SkipReason.QUALIFYING_LABEL_TOGGLED,
            message=f"Skipping since the '{label.name}' qualifying label was {verb}.",
        )

    resolved = resolve_issue_number(payload)
    if isinstance(resolved, Fail):
        return resolved
    return Apply(issue_number=resolved)


def check_qualification(
    *, issue_number: int, issue_labels: Iterable[str], config: PolicyConfig
) -> Skip | Apply:
    """Qualification: does the issue carry at least one qualifying label?"""

    if config.qualifying_labels.isdisjoint(issue_labels):
        wanted = ",".join(sorted(config.qualifying_labels))
        return Skip(
            reason=SkipReason.NO_QUALIFYING_LABEL,
            message=f"Skipping since the '{wanted}' label(s) are not on issue #{issue_number}.",
        )
    return Apply(issue_number=issue_number)
