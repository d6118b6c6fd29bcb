from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .events import WebhookEvent
from .policy import Apply, Decision, Fail, PolicyConfig, Skip, check_qualification, evaluate

logger = logging.getLogger(__name__)


class LabelClient(Protocol):
    """The label operations a run needs from the issue tracker."""

    def list_issue_labels(self, *, issue_number: int) -> set[str]: ...

    def add_labels(self, *, issue_number: int, labels: list[str]) -> None: ...


@dataclass(frozen=True, slots=True)
class ActionResult:
    message: str
    details: dict[str, object] | None = None


@dataclass(frozen=True, slots=True)
class ApplyTrackingLabel:
    """Add the tracking label to an issue.

    Idempotency:
      - The label is added without checking whether it is already present; the API
        treats a repeated add as a no-op.
    """

    client: LabelClient
    issue_number: int
    tracking_label: str

    def execute(self) -> ActionResult:
        self.client.add_labels(issue_number=self.issue_number, labels=[self.tracking_label])
        return ActionResult(
            message=f"The '{self.tracking_label}' label was applied to issue #{self.issue_number}.",
            details={"issue_number": self.issue_number, "label": self.tracking_label},
        )


def _log_skip(decision: Skip, event: WebhookEvent) -> None:
    extra = {
        "event": event.event_name,
        "action": event.action,
        "reason": decision.reason.value,
    }
    if decision.needs_review:
        logger.warning(decision.message, extra=extra)
    else:
        logger.info(decision.message, extra=extra)


def run_label_sync(*, event: WebhookEvent, config: PolicyConfig, client: LabelClient) -> Decision:
    """Evaluate one event and, when it qualifies, apply the tracking label.

    Errors raised by ``client`` are not handled here.
    """

    decision = evaluate(event, config)
    if isinstance(decision, Skip):
        _log_skip(decision, event)
        return decision
    if isinstance(decision, Fail):
        logger.error(decision.message, extra={"reason": decision.reason.value})
        return decision

    logger.info(
        f"A '{event.event_name}.{event.action}' event action has been triggered.",
        extra={"issue_number": decision.issue_number},
    )

    issue_labels = client.list_issue_labels(issue_number=decision.issue_number)
    qualified = check_qualification(
        issue_number=decision.issue_number, issue_labels=issue_labels, config=config
    )
    if isinstance(qualified, Skip):
        _log_skip(qualified, event)
        return qualified

    logger.info(
        "One or more qualifying labels are on the issue.",
        extra={
            "issue_number": qualified.issue_number,
            "matched": sorted(config.qualifying_labels.intersection(issue_labels)),
        },
    )

    result = ApplyTrackingLabel(
        client=client,
        issue_number=qualified.issue_number,
        tracking_label=config.tracking_label,
    ).execute()
    logger.info(result.message, extra=result.details or {})
    return Apply(issue_number=qualified.issue_number)
