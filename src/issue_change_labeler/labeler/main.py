"""CLI entrypoint for the change labeler.

One invocation handles exactly one webhook event and exits.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from issue_change_labeler import __version__
from issue_change_labeler.labeler.config import LabelerSettings
from issue_change_labeler.labeler.github.client import GitHubClient
from issue_change_labeler.labeler.logging import configure_logging
from issue_change_labeler.labeler.workflow.actions import run_label_sync
from issue_change_labeler.labeler.workflow.events import EventLoadError, load_event
from issue_change_labeler.labeler.workflow.outputs import (
    emit_error,
    report_decision,
    write_outputs,
)
from issue_change_labeler.labeler.workflow.policy import (
    Apply,
    Fail,
    FailReason,
    check_qualification,
    evaluate,
)

logger = logging.getLogger(__name__)


def _parse_labels(value: str | None) -> list[str] | None:
    if value is None:
        return None
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p]


def _add_event_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--event-name",
        default=None,
        help="Webhook event name (defaults to GITHUB_EVENT_NAME)",
    )
    parser.add_argument(
        "--event-path",
        type=Path,
        default=None,
        help="Path to the JSON webhook payload (defaults to GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--changed-label",
        default=None,
        help="Label applied when a qualifying issue changes (defaults to INPUT_CHANGED-LABEL)",
    )
    parser.add_argument(
        "--qualifying-labels",
        default=None,
        help="Comma-separated qualifying labels, e.g. 'approved,ready'",
    )
    parser.add_argument(
        "--strip-whitespace",
        action="store_true",
        default=None,
        help="Trim whitespace around qualifying label entries",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-change-labeler",
        description=(
            "Apply a tracking label to issues that change while they carry a qualifying label"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"issue-change-labeler {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser(
        "run",
        help="Handle the current webhook event and apply the tracking label if it qualifies",
    )
    _add_event_arguments(run)
    run.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Target repository in the form 'owner/repo' (defaults to GITHUB_REPOSITORY)",
    )

    dry_run = subparsers.add_parser(
        "evaluate",
        help="Print the policy decision for an event without calling GitHub",
    )
    _add_event_arguments(dry_run)
    dry_run.add_argument(
        "--issue-labels",
        default=None,
        help="Comma-separated labels assumed to be on the issue, to run the qualification check",
    )

    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, object]:
    candidates: dict[str, object] = {
        "event_name": args.event_name,
        "event_path": args.event_path,
        "changed_label": args.changed_label,
        "qualifying_labels": args.qualifying_labels,
        "strip_label_whitespace": args.strip_whitespace,
        "repository": getattr(args, "repository", None),
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _evaluate(args: argparse.Namespace, settings: LabelerSettings) -> int:
    config = settings.policy_config()
    event = load_event(event_name=settings.event_name, event_path=settings.event_path)

    decision = evaluate(event, config)
    issue_labels = _parse_labels(args.issue_labels)
    if isinstance(decision, Apply) and issue_labels is not None:
        decision = check_qualification(
            issue_number=decision.issue_number, issue_labels=issue_labels, config=config
        )

    print(json.dumps(decision.to_json(), ensure_ascii=False))
    return 1 if isinstance(decision, Fail) else 0


def _run(settings: LabelerSettings) -> int:
    settings.require_github_access()
    config = settings.policy_config()
    event = load_event(event_name=settings.event_name, event_path=settings.event_path)

    github: GitHubClient | None = None
    try:
        github = GitHubClient(
            token=settings.github_token,
            repository=settings.repository,
            base_url=settings.github_base_url,
        )
        decision = run_label_sync(event=event, config=config, client=github)
    except Exception as e:
        logger.exception("Label sync failed")
        emit_error(str(e))
        write_outputs(
            settings.github_output_path,
            {"decision": Fail.kind, "reason": FailReason.COLLABORATOR_ERROR.value},
        )
        return 1
    finally:
        if github is not None:
            github.close()

    report_decision(decision, output_path=settings.github_output_path)
    return 1 if isinstance(decision, Fail) else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = LabelerSettings(**_settings_overrides(args))
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check the action inputs or your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "evaluate":
            return _evaluate(args, settings)
        if args.command == "run":
            return _run(settings)
    except (EventLoadError, ValueError) as e:
        logger.error(str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logger.error("Unknown command", extra={"command": args.command})
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
