#!/usr/bin/env python3
"""Programmatic label sync example.

This demonstrates using the labeler components directly:

* load settings from `.env` (token, labels)
* read a saved webhook payload
* evaluate it and, unless `--dry-run` is given, apply the tracking label

Repository and event are passed as arguments (not read from `.env`).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from issue_change_labeler.labeler.config import LabelerSettings
from issue_change_labeler.labeler.github.client import GitHubClient
from issue_change_labeler.labeler.logging import configure_logging
from issue_change_labeler.labeler.workflow.actions import run_label_sync
from issue_change_labeler.labeler.workflow.events import load_event
from issue_change_labeler.labeler.workflow.policy import evaluate


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the change labeler on a saved payload.")
    parser.add_argument("--repo", required=True, help='Target repository in the form "owner/repo"')
    parser.add_argument("--event-name", required=True, help='Event name, e.g. "issues"')
    parser.add_argument("--payload", required=True, type=Path, help="Path to the JSON payload")
    parser.add_argument("--dry-run", action="store_true", help="Only print the policy decision")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = LabelerSettings()
    configure_logging(settings.log_level)

    config = settings.policy_config()
    event = load_event(event_name=args.event_name, event_path=args.payload)

    if args.dry_run:
        print(json.dumps(evaluate(event, config).to_json(), indent=2))
        return 0

    github = GitHubClient(
        token=settings.github_token,
        repository=args.repo,
        base_url=settings.github_base_url,
    )
    try:
        decision = run_label_sync(event=event, config=config, client=github)
    finally:
        github.close()

    print(json.dumps(decision.to_json(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
