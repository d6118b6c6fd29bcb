"""Reporting a decision back to an Actions runner.

Runners read workflow commands (``::error::``) from stdout and step outputs from the file
named by ``GITHUB_OUTPUT``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .policy import Apply, Decision, Fail, Skip


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def emit_command(command: str, message: str, *, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    out.write(f"::{command}::{escape_data(message)}\n")
    out.flush()


def emit_error(message: str, *, stream: TextIO | None = None) -> None:
    """Mark the step as failed with ``message`` shown as an annotation."""

    emit_command("error", message, stream=stream)


def emit_warning(message: str, *, stream: TextIO | None = None) -> None:
    emit_command("warning", message, stream=stream)


def decision_outputs(decision: Decision) -> dict[str, str]:
    outputs = {"decision": decision.kind}
    if isinstance(decision, (Skip, Fail)):
        outputs["reason"] = decision.reason.value
    if isinstance(decision, Apply):
        outputs["issue-number"] = str(decision.issue_number)
    return outputs


def write_outputs(path: Path | None, outputs: dict[str, str]) -> None:
    """Append ``name=value`` lines to the step output file, if one is configured."""

    if path is None:
        return
    with path.open("a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


def report_decision(decision: Decision, *, output_path: Path | None) -> None:
    if isinstance(decision, Fail):
        emit_error(decision.message)
    elif isinstance(decision, Skip) and decision.needs_review:
        emit_warning(decision.message)
    write_outputs(output_path, decision_outputs(decision))
