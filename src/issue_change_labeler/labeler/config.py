"""Configuration for the change labeler.

Configuration is loaded from:
- environment variables (including the ``INPUT_*`` variables set by an Actions runner)
- and a local `.env` file (if present)

Action inputs keep their hyphenated names (``INPUT_CHANGED-LABEL``), so every input
also accepts a plain environment variable alias for local use.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from issue_change_labeler.labeler.workflow.policy import PolicyConfig, parse_qualifying_labels

logger = logging.getLogger(__name__)


class LabelerSettings(BaseSettings):
    """Settings for a single labeler run.

    Environment variables:
    - INPUT_REPO-TOKEN / LABELER_GITHUB_TOKEN / GITHUB_TOKEN
    - GITHUB_API_URL / GITHUB_BASE_URL  (optional)
    - GITHUB_REPOSITORY
    - GITHUB_EVENT_NAME, GITHUB_EVENT_PATH
    - INPUT_CHANGED-LABEL / CHANGED_LABEL
    - INPUT_QUALIFYING-LABELS / QUALIFYING_LABELS  (comma-separated)
    - INPUT_STRIP-WHITESPACE / STRIP_LABEL_WHITESPACE  (optional)
    - LOG_LEVEL  (optional)
    - GITHUB_OUTPUT  (optional)

    Notes:
        Values can be passed by field name as keyword arguments; these take priority over
        the environment, which is how CLI flags override the runner inputs.
    """

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_REPO-TOKEN", "LABELER_GITHUB_TOKEN", "GITHUB_TOKEN"),
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL", "GITHUB_BASE_URL"),
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    repository: str = Field(
        default="",
        validation_alias="GITHUB_REPOSITORY",
        description="Repository the event belongs to, in the form 'owner/repo'",
    )

    event_name: str = Field(
        default="",
        validation_alias="GITHUB_EVENT_NAME",
        description="Name of the webhook event that triggered the run",
    )
    event_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_PATH",
        description="Path to the JSON webhook payload",
    )

    changed_label: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_CHANGED-LABEL", "CHANGED_LABEL"),
        description="Label applied to qualifying issues whose content changed",
    )
    qualifying_labels: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_QUALIFYING-LABELS", "QUALIFYING_LABELS"),
        description="Comma-separated labels that make an issue eligible for tracking",
    )
    strip_label_whitespace: bool = Field(
        default=False,
        validation_alias=AliasChoices("INPUT_STRIP-WHITESPACE", "STRIP_LABEL_WHITESPACE"),
        description=(
            "Trim whitespace around qualifying label entries and drop empty entries. "
            "Off by default so that 'a, b' keeps ' b' as written."
        ),
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    github_output_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_OUTPUT",
        description="File that step outputs are appended to when running under Actions",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_labels(self) -> LabelerSettings:
        if not self.changed_label.strip():
            raise ValueError("changed-label is required")
        if not parse_qualifying_labels(
            self.qualifying_labels, strip=self.strip_label_whitespace
        ):
            raise ValueError("qualifying-labels must name at least one label")
        return self

    def require_github_access(self) -> None:
        """Raise ``ValueError`` unless the settings needed for API calls are present."""

        if not self.github_token.strip():
            raise ValueError("A GitHub token is required (INPUT_REPO-TOKEN or GITHUB_TOKEN)")
        if not self.repository.strip():
            raise ValueError("GITHUB_REPOSITORY is required")

    def policy_config(self) -> PolicyConfig:
        """Build the immutable policy configuration for this run."""

        labels = parse_qualifying_labels(self.qualifying_labels, strip=self.strip_label_whitespace)
        if not self.strip_label_whitespace:
            padded = sorted(label for label in labels if label != label.strip())
            if padded:
                logger.warning(
                    "Qualifying labels contain surrounding whitespace and will only match "
                    "labels spelled the same way",
                    extra={"labels": padded},
                )
        return PolicyConfig(tracking_label=self.changed_label, qualifying_labels=labels)
