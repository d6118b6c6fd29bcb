"""Issue Change Labeler.

Reacts to a single issue or project card webhook event and applies a tracking label to
the issue when it changes while carrying one of the qualifying labels.
"""

__version__ = "0.1.0"

from issue_change_labeler.labeler.config import LabelerSettings

__all__ = ["__version__", "LabelerSettings"]
