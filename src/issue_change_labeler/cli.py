"""Console entry shim.

The CLI is implemented in `issue_change_labeler.labeler.main`.
"""

from __future__ import annotations

from issue_change_labeler.labeler.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
