"""Event policy and the thin I/O shell around it.

- Settings loaded from action inputs, the environment or .env
- Structured logging
- A small CLI surface
- Label lookups and updates through the GitHub API
"""
