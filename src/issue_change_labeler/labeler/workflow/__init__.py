"""Explicit workflow domain concepts.

This package introduces first-class types for:
- Webhook events (signals)
- The pure event policy and its decisions
- The label action taken on an eligible, qualifying issue

Decisions are computed without I/O so every rule can be tested from a payload alone.
"""

__all__: list[str] = []
