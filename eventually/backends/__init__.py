"""
Resolution backends.

Supported backends:
- InMemoryDocument: thread-safe in-memory element tree (tests, offline use)
- PlaywrightContext: adapter over a Playwright sync Page

Any object implementing the ResolutionContext protocol can be used instead.
"""

from .memory import InMemoryDocument, Node, node, parse_selector
from .playwright_backend import PlaywrightContext
from .protocol import ResolutionContext

__all__ = [
    # Protocol
    "ResolutionContext",
    # In-memory backend
    "InMemoryDocument",
    "Node",
    "node",
    "parse_selector",
    # Playwright backend
    "PlaywrightContext",
]
