"""Core services for Typepad.

This package contains speech resource lookup, the speech backends and their manager,
the text buffer store, and the AppContext that wires them together.
"""

from core.shared_data import AppContext

__all__: list[str] = ["AppContext"]
