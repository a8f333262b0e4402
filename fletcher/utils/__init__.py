"""
Shared utilities for FLETCHER.

Common functionality used across contexts:
- Exceptions
- Logging setup
- LLM access
- Record storage
- Text processing and timestamps
"""

from fletcher.utils.timestamp import now, today

__all__ = ["now", "today"]
