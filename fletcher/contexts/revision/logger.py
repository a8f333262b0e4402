"""
Revision context logger.

Provides logging interface for the Revision context with automatic [revise] prefix.
All revision modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[revise]"


def _log_info(message: str) -> None:
    """Log info message with [revise] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [revise] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [revise] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [revise] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_revision_outcome(outcome) -> None:
    """
    Log the outcome of one revision attempt.

    Args:
        outcome: RevisionOutcome from the revision loop
    """
    if outcome.status == "compiled":
        _log_success(outcome.message)
    elif outcome.status == "rejected":
        _log_info(outcome.message)
    else:
        _log_warning(outcome.message)
    if outcome.hint:
        _log_debug(f"  Hint: {outcome.hint}")
