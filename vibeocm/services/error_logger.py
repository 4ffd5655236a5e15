"""
Structured error reports.
"""

import traceback
from datetime import datetime, timezone
from typing import Any, Optional, Union

from vibeocm.core.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Union[BaseException, str],
    context: str,
    stack_trace: Optional[str] = None,
    **metadata: Any,
) -> dict[str, Any]:
    """
    Log an error with context and return the entry that was written.

    Args:
        error: The exception, or a message reported by a client
        context: Where the error happened, e.g. "generate_artifact"
        stack_trace: Stack trace reported by a client; derived from the
            exception when omitted
        **metadata: Extra fields attached to the entry

    Returns:
        The structured entry
    """
    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
        if stack_trace is None and error.__traceback__ is not None:
            stack_trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    else:
        message = error

    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "context": context,
        "error": message,
        "stack_trace": stack_trace,
        **metadata,
    }

    logger.error("Application error", **entry)
    return entry
