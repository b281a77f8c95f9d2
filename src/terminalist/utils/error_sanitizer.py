"""Reduce raw operation errors to messages that are safe to show.

Backend messages can carry tokens, URLs or request bodies. Only the fixed
context prefix of a failed operation is ever shown to the user.
"""

from __future__ import annotations

from terminalist.constants import (
    ERROR_INVALID_DATE_FORMAT,
    ERROR_INVALID_PRIORITY_FORMAT,
    ERROR_LABEL_CREATE_FAILED,
    ERROR_LABEL_DELETE_FAILED,
    ERROR_LABEL_UPDATE_FAILED,
    ERROR_PROJECT_CREATE_FAILED,
    ERROR_PROJECT_DELETE_FAILED,
    ERROR_PROJECT_UPDATE_FAILED,
    ERROR_TASK_COMPLETION_FAILED,
    ERROR_TASK_CREATE_FAILED,
    ERROR_TASK_DELETE_FAILED,
    ERROR_TASK_DUE_DATE_FAILED,
    ERROR_TASK_PRIORITY_FAILED,
    ERROR_TASK_RESTORE_FAILED,
    ERROR_TASK_UPDATE_FAILED,
    ERROR_UNKNOWN_OPERATION,
)

SAFE_ERROR_PREFIXES = (
    ERROR_TASK_COMPLETION_FAILED,
    ERROR_TASK_DELETE_FAILED,
    ERROR_TASK_UPDATE_FAILED,
    ERROR_TASK_CREATE_FAILED,
    ERROR_TASK_DUE_DATE_FAILED,
    ERROR_TASK_PRIORITY_FAILED,
    ERROR_PROJECT_CREATE_FAILED,
    ERROR_PROJECT_DELETE_FAILED,
    ERROR_PROJECT_UPDATE_FAILED,
    ERROR_LABEL_CREATE_FAILED,
    ERROR_LABEL_DELETE_FAILED,
    ERROR_LABEL_UPDATE_FAILED,
    ERROR_TASK_RESTORE_FAILED,
    ERROR_INVALID_PRIORITY_FORMAT,
    ERROR_INVALID_DATE_FORMAT,
    ERROR_UNKNOWN_OPERATION,
)


def sanitize_user_error(raw_error: str, fallback_message: str) -> str:
    """Return the known prefix found in ``raw_error``, else ``fallback_message``.

    Args:
        raw_error: Full error text, possibly wrapped by several layers
        fallback_message: Message shown when no known prefix is present

    Returns:
        A message containing no part of the underlying error detail
    """
    trimmed = raw_error.strip()
    for prefix in SAFE_ERROR_PREFIXES:
        if prefix in trimmed:
            return prefix
    return fallback_message
