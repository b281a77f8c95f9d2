"""User intents and their execution against the sync service.

A presentation layer builds one of the operation dataclasses below and hands
it to ``execute_operation`` (usually inside ``TaskManager.spawn_task_operation``).
Every operation ends in exactly one outcome: a success message, or an
``OperationError`` whose text is "<fixed context prefix>: <cause>".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

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
    SUCCESS_LABEL_CREATED,
    SUCCESS_LABEL_DELETED,
    SUCCESS_LABEL_UPDATED,
    SUCCESS_PROJECT_CREATED_PARENT,
    SUCCESS_PROJECT_CREATED_ROOT,
    SUCCESS_PROJECT_DELETED,
    SUCCESS_PROJECT_UPDATED,
    SUCCESS_TASK_COMPLETED,
    SUCCESS_TASK_CREATED_INBOX,
    SUCCESS_TASK_CREATED_PROJECT,
    SUCCESS_TASK_DELETED,
    SUCCESS_TASK_DUE_CLEARED,
    SUCCESS_TASK_DUE_DATE_SET,
    SUCCESS_TASK_DUE_NEXT_WEEK,
    SUCCESS_TASK_DUE_STRING_SET,
    SUCCESS_TASK_DUE_TODAY,
    SUCCESS_TASK_DUE_TOMORROW,
    SUCCESS_TASK_DUE_WEEKEND,
    SUCCESS_TASK_PRIORITY_UPDATED,
    SUCCESS_TASK_RESTORED,
    SUCCESS_TASK_UPDATED,
)
from terminalist.exceptions import OperationError
from terminalist.services.sync import ProjectUpdateIntent, SyncService
from terminalist.utils.dates import (
    format_date_with_offset,
    format_today,
    format_ymd,
    next_weekday,
)
from terminalist.utils.logger import redact_user_text_for_log

_MONDAY = 0
_SATURDAY = 5


@dataclass(frozen=True)
class CreateTask:
    content: str
    description: str | None = None
    due_string: str | None = None
    project_uuid: str | None = None


@dataclass(frozen=True)
class EditTask:
    task_uuid: str
    content: str
    description: str | None = None
    due_string: str | None = None
    project_update: ProjectUpdateIntent = ProjectUpdateIntent.unchanged()


@dataclass(frozen=True)
class CompleteTask:
    task_uuid: str


@dataclass(frozen=True)
class DeleteTask:
    task_uuid: str


@dataclass(frozen=True)
class CyclePriority:
    task_uuid: str
    new_priority: int


@dataclass(frozen=True)
class SetDueDate:
    """Set a literal due date; None clears it."""

    task_uuid: str
    due_date: str | None
    success_message: str = SUCCESS_TASK_DUE_DATE_SET


@dataclass(frozen=True)
class SetDueString:
    task_uuid: str
    due_string: str


@dataclass(frozen=True)
class RestoreTask:
    task_uuid: str


@dataclass(frozen=True)
class CreateProject:
    name: str
    parent_uuid: str | None = None


@dataclass(frozen=True)
class DeleteProject:
    project_uuid: str


@dataclass(frozen=True)
class EditProject:
    project_uuid: str
    name: str


@dataclass(frozen=True)
class CreateLabel:
    name: str


@dataclass(frozen=True)
class DeleteLabel:
    label_uuid: str


@dataclass(frozen=True)
class EditLabel:
    label_uuid: str
    name: str


Operation = Union[
    CreateTask,
    EditTask,
    CompleteTask,
    DeleteTask,
    CyclePriority,
    SetDueDate,
    SetDueString,
    RestoreTask,
    CreateProject,
    DeleteProject,
    EditProject,
    CreateLabel,
    DeleteLabel,
    EditLabel,
]


def next_priority(priority: int) -> int:
    """Cycle 1 -> 2 -> 3 -> 4 -> 1."""
    return 1 if priority >= 4 else priority + 1


def parse_priority(value: str) -> int:
    """Parse user input "1".."4" (an optional leading "p" is accepted).

    Raises:
        OperationError: With ERROR_INVALID_PRIORITY_FORMAT
    """
    text = value.strip().lower().removeprefix("p")
    if text not in {"1", "2", "3", "4"}:
        raise OperationError(ERROR_INVALID_PRIORITY_FORMAT)
    return int(text)


def parse_due_date(value: str) -> str:
    """Validate a literal "YYYY-MM-DD" date.

    Raises:
        OperationError: With ERROR_INVALID_DATE_FORMAT
    """
    try:
        return format_ymd(date.fromisoformat(value.strip()))
    except ValueError:
        raise OperationError(ERROR_INVALID_DATE_FORMAT) from None


def due_today(task_uuid: str) -> SetDueDate:
    return SetDueDate(task_uuid, format_today(), SUCCESS_TASK_DUE_TODAY)


def due_tomorrow(task_uuid: str) -> SetDueDate:
    return SetDueDate(task_uuid, format_date_with_offset(1), SUCCESS_TASK_DUE_TOMORROW)


def due_next_week(task_uuid: str) -> SetDueDate:
    """Due next Monday."""
    monday = format_ymd(next_weekday(date.today(), _MONDAY))
    return SetDueDate(task_uuid, monday, SUCCESS_TASK_DUE_NEXT_WEEK)


def due_weekend(task_uuid: str) -> SetDueDate:
    """Due next Saturday."""
    saturday = format_ymd(next_weekday(date.today(), _SATURDAY))
    return SetDueDate(task_uuid, saturday, SUCCESS_TASK_DUE_WEEKEND)


def _redacted(value: str | None) -> str:
    return "None" if value is None else redact_user_text_for_log(value)


def describe_operation(op: Operation) -> str:
    """Describe an operation for the log; user-entered text is redacted."""
    match op:
        case CreateTask():
            return (
                f"Create task: content={_redacted(op.content)}, "
                f"description={_redacted(op.description)}, "
                f"due_string={_redacted(op.due_string)}, project_uuid={op.project_uuid}"
            )
        case EditTask():
            return (
                f"Edit task: task_uuid={op.task_uuid}, content={_redacted(op.content)}, "
                f"description={_redacted(op.description)}, "
                f"due_string={_redacted(op.due_string)}, "
                f"project_update={op.project_update.kind.value}"
            )
        case CompleteTask():
            return f"Complete task: {op.task_uuid}"
        case DeleteTask():
            return f"Delete task: {op.task_uuid}"
        case CyclePriority():
            return f"Cycle priority: task_uuid={op.task_uuid}, new_priority={op.new_priority}"
        case SetDueDate():
            return f"Set due date: task_uuid={op.task_uuid}, due_date={op.due_date}"
        case SetDueString():
            return (
                f"Set due string: task_uuid={op.task_uuid}, "
                f"due_string={_redacted(op.due_string)}"
            )
        case RestoreTask():
            return f"Restore task: {op.task_uuid}"
        case CreateProject():
            return f"Create project: name={_redacted(op.name)}, parent_uuid={op.parent_uuid}"
        case DeleteProject():
            return f"Delete project: {op.project_uuid}"
        case EditProject():
            return f"Edit project: project_uuid={op.project_uuid}, name={_redacted(op.name)}"
        case CreateLabel():
            return f"Create label: name={_redacted(op.name)}"
        case DeleteLabel():
            return f"Delete label: {op.label_uuid}"
        case EditLabel():
            return f"Edit label: label_uuid={op.label_uuid}, name={_redacted(op.name)}"
    return "Unknown operation"


async def execute_operation(sync_service: SyncService, op: Operation) -> str:
    """Run one operation and return its success message.

    Raises:
        OperationError: "<prefix>: <cause>" for any failure of the
            underlying call, with a prefix fixed per operation type
    """
    match op:
        case CreateTask():
            prefix = (
                SUCCESS_TASK_CREATED_PROJECT if op.project_uuid else SUCCESS_TASK_CREATED_INBOX
            )
            return await _run(
                ERROR_TASK_CREATE_FAILED,
                sync_service.create_task(
                    op.content, op.description, op.due_string, op.project_uuid
                ),
                f"{prefix}: {op.content}",
            )
        case EditTask():
            return await _run(
                ERROR_TASK_UPDATE_FAILED,
                sync_service.update_task_full(
                    op.task_uuid,
                    op.content,
                    op.description,
                    op.due_string,
                    op.project_update,
                ),
                f"{SUCCESS_TASK_UPDATED}: {op.task_uuid}",
            )
        case CompleteTask():
            return await _run(
                ERROR_TASK_COMPLETION_FAILED,
                sync_service.complete_task(op.task_uuid),
                f"{SUCCESS_TASK_COMPLETED}: {op.task_uuid}",
            )
        case DeleteTask():
            return await _run(
                ERROR_TASK_DELETE_FAILED,
                sync_service.delete_task(op.task_uuid),
                f"{SUCCESS_TASK_DELETED}: {op.task_uuid}",
            )
        case CyclePriority():
            return await _run(
                ERROR_TASK_PRIORITY_FAILED,
                sync_service.update_task_priority(op.task_uuid, op.new_priority),
                f"{SUCCESS_TASK_PRIORITY_UPDATED}{op.new_priority}: {op.task_uuid}",
            )
        case SetDueDate():
            message = op.success_message if op.due_date else SUCCESS_TASK_DUE_CLEARED
            return await _run(
                ERROR_TASK_DUE_DATE_FAILED,
                sync_service.update_task_due_date(op.task_uuid, op.due_date),
                f"{message}: {op.task_uuid}",
            )
        case SetDueString():
            return await _run(
                ERROR_TASK_DUE_DATE_FAILED,
                sync_service.update_task_due_string(op.task_uuid, op.due_string),
                f"{SUCCESS_TASK_DUE_STRING_SET}: {op.due_string}",
            )
        case RestoreTask():
            return await _run(
                ERROR_TASK_RESTORE_FAILED,
                sync_service.restore_task(op.task_uuid),
                f"{SUCCESS_TASK_RESTORED}: {op.task_uuid}",
            )
        case CreateProject():
            prefix = (
                SUCCESS_PROJECT_CREATED_PARENT if op.parent_uuid else SUCCESS_PROJECT_CREATED_ROOT
            )
            return await _run(
                ERROR_PROJECT_CREATE_FAILED,
                sync_service.create_project(op.name, op.parent_uuid),
                f"{prefix}: {op.name}",
            )
        case DeleteProject():
            return await _run(
                ERROR_PROJECT_DELETE_FAILED,
                sync_service.delete_project(op.project_uuid),
                f"{SUCCESS_PROJECT_DELETED}: {op.project_uuid}",
            )
        case EditProject():
            return await _run(
                ERROR_PROJECT_UPDATE_FAILED,
                sync_service.update_project_content(op.project_uuid, op.name),
                f"{SUCCESS_PROJECT_UPDATED}: {op.project_uuid}",
            )
        case CreateLabel():
            return await _run(
                ERROR_LABEL_CREATE_FAILED,
                sync_service.create_label(op.name),
                f"{SUCCESS_LABEL_CREATED}: {op.name}",
            )
        case DeleteLabel():
            return await _run(
                ERROR_LABEL_DELETE_FAILED,
                sync_service.delete_label(op.label_uuid),
                f"{SUCCESS_LABEL_DELETED}: {op.label_uuid}",
            )
        case EditLabel():
            return await _run(
                ERROR_LABEL_UPDATE_FAILED,
                sync_service.update_label_content(op.label_uuid, op.name),
                f"{SUCCESS_LABEL_UPDATED}: {op.label_uuid}",
            )
    raise OperationError(ERROR_UNKNOWN_OPERATION)


async def _run(error_prefix: str, call, success_message: str) -> str:
    try:
        await call
    except Exception as e:
        raise OperationError(f"{error_prefix}: {e}") from e
    return success_message
