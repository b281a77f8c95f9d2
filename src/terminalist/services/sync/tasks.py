"""Task reads and task write paths of the sync service.

Every write follows the same shape: look up remote ids under the storage
lock, release it, call the backend, then re-acquire the lock and apply the
backend's answer to the cache in one transaction. A backend failure
therefore never leaves partial local state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from terminalist.backends import BackendTask, CreateTaskArgs, UpdateTaskArgs
from terminalist.constants import UPCOMING_DAYS
from terminalist.exceptions import NotFoundError, ResolutionError
from terminalist.models import Task
from terminalist.services.sync.base import SyncServiceBase
from terminalist.utils.dates import format_date_with_offset, format_today

logger = logging.getLogger(__name__)


class ProjectUpdateKind(str, Enum):
    UNCHANGED = "unchanged"
    SET = "set"
    MOVE_TO_INBOX = "move_to_inbox"


@dataclass(frozen=True)
class ProjectUpdateIntent:
    """What a full task edit should do with the task's project.

    Use the constructors rather than building instances directly:
    ``unchanged()``, ``set(project_uuid)`` and ``move_to_inbox()``.
    """

    kind: ProjectUpdateKind
    project_uuid: str | None = None

    @classmethod
    def unchanged(cls) -> ProjectUpdateIntent:
        return cls(ProjectUpdateKind.UNCHANGED)

    @classmethod
    def set(cls, project_uuid: str) -> ProjectUpdateIntent:
        return cls(ProjectUpdateKind.SET, project_uuid)

    @classmethod
    def move_to_inbox(cls) -> ProjectUpdateIntent:
        return cls(ProjectUpdateKind.MOVE_TO_INBOX)


def _apply_backend_due_fields(task: Task, backend_task: BackendTask) -> Task:
    return task.model_copy(
        update={
            "due_date": backend_task.due_date,
            "due_datetime": backend_task.due_datetime,
            "is_recurring": backend_task.is_recurring,
            "deadline": backend_task.deadline,
        }
    )


class TaskSyncMixin(SyncServiceBase):
    """Task operations of the sync service."""

    upcoming_days: int = UPCOMING_DAYS

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_tasks_for_project(self, project_uuid: str) -> list[Task]:
        async with self.storage.session() as conn:
            return await self._tasks(conn).list_for_project(project_uuid)

    async def get_all_tasks(self) -> list[Task]:
        async with self.storage.session() as conn:
            return await self._tasks(conn).list_all()

    async def search_tasks(self, query: str) -> list[Task]:
        """Case-insensitive substring search on task content."""
        async with self.storage.session() as conn:
            return await self._tasks(conn).search(query)

    async def get_tasks_with_label(self, label_uuid: str) -> list[Task]:
        async with self.storage.session() as conn:
            return await self._tasks(conn).list_with_label(label_uuid)

    async def get_task_by_id(self, task_uuid: str) -> Task | None:
        """Get a task, including soft-deleted and completed ones."""
        async with self.storage.session() as conn:
            return await self._tasks(conn).get_by_id(task_uuid)

    async def find_tasks_by_id_prefix(self, prefix: str) -> list[Task]:
        async with self.storage.session() as conn:
            return await self._tasks(conn).find_by_id_prefix(prefix)

    async def get_tasks_for_today(self) -> list[Task]:
        """Overdue tasks first, then tasks due today."""
        today = format_today()
        async with self.storage.session() as conn:
            repo = self._tasks(conn)
            return await repo.list_overdue(today) + await repo.list_due_on(today)

    async def get_tasks_for_tomorrow(self) -> list[Task]:
        tomorrow = format_date_with_offset(1)
        async with self.storage.session() as conn:
            return await self._tasks(conn).list_due_on(tomorrow)

    async def get_tasks_for_upcoming(self) -> list[Task]:
        """Overdue, then today, then everything due in the upcoming window."""
        today = format_today()
        horizon = format_date_with_offset(self.upcoming_days)
        async with self.storage.session() as conn:
            repo = self._tasks(conn)
            return (
                await repo.list_overdue(today)
                + await repo.list_due_on(today)
                + await repo.list_due_between(today, horizon)
            )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_task(
        self,
        content: str,
        description: str | None = None,
        due_string: str | None = None,
        project_uuid: str | None = None,
    ) -> Task:
        """Create a task remotely and cache it.

        Args:
            content: Task title
            description: Optional description
            due_string: Optional natural-language due date, parsed by the backend
            project_uuid: Optional local project; the backend's inbox otherwise

        Returns:
            The cached task

        Raises:
            ResolutionError: If ``project_uuid`` or the project the backend
                assigned is unknown locally
            BackendError: If the backend call fails
        """
        remote_project_id = ""
        if project_uuid is not None:
            try:
                remote_project_id = await self.get_project_remote_id(project_uuid)
            except NotFoundError as e:
                raise ResolutionError(
                    f"Project {project_uuid} not found locally. Please sync projects first."
                ) from e

        backend_task = await self.get_backend().create_task(
            CreateTaskArgs(
                content=content,
                description=description,
                project_remote_id=remote_project_id,
                due_string=due_string,
            )
        )

        async with self.storage.transaction() as conn:
            task = await self._upsert_backend_task(conn, backend_task, "task creation")
        logger.info("created task %s (remote %s)", task.uuid, task.remote_id)
        return task

    async def update_task_full(
        self,
        task_uuid: str,
        content: str,
        description: str | None,
        due_string: str | None,
        project_update: ProjectUpdateIntent,
    ) -> None:
        """Update content, description, due date and project in one backend call.

        The project the backend reports back must be cached locally; when it
        is not, the call fails with a ``ResolutionError`` naming its remote id
        and the stored row is left untouched.

        Raises:
            NotFoundError: If the task is unknown locally
            ResolutionError: If the target or acknowledged project is unknown
            BackendError: If the backend call fails
        """
        remote_id = await self.get_task_remote_id(task_uuid)

        async with self.storage.session() as conn:
            projects = self._projects(conn)
            if project_update.kind is ProjectUpdateKind.SET:
                target = await projects.get_by_id(project_update.project_uuid)
                if target is None:
                    raise ResolutionError(
                        f"Project {project_update.project_uuid} not found locally. "
                        "Please sync projects first."
                    )
                remote_project_id = target.remote_id
            elif project_update.kind is ProjectUpdateKind.MOVE_TO_INBOX:
                inbox = await projects.get_inbox()
                if inbox is None:
                    logger.warning("no inbox project cached, project left unchanged")
                remote_project_id = inbox.remote_id if inbox else None
            else:
                remote_project_id = None

        backend_task = await self.get_backend().update_task(
            remote_id,
            UpdateTaskArgs(
                content=content,
                description=description,
                project_remote_id=remote_project_id,
                due_string=due_string,
            ),
        )

        async with self.storage.transaction() as conn:
            repo = self._tasks(conn)
            task = await repo.get_by_id(task_uuid)
            if task is None:
                logger.info("task %s vanished before update, skipping", task_uuid)
                return
            project_uuid = await self.resolve_local_project(
                conn, backend_task.project_remote_id, "task update"
            )
            task = _apply_backend_due_fields(task, backend_task).model_copy(
                update={
                    "content": backend_task.content,
                    "description": backend_task.description,
                    "project_uuid": project_uuid,
                }
            )
            await repo.update(task)

    async def update_task_due_date(self, task_uuid: str, due_date: str | None) -> None:
        """Set (or clear, with None) a literal "YYYY-MM-DD" due date.

        The old due time and recurrence are dropped either way.
        """
        remote_id = await self.get_task_remote_id(task_uuid)
        await self.get_backend().update_task(
            remote_id, UpdateTaskArgs(due_date=due_date, clear_due=due_date is None)
        )
        await self._update_local(
            task_uuid, due_date=due_date, due_datetime=None, is_recurring=False
        )

    async def update_task_due_string(self, task_uuid: str, due_string: str) -> None:
        """Set the due date from natural language.

        The backend parses the string; the resolved due and deadline fields
        are copied back verbatim.
        """
        remote_id = await self.get_task_remote_id(task_uuid)
        backend_task = await self.get_backend().update_task(
            remote_id, UpdateTaskArgs(due_string=due_string)
        )
        await self._update_local(
            task_uuid,
            due_date=backend_task.due_date,
            due_datetime=backend_task.due_datetime,
            is_recurring=backend_task.is_recurring,
            deadline=backend_task.deadline,
        )

    async def update_task_priority(self, task_uuid: str, priority: int) -> None:
        remote_id = await self.get_task_remote_id(task_uuid)
        await self.get_backend().update_task(remote_id, UpdateTaskArgs(priority=priority))
        await self._update_local(task_uuid, priority=priority)

    async def complete_task(self, task_uuid: str) -> None:
        """Complete a task. The backend cascades to subtasks; the cache does not."""
        remote_id = await self.get_task_remote_id(task_uuid)
        await self.get_backend().complete_task(remote_id)
        await self._update_local(task_uuid, is_completed=True)

    async def delete_task(self, task_uuid: str) -> None:
        """Delete a task remotely and soft-delete it locally so it can be restored."""
        remote_id = await self.get_task_remote_id(task_uuid)
        await self.get_backend().delete_task(remote_id)
        await self._update_local(task_uuid, is_deleted=True)

    async def restore_task(self, task_uuid: str) -> Task:
        """Bring back a deleted or completed task.

        A soft-deleted task no longer exists remotely, so it is recreated from
        the cached row and the old row is replaced by the new one. Any other
        task is reopened in place.

        Returns:
            The restored task (a new local uuid when it was recreated)

        Raises:
            NotFoundError: If the task is unknown locally
            BackendError: If the backend call fails
        """
        async with self.storage.session() as conn:
            task = await self._tasks(conn).get_by_id(task_uuid)
            if task is None:
                raise NotFoundError(f"Task not found in local storage: {task_uuid}")

            if task.is_deleted:
                remote_project_id = await self._projects(conn).get_remote_id(
                    task.project_uuid
                )
                remote_section_id = None
                if task.section_uuid:
                    remote_section_id = await self._sections(conn).get_remote_id(
                        task.section_uuid
                    )
                remote_parent_id = None
                if task.parent_uuid:
                    remote_parent_id = await self._tasks(conn).get_remote_id(
                        task.parent_uuid
                    )

        if not task.is_deleted:
            await self.get_backend().reopen_task(task.remote_id)
            await self._update_local(task_uuid, is_completed=False)
            logger.info("reopened task %s", task_uuid)
            return task.model_copy(update={"is_completed": False})

        # Labels are not carried over; the next sync links them again
        backend_task = await self.get_backend().create_task(
            CreateTaskArgs(
                content=task.content,
                description=task.description or None,
                project_remote_id=remote_project_id,
                section_remote_id=remote_section_id,
                parent_remote_id=remote_parent_id,
                priority=task.priority,
                due_date=task.due_date,
                due_datetime=task.due_datetime,
                duration=task.duration,
            )
        )

        async with self.storage.transaction() as conn:
            await self._tasks(conn).delete(task_uuid)
            restored = await self._upsert_backend_task(conn, backend_task, "task restore")
        logger.info("recreated task %s as %s", task_uuid, restored.uuid)
        return restored

    async def _update_local(self, task_uuid: str, **fields) -> None:
        """Apply field changes to a cached task; a vanished row is a no-op."""
        async with self.storage.transaction() as conn:
            repo = self._tasks(conn)
            task = await repo.get_by_id(task_uuid)
            if task is None:
                logger.info("task %s vanished before local write, skipping", task_uuid)
                return
            await repo.update(task.model_copy(update=fields))
