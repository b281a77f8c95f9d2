"""Background runner for sync-service work.

Each unit of work runs as its own ``asyncio.Task`` and reports exactly one
event on a single-consumer queue. Failures are logged in full and reported
to the presentation layer in sanitized form only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Union

from terminalist.constants import ERROR_OPERATION_FAILED, ERROR_SYNC_FAILED
from terminalist.models import Label, Project, Section, Task
from terminalist.services.sync import SyncService, SyncStatus
from terminalist.utils.error_sanitizer import sanitize_user_error
from terminalist.utils.logger import sanitize_for_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncCompleted:
    status: SyncStatus


@dataclass(frozen=True)
class SyncFailed:
    message: str


@dataclass(frozen=True)
class DataLoaded:
    projects: list[Project] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResultsLoaded:
    query: str
    results: list[Task] = field(default_factory=list)


@dataclass(frozen=True)
class OperationSucceeded:
    message: str


@dataclass(frozen=True)
class OperationFailed:
    message: str


BackgroundEvent = Union[
    SyncCompleted,
    SyncFailed,
    DataLoaded,
    SearchResultsLoaded,
    OperationSucceeded,
    OperationFailed,
]


class TaskManager:
    """Runs background operations and queues their outcome events.

    In-flight work is never cancelled: once a remote mutation has been
    issued it runs to completion. ``cleanup_finished_tasks`` only forgets
    tasks that are already done.
    """

    def __init__(self) -> None:
        self.events: asyncio.Queue[BackgroundEvent] = asyncio.Queue()
        self._tasks: dict[int, asyncio.Task[None]] = {}
        self._next_id = 0

    def _spawn(self, coro: Awaitable[None], description: str) -> int:
        task_id = self._next_id
        self._next_id += 1
        self._tasks[task_id] = asyncio.ensure_future(coro)
        logger.debug("spawned background task %d: %s", task_id, description)
        return task_id

    def spawn_task_operation(
        self,
        operation: Callable[[], Awaitable[str]],
        description: str,
    ) -> int:
        """Run a write operation in the background.

        Args:
            operation: Zero-argument coroutine factory returning a success
                message; a raised exception is the failure message
            description: Log-safe description of the operation

        Returns:
            Background task id
        """

        async def run() -> None:
            try:
                message = await operation()
            except Exception as e:
                logger.error(
                    "background operation failed (%s): %s",
                    description,
                    sanitize_for_log(str(e)),
                )
                await self.events.put(
                    OperationFailed(sanitize_user_error(str(e), ERROR_OPERATION_FAILED))
                )
                return
            logger.info("background operation finished: %s", description)
            await self.events.put(OperationSucceeded(message))

        return self._spawn(run(), description)

    def spawn_sync(self, sync_service: SyncService) -> int:
        async def run() -> None:
            try:
                status = await sync_service.sync()
            except Exception as e:
                logger.error("sync failed: %s", sanitize_for_log(str(e)))
                await self.events.put(
                    SyncFailed(sanitize_user_error(str(e), ERROR_SYNC_FAILED))
                )
                return
            await self.events.put(SyncCompleted(status))

        return self._spawn(run(), "sync")

    def spawn_data_load(self, sync_service: SyncService) -> int:
        async def run() -> None:
            try:
                projects, labels, sections, tasks = await sync_service.load_all()
            except Exception as e:
                logger.error("data load failed: %s", sanitize_for_log(str(e)))
                await self.events.put(
                    OperationFailed(sanitize_user_error(str(e), ERROR_OPERATION_FAILED))
                )
                return
            await self.events.put(DataLoaded(projects, labels, sections, tasks))

        return self._spawn(run(), "data load")

    def spawn_task_search(self, sync_service: SyncService, query: str) -> int:
        async def run() -> None:
            try:
                results = await sync_service.search_tasks(query)
            except Exception as e:
                logger.error("search failed: %s", sanitize_for_log(str(e)))
                results = []
            await self.events.put(SearchResultsLoaded(query, results))

        return self._spawn(run(), "search")

    async def next_event(self) -> BackgroundEvent:
        return await self.events.get()

    def drain_events(self) -> list[BackgroundEvent]:
        """Return every event queued so far without waiting."""
        drained: list[BackgroundEvent] = []
        while not self.events.empty():
            drained.append(self.events.get_nowait())
        return drained

    def cleanup_finished_tasks(self) -> int:
        finished = [task_id for task_id, task in self._tasks.items() if task.done()]
        for task_id in finished:
            del self._tasks[task_id]
        return len(finished)

    def task_count(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait until every spawned task has finished."""
        while pending := [t for t in self._tasks.values() if not t.done()]:
            await asyncio.gather(*pending)

