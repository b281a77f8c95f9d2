"""Todoist API v1 gateway.

Concrete ``Backend`` backed by httpx. Every transport or HTTP failure is
turned into a ``BackendError`` so callers only deal with one error type.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from terminalist.backends.base import (
    Backend,
    BackendLabel,
    BackendProject,
    BackendSection,
    BackendTask,
    CreateLabelArgs,
    CreateProjectArgs,
    CreateTaskArgs,
    UpdateLabelArgs,
    UpdateProjectArgs,
    UpdateTaskArgs,
)
from terminalist.exceptions import BackendError

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.todoist.com/api/v1"
_DEFAULT_TIMEOUT = 30.0
_PAGE_LIMIT = 200  # API page cap
_CLEAR_DUE = "no date"


def _results(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get("results", [])
    return []


def _optional_id(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


def parse_project(item: dict[str, Any]) -> BackendProject:
    return BackendProject(
        remote_id=str(item["id"]),
        name=item["name"],
        color=item.get("color"),
        is_favorite=item.get("is_favorite", False),
        is_inbox_project=item.get("inbox_project", item.get("is_inbox_project", False)),
        order_index=item.get("child_order", item.get("order", 0)) or 0,
        parent_remote_id=_optional_id(item.get("parent_id")),
    )


def parse_section(item: dict[str, Any]) -> BackendSection:
    return BackendSection(
        remote_id=str(item["id"]),
        name=item["name"],
        project_remote_id=str(item["project_id"]),
        order_index=item.get("section_order", item.get("order", 0)) or 0,
    )


def parse_label(item: dict[str, Any]) -> BackendLabel:
    return BackendLabel(
        remote_id=str(item["id"]),
        name=item["name"],
        color=item.get("color"),
        order_index=item.get("item_order", item.get("order", 0)) or 0,
        is_favorite=item.get("is_favorite", False),
    )


def parse_task(item: dict[str, Any]) -> BackendTask:
    """Convert a Todoist task payload.

    Todoist reports a timed due either as ``due.datetime`` or as a
    ``due.date`` containing a "T"; both end up in ``due_datetime`` while
    ``due_date`` always holds the plain calendar date.
    """
    due = item.get("due") or {}
    due_date = due_datetime = None
    if due.get("date"):
        raw = due["date"]
        due_date = raw[:10]
        due_datetime = due.get("datetime") or (raw if "T" in raw else None)

    deadline = (item.get("deadline") or {}).get("date")

    duration = None
    if item.get("duration"):
        duration = f"{item['duration']['amount']} {item['duration']['unit']}"

    return BackendTask(
        remote_id=str(item["id"]),
        content=item["content"],
        description=item.get("description") or None,
        project_remote_id=str(item["project_id"]),
        section_remote_id=_optional_id(item.get("section_id")),
        parent_remote_id=_optional_id(item.get("parent_id")),
        priority=item.get("priority", 1),
        order_index=item.get("child_order", item.get("order", 0)) or 0,
        due_date=due_date,
        due_datetime=due_datetime,
        is_recurring=due.get("is_recurring", False),
        deadline=deadline,
        duration=duration,
        is_completed=item.get("checked", item.get("is_completed", False)),
        labels=item.get("labels", []),
    )


def _duration_fields(duration: str | None) -> dict[str, Any]:
    """Split "30 minute" into Todoist's duration/duration_unit pair."""
    if not duration:
        return {}
    amount, _, unit = duration.partition(" ")
    return {"duration": int(amount), "duration_unit": unit or "minute"}


class TodoistBackend(Backend):
    """Todoist API v1 gateway.

    Args:
        api_token: Todoist personal API token.
        base_url: Override API base URL (useful for testing).
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = _BASE_URL,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def backend_type(self) -> str:
        return "todoist"

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def fetch_projects(self) -> list[BackendProject]:
        items = await self._get_all("/projects")
        return [parse_project(p) for p in items if not p.get("is_archived", False)]

    async def fetch_tasks(self) -> list[BackendTask]:
        items = await self._get_all("/tasks")
        return [
            parse_task(t)
            for t in items
            if not t.get("is_deleted") and not t.get("checked")
        ]

    async def fetch_labels(self) -> list[BackendLabel]:
        return [parse_label(lbl) for lbl in await self._get_all("/labels")]

    async def fetch_sections(self) -> list[BackendSection]:
        return [parse_section(s) for s in await self._get_all("/sections")]

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project(self, args: CreateProjectArgs) -> BackendProject:
        payload: dict[str, Any] = {"name": args.name}
        if args.parent_remote_id:
            payload["parent_id"] = args.parent_remote_id
        if args.color is not None:
            payload["color"] = args.color
        if args.is_favorite is not None:
            payload["is_favorite"] = args.is_favorite
        return parse_project(await self._request("POST", "/projects", json=payload))

    async def update_project(
        self, remote_id: str, args: UpdateProjectArgs
    ) -> BackendProject:
        payload = args.model_dump(exclude_none=True)
        data = await self._request("POST", f"/projects/{remote_id}", json=payload)
        return parse_project(data)

    async def delete_project(self, remote_id: str) -> None:
        await self._request("DELETE", f"/projects/{remote_id}")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def create_task(self, args: CreateTaskArgs) -> BackendTask:
        payload: dict[str, Any] = {"content": args.content}
        # Empty project id: omit it so Todoist files the task in the inbox
        optional = {
            "description": args.description,
            "project_id": args.project_remote_id or None,
            "section_id": args.section_remote_id,
            "parent_id": args.parent_remote_id,
            "priority": args.priority,
            "due_string": args.due_string,
            # Todoist accepts a single due_* field per request
            "due_date": None if args.due_datetime else args.due_date,
            "due_datetime": args.due_datetime,
            "labels": args.labels,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        payload.update(_duration_fields(args.duration))
        return parse_task(await self._request("POST", "/tasks", json=payload))

    async def update_task(self, remote_id: str, args: UpdateTaskArgs) -> BackendTask:
        if args.project_remote_id:
            await self._request(
                "POST",
                f"/tasks/{remote_id}/move",
                json={"project_id": args.project_remote_id},
            )

        payload = args.model_dump(
            exclude_none=True, exclude={"project_remote_id", "clear_due"}
        )
        if args.clear_due:
            payload["due_string"] = _CLEAR_DUE

        if not payload:
            return parse_task(await self._request("GET", f"/tasks/{remote_id}"))
        return parse_task(
            await self._request("POST", f"/tasks/{remote_id}", json=payload)
        )

    async def delete_task(self, remote_id: str) -> None:
        await self._request("DELETE", f"/tasks/{remote_id}")

    async def complete_task(self, remote_id: str) -> None:
        await self._request("POST", f"/tasks/{remote_id}/close")

    async def reopen_task(self, remote_id: str) -> None:
        await self._request("POST", f"/tasks/{remote_id}/reopen")

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    async def create_label(self, args: CreateLabelArgs) -> BackendLabel:
        payload = args.model_dump(exclude_none=True)
        return parse_label(await self._request("POST", "/labels", json=payload))

    async def update_label(self, remote_id: str, args: UpdateLabelArgs) -> BackendLabel:
        payload = args.model_dump(exclude_none=True)
        data = await self._request("POST", f"/labels/{remote_id}", json=payload)
        return parse_label(data)

    async def delete_label(self, remote_id: str) -> None:
        await self._request("DELETE", f"/labels/{remote_id}")

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _get_all(self, path: str) -> list[dict[str, Any]]:
        """GET a paginated collection, following ``next_cursor``."""
        params: dict[str, Any] = {"limit": _PAGE_LIMIT}
        items: list[dict[str, Any]] = []
        while True:
            data = await self._request("GET", path, params=params)
            page = _results(data)
            items.extend(page)
            next_cursor = data.get("next_cursor") if isinstance(data, dict) else None
            if not next_cursor or not page:
                return items
            params["cursor"] = next_cursor

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a request, raising ``BackendError`` on any failure.

        Returns:
            Parsed JSON body, or None for empty responses
        """
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, headers=self._headers, params=params, json=json
                )
        except httpx.HTTPError as e:
            logger.warning("todoist %s %s failed: %s", method, path, type(e).__name__)
            raise BackendError(f"Todoist request failed: {e}") from e

        if response.status_code == 401:
            raise BackendError("Invalid Todoist API token", status_code=401)
        if response.status_code == 403:
            raise BackendError(
                "Insufficient permissions for the requested resource", status_code=403
            )
        if response.is_error:
            logger.warning("todoist %s %s -> %d", method, path, response.status_code)
            raise BackendError(
                f"Todoist API error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from Todoist: {e}") from e
