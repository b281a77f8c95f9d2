"""Tests for the rich output formatters."""

from __future__ import annotations

from terminalist.models import Project, Task
from terminalist.utils.dates import format_date_with_offset
from terminalist.utils.ui.console import get_console
from terminalist.utils.ui.formatters import (
    format_projects,
    format_task_line,
    format_tasks,
    short_id,
)

BACKEND = "b-1"


def _task(**fields) -> Task:
    values = {
        "uuid": "1234567890abcdef",
        "backend_uuid": BACKEND,
        "remote_id": "T-1",
        "content": "Write report",
        "project_uuid": "p-work",
    }
    values.update(fields)
    return Task(**values)


def _project(uuid: str, name: str, **fields) -> Project:
    return Project(uuid=uuid, backend_uuid=BACKEND, remote_id=uuid, name=name, **fields)


class TestTaskLine:
    def test_short_id(self):
        assert short_id("1234567890abcdef") == "12345678"

    def test_includes_due_project_and_labels(self):
        task = _task(due_date=format_date_with_offset(1), labels=["l-1", "l-unknown"])

        line = format_task_line(task, {"p-work": "Work"}, {"l-1": "home"}).plain

        assert line.startswith("12345678 ")
        assert "Write report • tomorrow" in line
        assert "[Work]" in line
        assert "@home" in line
        assert "l-unknown" not in line

    def test_overdue_due_is_red(self):
        line = format_task_line(_task(due_date=format_date_with_offset(-2)))

        styles = [str(span.style) for span in line.spans]
        assert "bold red" in styles


class TestListings:
    def test_empty_task_list(self):
        with get_console().capture() as capture:
            format_tasks([], "Today")

        output = capture.get()
        assert "Today (0)" in output
        assert "Nothing here" in output

    def test_project_tree_indents_children(self):
        projects = [
            _project("p-inbox", "Inbox", is_inbox_project=True),
            _project("p-work", "Work"),
            _project("p-reports", "Reports", parent_uuid="p-work"),
            _project("p-orphan", "Orphan", parent_uuid="p-missing"),
        ]

        with get_console().capture() as capture:
            format_projects(projects)

        lines = capture.get().splitlines()
        assert [line.split()[-1] for line in lines] == ["Inbox", "Work", "Reports", "Orphan"]
        assert lines[2].startswith("  ")
        assert not lines[3].startswith(" ")

