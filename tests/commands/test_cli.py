"""End-to-end tests for the command-line surface.

Commands run against the real shared cache file (redirected into tmp_path)
with a FakeBackend registered under its own backend type.
"""

from __future__ import annotations

from datetime import date

import pytest
from typer.testing import CliRunner

from fakes import BACKEND_UUID, FakeBackend, remote_project, remote_task
from terminalist.adapters.sqlite import DatabaseConnection
from terminalist.backends import BackendLabel
from terminalist.backends.registry import BACKEND_FACTORIES
from terminalist.constants import ERROR_TASK_COMPLETION_FAILED
from terminalist.exceptions import BackendError
from terminalist.main import app
from terminalist.services.config_service import get_config_service

runner = CliRunner()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _invoke(*args, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


def _task_uuid(remote_id: str) -> str:
    row = DatabaseConnection.get_connection().execute(
        "SELECT uuid FROM tasks WHERE remote_id = ?", (remote_id,)
    ).fetchone()
    return row["uuid"]


def _task_row(remote_id: str):
    return DatabaseConnection.get_connection().execute(
        "SELECT * FROM tasks WHERE remote_id = ?", (remote_id,)
    ).fetchone()


@pytest.fixture
def remote(monkeypatch) -> FakeBackend:
    """A fake backend stored as the only backend instance of the shared cache."""
    backend = FakeBackend()
    backend.projects = [
        remote_project("P-INBOX", "Inbox", is_inbox_project=True),
        remote_project("P-WORK", "Work", order_index=1),
    ]
    backend.labels = [BackendLabel(remote_id="L-1", name="home")]
    backend.tasks = [
        remote_task("T-1", "Write report", "P-WORK", due_date=date.today().isoformat()),
        remote_task("T-2", "Water plants", "P-INBOX", labels=["home"]),
    ]
    monkeypatch.setitem(BACKEND_FACTORIES, "fake", lambda instance: backend)
    DatabaseConnection.get_connection().execute(
        "INSERT INTO backends (uuid, backend_type, name) VALUES (?, ?, ?)",
        (BACKEND_UUID, "fake", "Fake"),
    )
    return backend


@pytest.fixture
def synced(remote) -> FakeBackend:
    result = _invoke("sync")
    assert result.exit_code == 0, result.output
    return remote


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


class TestApp:
    def test_help_lists_commands(self):
        result = _invoke("--help")

        assert result.exit_code == 0
        for name in ("sync", "today", "backend", "project", "label", "config"):
            assert name in result.output

    def test_version(self):
        result = _invoke("version")
        assert result.exit_code == 0
        assert "terminalist" in result.output

    def test_unknown_command_suggests(self):
        result = _invoke("tody")

        assert result.exit_code == 1
        assert "Did you mean" in result.output
        assert "today" in result.output

    def test_no_backend_configured(self):
        result = _invoke("today")

        assert result.exit_code == 1
        assert "No backend configured" in result.output


# ---------------------------------------------------------------------------
# Sync and views
# ---------------------------------------------------------------------------


class TestViews:
    def test_sync_reports_counts(self, remote):
        result = _invoke("sync")

        assert result.exit_code == 0, result.output
        assert "Sync completed: 2 projects, 1 labels, 2 open tasks" in result.output

    def test_sync_failure_is_sanitized(self, remote):
        remote.fail_with = BackendError("Invalid Todoist API token secret-xyz", 401)

        result = _invoke("sync")

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert "secret-xyz" not in result.output

    def test_today(self, synced):
        result = _invoke("today")

        assert result.exit_code == 0, result.output
        assert "Write report" in result.output
        assert "Water plants" not in result.output

    def test_view_uses_configured_default(self, synced):
        get_config_service().set("ui.default_view", "tomorrow")

        result = _invoke("view")

        assert result.exit_code == 0, result.output
        assert "Tomorrow" in result.output
        assert "Write report" not in result.output

    def test_unknown_view(self, synced):
        result = _invoke("view", "someday")
        assert result.exit_code == 1
        assert "Unknown view" in result.output

    def test_search_and_show(self, synced):
        search = _invoke("search", "plants")
        show = _invoke("show", _task_uuid("T-2")[:8])

        assert "Water plants" in search.output
        assert show.exit_code == 0, show.output
        assert "@home" in show.output
        assert "Inbox" in show.output

    def test_before_views_runs_sync(self, remote):
        get_config_service().set("sync.before_views", True)

        result = _invoke("today")

        assert result.exit_code == 0, result.output
        assert "Write report" in result.output
        assert remote.calls_to("fetch_tasks")


# ---------------------------------------------------------------------------
# Task commands
# ---------------------------------------------------------------------------


class TestTaskCommands:
    def test_add_to_project_by_name(self, synced):
        result = _invoke("add", "Plan Q3", "--project", "Work", "--due", "tmrw")

        assert result.exit_code == 0, result.output
        (args,), = synced.calls_to("create_task")
        assert args.project_remote_id == "P-WORK"
        assert args.due_string == "tomorrow"

    def test_task_group_alias(self, synced):
        result = _invoke("task", "add", "Quick note")

        assert result.exit_code == 0, result.output
        assert "Task created in Inbox" in result.output

    def test_edit_to_inbox(self, synced):
        result = _invoke("edit", _task_uuid("T-1")[:8], "--inbox")

        assert result.exit_code == 0, result.output
        (_, args), = synced.calls_to("update_task")
        assert args.project_remote_id == "P-INBOX"
        assert args.content == "Write report"

    def test_edit_rejects_project_and_inbox(self, synced):
        result = _invoke("edit", "abc", "--inbox", "--project", "Work")
        assert result.exit_code == 1

    def test_done_reports_partial_failure(self, synced):
        result = _invoke("done", _task_uuid("T-1"), "ffffffff-none")

        assert result.exit_code == 1
        assert _task_row("T-1")["is_completed"] == 1
        assert "No task matches" in result.output

    def test_done_backend_error_shows_prefix_only(self, synced):
        synced.fail_with = BackendError("HTTP 500 https://api/v1?token=abc")

        result = _invoke("done", _task_uuid("T-1"))

        assert result.exit_code == 1
        assert ERROR_TASK_COMPLETION_FAILED in result.output
        assert "token=abc" not in result.output

    def test_delete_then_restore(self, synced):
        old_uuid = _task_uuid("T-1")

        deleted = _invoke("delete", old_uuid[:8], "--yes")
        restored = _invoke("restore", old_uuid[:8])

        assert deleted.exit_code == 0, deleted.output
        assert restored.exit_code == 0, restored.output
        rows = DatabaseConnection.get_connection().execute(
            "SELECT uuid, is_deleted FROM tasks WHERE content = 'Write report'"
        ).fetchall()
        assert len(rows) == 1
        assert rows[0]["uuid"] != old_uuid
        assert rows[0]["is_deleted"] == 0

    def test_delete_cancelled(self, synced):
        result = _invoke("delete", _task_uuid("T-1")[:8], input="n\n")

        assert result.exit_code == 0
        assert synced.calls_to("delete_task") == []

    def test_priority_cycles_and_validates(self, synced):
        short = _task_uuid("T-1")[:8]

        cycled = _invoke("priority", short)
        invalid = _invoke("priority", short, "9")

        assert cycled.exit_code == 0, cycled.output
        assert _task_row("T-1")["priority"] == 2
        assert invalid.exit_code == 1
        assert "Priority must be a number" in invalid.output

    @pytest.mark.parametrize(
        "when,expected",
        [
            ("2026-12-24", "2026-12-24"),
            ("clear", None),
        ],
    )
    def test_due_literal_and_clear(self, synced, when, expected):
        result = _invoke("due", _task_uuid("T-1")[:8], when)

        assert result.exit_code == 0, result.output
        assert _task_row("T-1")["due_date"] == expected

    def test_due_natural_language_goes_to_backend(self, synced):
        synced.due_strings["next friday"] = "2026-03-20"

        result = _invoke("due", _task_uuid("T-1")[:8], "next fri")

        assert result.exit_code == 0, result.output
        assert _task_row("T-1")["due_date"] == "2026-03-20"

    def test_due_invalid_literal_date(self, synced):
        result = _invoke("due", _task_uuid("T-1")[:8], "2026-13-01")
        assert result.exit_code == 1
        assert "Invalid date format" in result.output


# ---------------------------------------------------------------------------
# Projects, labels, backends, config
# ---------------------------------------------------------------------------


class TestProjectAndLabelCommands:
    def test_projects_tree(self, synced):
        result = _invoke("projects")

        assert result.exit_code == 0, result.output
        assert result.output.index("Inbox") < result.output.index("Work")

    def test_project_add_rename_delete(self, synced):
        assert _invoke("project", "add", "Side", "--parent", "Work").exit_code == 0
        assert _invoke("project", "rename", "Side", "Hobby").exit_code == 0
        result = _invoke("project", "delete", "Hobby", "--yes")

        assert result.exit_code == 0, result.output
        (args,), = synced.calls_to("create_project")
        assert args.parent_remote_id == "P-WORK"
        assert len(synced.calls_to("delete_project")) == 1

    def test_unknown_project(self, synced):
        result = _invoke("project", "tasks", "Nowhere")
        assert result.exit_code == 1
        assert "No project matches" in result.output

    def test_label_commands(self, synced):
        listed = _invoke("labels")
        tasks = _invoke("label", "tasks", "@home")
        added = _invoke("label", "add", "@errands")

        assert "@home" in listed.output
        assert "Water plants" in tasks.output
        assert added.exit_code == 0, added.output
        assert synced.calls_to("create_label")[0][0].name == "errands"


class TestBackendCommands:
    def test_add_first_backend_becomes_default(self):
        result = _invoke("backend", "add", "Personal", "--token", "tok-123")

        assert result.exit_code == 0, result.output
        assert get_config_service().config.default_backend is not None
        assert "Personal *" in _invoke("backend", "list").output

    def test_add_unknown_type(self):
        result = _invoke("backend", "add", "X", "--type", "trello", "--token", "t")
        assert result.exit_code == 1
        assert "Unknown backend type" in result.output

    def test_use_and_remove(self, synced):
        assert _invoke("backend", "use", BACKEND_UUID[:8]).exit_code == 0
        assert get_config_service().config.default_backend == BACKEND_UUID

        result = _invoke("backend", "remove", BACKEND_UUID[:8], "--yes")

        assert result.exit_code == 0, result.output
        assert get_config_service().config.default_backend is None
        count = DatabaseConnection.get_connection().execute(
            "SELECT COUNT(*) FROM tasks"
        ).fetchone()[0]
        assert count == 0


class TestConfigCommands:
    def test_set_get_reset(self):
        assert _invoke("config", "set", "sync.upcoming_days", "14").exit_code == 0
        assert _invoke("config", "get", "sync.upcoming_days").output.strip() == "14"

        assert _invoke("config", "reset", "--yes").exit_code == 0
        assert get_config_service().config.sync.upcoming_days == 90

    def test_invalid_value(self):
        result = _invoke("config", "set", "ui.default_view", "someday")
        assert result.exit_code == 1

    def test_unknown_key(self):
        result = _invoke("config", "get", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_logs_path(self, tmp_path):
        result = _invoke("logs", "--path")
        assert str(tmp_path / "logs") in result.output.replace("\n", "")
