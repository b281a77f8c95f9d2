"""Database schema definitions for the local cache.

Every synced table carries a local ``uuid`` primary key and the
``(backend_uuid, remote_id)`` pair assigned by the backend instance. The pair
is UNIQUE per table and is the conflict target of every upsert.
"""

from __future__ import annotations

# Configured backend instances (one per connected account)
CREATE_BACKENDS_TABLE = """
CREATE TABLE IF NOT EXISTS backends (
    uuid TEXT PRIMARY KEY,
    backend_type TEXT NOT NULL,
    name TEXT NOT NULL,
    is_enabled BOOLEAN NOT NULL DEFAULT 1,
    credentials TEXT NOT NULL DEFAULT '{}',
    settings TEXT NOT NULL DEFAULT '{}'
)
"""

# Projects table
CREATE_PROJECTS_TABLE = """
CREATE TABLE IF NOT EXISTS projects (
    uuid TEXT PRIMARY KEY,
    backend_uuid TEXT NOT NULL,
    remote_id TEXT NOT NULL,
    name TEXT NOT NULL,
    is_favorite BOOLEAN NOT NULL DEFAULT 0,
    is_inbox_project BOOLEAN NOT NULL DEFAULT 0,
    order_index INTEGER NOT NULL DEFAULT 0,
    parent_uuid TEXT,
    FOREIGN KEY (backend_uuid) REFERENCES backends(uuid) ON DELETE CASCADE,
    FOREIGN KEY (parent_uuid) REFERENCES projects(uuid) ON DELETE CASCADE
)
"""

# Sections table
CREATE_SECTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sections (
    uuid TEXT PRIMARY KEY,
    backend_uuid TEXT NOT NULL,
    remote_id TEXT NOT NULL,
    name TEXT NOT NULL,
    project_uuid TEXT NOT NULL,
    order_index INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY (backend_uuid) REFERENCES backends(uuid) ON DELETE CASCADE,
    FOREIGN KEY (project_uuid) REFERENCES projects(uuid) ON DELETE CASCADE
)
"""

# Labels table
CREATE_LABELS_TABLE = """
CREATE TABLE IF NOT EXISTS labels (
    uuid TEXT PRIMARY KEY,
    backend_uuid TEXT NOT NULL,
    remote_id TEXT NOT NULL,
    name TEXT NOT NULL,
    color TEXT,
    order_index INTEGER NOT NULL DEFAULT 0,
    is_favorite BOOLEAN NOT NULL DEFAULT 0,
    FOREIGN KEY (backend_uuid) REFERENCES backends(uuid) ON DELETE CASCADE
)
"""

# Tasks table
CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    uuid TEXT PRIMARY KEY,
    backend_uuid TEXT NOT NULL,
    remote_id TEXT NOT NULL,
    content TEXT NOT NULL,
    description TEXT,
    project_uuid TEXT NOT NULL,
    section_uuid TEXT,
    parent_uuid TEXT,
    priority INTEGER NOT NULL DEFAULT 1,
    order_index INTEGER NOT NULL DEFAULT 0,
    due_date TEXT,
    due_datetime TEXT,
    is_recurring BOOLEAN NOT NULL DEFAULT 0,
    deadline TEXT,
    duration TEXT,
    is_completed BOOLEAN NOT NULL DEFAULT 0,
    is_deleted BOOLEAN NOT NULL DEFAULT 0,
    FOREIGN KEY (backend_uuid) REFERENCES backends(uuid) ON DELETE CASCADE,
    FOREIGN KEY (project_uuid) REFERENCES projects(uuid) ON DELETE CASCADE,
    FOREIGN KEY (section_uuid) REFERENCES sections(uuid) ON DELETE SET NULL,
    FOREIGN KEY (parent_uuid) REFERENCES tasks(uuid) ON DELETE CASCADE
)
"""

# Task-Label junction table (many-to-many)
CREATE_TASK_LABELS_TABLE = """
CREATE TABLE IF NOT EXISTS task_labels (
    task_uuid TEXT NOT NULL,
    label_uuid TEXT NOT NULL,
    PRIMARY KEY (task_uuid, label_uuid),
    FOREIGN KEY (task_uuid) REFERENCES tasks(uuid) ON DELETE CASCADE,
    FOREIGN KEY (label_uuid) REFERENCES labels(uuid) ON DELETE CASCADE
)
"""

# Remote id mapping, one per entity type
CREATE_REMOTE_ID_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_projects_backend_remote ON projects(backend_uuid, remote_id)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_sections_backend_remote ON sections(backend_uuid, remote_id)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_labels_backend_remote ON labels(backend_uuid, remote_id)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_tasks_backend_remote ON tasks(backend_uuid, remote_id)",
]

CREATE_TASK_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_uuid)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_visible ON tasks(is_deleted, is_completed)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks(parent_uuid)",
]

CREATE_PROJECT_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_projects_inbox ON projects(backend_uuid, is_inbox_project)",
]

# All table creation statements in dependency order
ALL_TABLES = [
    CREATE_BACKENDS_TABLE,
    CREATE_PROJECTS_TABLE,
    CREATE_SECTIONS_TABLE,
    CREATE_LABELS_TABLE,
    CREATE_TASKS_TABLE,
    CREATE_TASK_LABELS_TABLE,
]

ALL_INDEXES = CREATE_REMOTE_ID_INDEXES + CREATE_TASK_INDEXES + CREATE_PROJECT_INDEXES
