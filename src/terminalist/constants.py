"""User-facing message constants.

Error constants double as the fixed context prefix of every failed operation
("<prefix>: <underlying message>"), which is what the error sanitizer keys on.
"""

# Success messages
SUCCESS_SYNC_COMPLETED = "✅ Sync completed"
SUCCESS_TASK_CREATED_INBOX = "✅ Task created in Inbox"
SUCCESS_TASK_CREATED_PROJECT = "✅ Task created in project"
SUCCESS_TASK_UPDATED = "✅ Task updated"
SUCCESS_TASK_COMPLETED = "✅ Task completed"
SUCCESS_TASK_DELETED = "✅ Task deleted"
SUCCESS_TASK_RESTORED = "✅ Task restored"
SUCCESS_TASK_PRIORITY_UPDATED = "✅ Task priority set to P"
SUCCESS_TASK_DUE_DATE_SET = "✅ Task due date set"
SUCCESS_TASK_DUE_TODAY = "✅ Task due today"
SUCCESS_TASK_DUE_TOMORROW = "✅ Task due tomorrow"
SUCCESS_TASK_DUE_NEXT_WEEK = "✅ Task due next week"
SUCCESS_TASK_DUE_WEEKEND = "✅ Task due this weekend"
SUCCESS_TASK_DUE_CLEARED = "✅ Task due date cleared"
SUCCESS_TASK_DUE_STRING_SET = "✅ Task due date set to"
SUCCESS_PROJECT_CREATED_ROOT = "✅ Project created"
SUCCESS_PROJECT_CREATED_PARENT = "✅ Subproject created"
SUCCESS_PROJECT_UPDATED = "✅ Project updated"
SUCCESS_PROJECT_DELETED = "✅ Project deleted"
SUCCESS_LABEL_CREATED = "✅ Label created"
SUCCESS_LABEL_UPDATED = "✅ Label updated"
SUCCESS_LABEL_DELETED = "✅ Label deleted"

# Error messages
ERROR_OPERATION_FAILED = "❌ Operation failed"
ERROR_SYNC_FAILED = "❌ Sync failed"
ERROR_TASK_CREATE_FAILED = "❌ Failed to create task"
ERROR_TASK_UPDATE_FAILED = "❌ Failed to update task"
ERROR_TASK_COMPLETION_FAILED = "❌ Failed to complete task"
ERROR_TASK_DELETE_FAILED = "❌ Failed to delete task"
ERROR_TASK_RESTORE_FAILED = "❌ Failed to restore task"
ERROR_TASK_DUE_DATE_FAILED = "❌ Failed to set due date"
ERROR_TASK_PRIORITY_FAILED = "❌ Failed to update priority"
ERROR_PROJECT_CREATE_FAILED = "❌ Failed to create project"
ERROR_PROJECT_UPDATE_FAILED = "❌ Failed to update project"
ERROR_PROJECT_DELETE_FAILED = "❌ Failed to delete project"
ERROR_LABEL_CREATE_FAILED = "❌ Failed to create label"
ERROR_LABEL_UPDATE_FAILED = "❌ Failed to update label"
ERROR_LABEL_DELETE_FAILED = "❌ Failed to delete label"
ERROR_INVALID_PRIORITY_FORMAT = "❌ Priority must be a number between 1 and 4"
ERROR_INVALID_DATE_FORMAT = "❌ Invalid date format, expected YYYY-MM-DD"
ERROR_UNKNOWN_OPERATION = "❌ Unknown operation"

# Views
UPCOMING_DAYS = 90
