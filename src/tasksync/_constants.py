"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000/api"
USER_AGENT = "tasksync/0.1"
DEFAULT_TIMEOUT_S = 10.0

TASKS_PATH = "/tasks"

# ------------------------------------------------------------------
# User-facing messages stored in TaskStore.error
# ------------------------------------------------------------------

FETCH_FAILED_MESSAGE = "Failed to load tasks. Please check if the backend is running."
CREATE_FAILED_MESSAGE = "Failed to create task. Please try again."
UPDATE_FAILED_MESSAGE = "Failed to update task. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete task. Please try again."
