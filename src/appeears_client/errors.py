"""Error taxonomy for AppEEARS client operations."""


class AppEEARSError(Exception):
    """Base class for all AppEEARS client errors."""

    code = "AppEEARSError"


class InvalidCredentials(AppEEARSError):
    """Raised when login does not yield a session token."""

    code = "InvalidCredentials"


class InvalidTask(AppEEARSError):
    """Raised when task submission does not yield a task identifier."""

    code = "InvalidTask"

    def __init__(self, message: str | None = None) -> None:
        self.server_message = message
        super().__init__(message or "Task submission failed")


class InvalidTaskRequest(AppEEARSError, ValueError):
    """Raised when task inputs cannot be turned into a valid payload."""

    code = "InvalidTaskRequest"


class InvalidBundle(AppEEARSError):
    """Raised when a bundle response carries no files."""

    code = "InvalidBundle"


class DownloadFailure(AppEEARSError):
    """Raised when a bundle file cannot be downloaded or written."""

    code = "DownloadFailure"

    def __init__(self, task_id: str, detail: str | None = None) -> None:
        self.task_id = task_id
        self.detail = detail
        super().__init__(f"Error downloading/writing files for task {task_id}")


class TransportFailure(AppEEARSError):
    """Raised for network or HTTP-layer errors not otherwise classified."""

    code = "TransportFailure"


class TaskTimedOut(AppEEARSError):
    """Raised when a task does not complete within the allowed wait."""

    code = "TimedOut"

    def __init__(self, task_id: str, waited_seconds: float) -> None:
        self.task_id = task_id
        self.waited_seconds = waited_seconds
        super().__init__(f"Timed out waiting for task {task_id}")


class WaitCancelled(AppEEARSError):
    """Raised when the completion wait is cancelled through its stop event."""

    code = "Cancelled"

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Cancelled waiting for task {task_id}")
