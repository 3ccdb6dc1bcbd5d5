try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("appeears-client")
except Exception:
    __version__ = "unknown"

from appeears_client.client import (
    create_client,
    download_bundle_files,
    fetch_bundle,
    is_task_done,
    start_session,
    start_task,
    task_status,
)
from appeears_client.errors import (
    AppEEARSError,
    DownloadFailure,
    InvalidBundle,
    InvalidCredentials,
    InvalidTask,
    InvalidTaskRequest,
    TaskTimedOut,
    TransportFailure,
    WaitCancelled,
)
from appeears_client.orchestrator import get_data
from appeears_client.payloads import build_task_payload, describe_task
from appeears_client.schemas import (
    Credentials,
    DataRequestResult,
    PointRecord,
    PointSelection,
    PolygonSelection,
    TaskDescriptor,
)

__all__ = [
    "AppEEARSError",
    "Credentials",
    "DataRequestResult",
    "DownloadFailure",
    "InvalidBundle",
    "InvalidCredentials",
    "InvalidTask",
    "InvalidTaskRequest",
    "PointRecord",
    "PointSelection",
    "PolygonSelection",
    "TaskDescriptor",
    "TaskTimedOut",
    "TransportFailure",
    "WaitCancelled",
    "build_task_payload",
    "create_client",
    "describe_task",
    "download_bundle_files",
    "fetch_bundle",
    "get_data",
    "is_task_done",
    "start_session",
    "start_task",
    "task_status",
]
