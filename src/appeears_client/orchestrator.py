"""End-to-end AppEEARS data request: login, submit, wait, fetch bundle, download."""

import logging
import os
import time
from threading import Event
from typing import Protocol

import httpx

from appeears_client.client import (
    create_client,
    download_bundle_files,
    fetch_bundle,
    is_task_done,
    start_session,
    start_task,
)
from appeears_client.config import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    MIN_POLL_INTERVAL_SECONDS,
    AppEEARSSettings,
    load_settings,
)
from appeears_client.errors import AppEEARSError, InvalidTask, TaskTimedOut, WaitCancelled
from appeears_client.schemas import Credentials, DataRequestResult, SessionToken, TaskDescriptor

logger = logging.getLogger(__name__)

CREDENTIALS_INVALID_MESSAGE = "Credentials invalid"
TASK_FAILED_MESSAGE = "Task submission failed"
BUNDLE_INVALID_MESSAGE = "Invalid bundle"
SUCCESS_MESSAGE = "Successfully downloaded files"

_USE_SETTINGS = object()


class StopEvent(Protocol):
    def wait(self, timeout: float | None = None) -> bool: ...


def effective_poll_interval(requested: float | None) -> float:
    """Clamp the requested poll interval to the service minimum of 30 seconds."""
    if requested is None:
        return DEFAULT_POLL_INTERVAL_SECONDS
    return max(MIN_POLL_INTERVAL_SECONDS, float(requested))


def wait_for_completion(
    client: httpx.Client,
    token: SessionToken | str,
    task_id: str,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_wait_seconds: float | None = None,
    stop_event: StopEvent | None = None,
) -> int:
    """Block until the task reports completion, returning the number of polls.

    Raises:
        TaskTimedOut: If the next wait would run past ``max_wait_seconds``.
        WaitCancelled: If ``stop_event`` is set while waiting.
    """
    interval = effective_poll_interval(poll_interval_seconds)
    stop_event = stop_event or Event()
    started = time.monotonic()
    polls = 0

    while True:
        polls += 1
        if is_task_done(client, token, task_id):
            logger.info("Task %s done after %s poll(s)", task_id, polls)
            return polls

        elapsed = time.monotonic() - started
        if max_wait_seconds is not None and elapsed + interval > max_wait_seconds:
            raise TaskTimedOut(task_id, elapsed)

        logger.info("Task %s pending (poll %s, %.0fs elapsed); next check in %.0fs", task_id, polls, elapsed, interval)
        if stop_event.wait(timeout=interval):
            raise WaitCancelled(task_id)


def _failure(error: AppEEARSError, message: str, task_id: str | None = None) -> DataRequestResult:
    logger.error("AppEEARS request failed (%s): %s", error.code, message)
    return DataRequestResult(status="failure", message=message, error=error.code, task_id=task_id)


def get_data(
    credentials: Credentials,
    descriptor: TaskDescriptor,
    dest_path: str | os.PathLike[str],
    poll_interval_seconds: float | None = None,
    *,
    client: httpx.Client | None = None,
    settings: AppEEARSSettings | None = None,
    max_wait_seconds: float | None | object = _USE_SETTINGS,
    stop_event: StopEvent | None = None,
) -> DataRequestResult:
    """Run one data request end to end and report the outcome.

    Each stage converts its own failure into a failed result; no later stage
    runs after a failure and package errors are never raised to the caller.

    Args:
        credentials: Earthdata login.
        descriptor: Task to submit.
        dest_path: Existing directory receiving the bundle files.
        poll_interval_seconds: Seconds between status checks, at least 30.
            Defaults to the configured value.
        client: HTTP client to reuse; one is created (and closed) from settings otherwise.
        settings: Client settings; read from the environment when omitted.
        max_wait_seconds: Upper bound on the completion wait, ``None`` for no bound.
            Defaults to the configured value.
        stop_event: Event that cancels the completion wait when set.
    """
    settings = settings or load_settings()
    if poll_interval_seconds is None:
        poll_interval_seconds = settings.poll_interval_seconds
    if max_wait_seconds is _USE_SETTINGS:
        max_wait_seconds = settings.max_wait_seconds

    owns_client = client is None
    http = client if client is not None else create_client(settings)
    try:
        logger.info("step=1 authenticate")
        try:
            token = start_session(http, credentials.username, credentials.password.get_secret_value())
        except AppEEARSError as exc:
            return _failure(exc, CREDENTIALS_INVALID_MESSAGE)

        logger.info("step=2 submit_task name=%s type=%s", descriptor.task_name, descriptor.task_type)
        try:
            handle = start_task(http, token, descriptor)
        except InvalidTask as exc:
            return _failure(exc, exc.server_message or TASK_FAILED_MESSAGE)
        except AppEEARSError as exc:
            return _failure(exc, TASK_FAILED_MESSAGE)
        task_id = handle.task_id

        logger.info("step=3 wait task_id=%s", task_id)
        try:
            wait_for_completion(
                http,
                token,
                task_id,
                poll_interval_seconds=poll_interval_seconds,
                max_wait_seconds=max_wait_seconds,
                stop_event=stop_event,
            )
        except AppEEARSError as exc:
            return _failure(exc, str(exc), task_id)

        logger.info("step=4 fetch_bundle task_id=%s", task_id)
        try:
            bundle = fetch_bundle(http, token, task_id)
        except AppEEARSError as exc:
            return _failure(exc, BUNDLE_INVALID_MESSAGE, task_id)

        logger.info("step=5 download files=%s", len(bundle.files))
        try:
            paths = download_bundle_files(
                http,
                task_id,
                bundle,
                dest_path,
                token=token,
                bundle_base_url=settings.bundle_base_url,
            )
        except AppEEARSError as exc:
            return _failure(exc, f"Error downloading/writing files for task {task_id}", task_id)

        logger.info("completed task_id=%s files=%s", task_id, len(paths))
        return DataRequestResult(
            status="success",
            message=SUCCESS_MESSAGE,
            task_id=task_id,
            files=[str(path) for path in paths],
        )
    finally:
        if owns_client:
            http.close()
