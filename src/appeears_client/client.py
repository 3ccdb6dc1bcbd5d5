"""HTTP calls against the AppEEARS API: login, task, status, bundle, download."""

import logging
import os
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from appeears_client.config import AppEEARSSettings, load_settings
from appeears_client.errors import (
    DownloadFailure,
    InvalidBundle,
    InvalidCredentials,
    InvalidTask,
    TransportFailure,
)
from appeears_client.payloads import build_task_payload, render_task_payload
from appeears_client.schemas import (
    BundleManifest,
    SessionToken,
    TaskDescriptor,
    TaskHandle,
    TaskStatus,
)

logger = logging.getLogger(__name__)

LOGIN_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"
LOGIN_BODY = "grant_type=client_credentials"
DONE_STATUS_CODE = 303
DOWNLOAD_CHUNK_SIZE = 1024 * 1024
PATH_SEPARATORS = ("/", "\\")


def create_client(settings: AppEEARSSettings | None = None) -> httpx.Client:
    """Create an HTTP client bound to the configured AppEEARS base URL."""
    settings = settings or load_settings()
    return httpx.Client(base_url=settings.base_url, timeout=settings.timeout_seconds)


def _bearer(token: SessionToken | str) -> dict[str, str]:
    if isinstance(token, SessionToken):
        return {"Authorization": token.authorization()}
    return {"Authorization": f"Bearer {token}"}


def _send(client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Send a request, turning request-level errors into TransportFailure."""
    try:
        return client.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        raise TransportFailure(f"{method} {url} failed: {exc}") from exc


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Parse a JSON object body; anything else reads as empty."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def start_session(client: httpx.Client, username: str, password: str) -> SessionToken:
    """Exchange Earthdata credentials for a bearer token.

    Raises:
        InvalidCredentials: If either credential is empty or the response has no token.
        TransportFailure: If the login request cannot be sent.
    """
    if not username or not password:
        raise InvalidCredentials("Username and password are required")

    response = _send(
        client,
        "POST",
        "/login",
        auth=(username, password),
        headers={"Content-Type": LOGIN_CONTENT_TYPE},
        content=LOGIN_BODY,
    )
    body = _json_body(response)
    try:
        session = SessionToken.model_validate(body)
    except ValidationError:
        raise InvalidCredentials(
            body.get("message") or f"Login failed with HTTP {response.status_code}"
        ) from None

    logger.info("Started AppEEARS session")
    return session


def start_task(
    client: httpx.Client,
    token: SessionToken | str,
    descriptor: TaskDescriptor,
    *,
    dry_run: bool = False,
) -> TaskHandle | dict[str, Any]:
    """Submit an extraction task and return its handle.

    With ``dry_run`` the payload is built, logged and returned without being sent.
    """
    payload = build_task_payload(descriptor)
    if dry_run:
        logger.info("Dry run for task '%s':\n%s", descriptor.task_name, render_task_payload(descriptor))
        return payload

    response = _send(client, "POST", "/task", json=payload, headers=_bearer(token))
    body = _json_body(response)
    try:
        handle = TaskHandle.model_validate(body)
    except ValidationError:
        raise InvalidTask(body.get("message")) from None

    logger.info("Submitted task '%s' as %s", descriptor.task_name, handle.task_id)
    return handle


def _request_status(client: httpx.Client, token: SessionToken | str, task_id: str) -> httpx.Response:
    # Completion is signalled by a 303 redirect, so redirects must not be followed.
    return _send(client, "GET", f"/status/{task_id}", headers=_bearer(token), follow_redirects=False)


def task_status(client: httpx.Client, token: SessionToken | str, task_id: str) -> TaskStatus:
    """Return the task status body together with the completion signal."""
    response = _request_status(client, token, task_id)
    body = _json_body(response)
    body["done"] = response.status_code == DONE_STATUS_CODE
    try:
        return TaskStatus.model_validate(body)
    except ValidationError as exc:
        raise TransportFailure(f"Malformed status response for task {task_id}: {exc}") from exc


def is_task_done(client: httpx.Client, token: SessionToken | str, task_id: str) -> bool:
    """Return True only when the status endpoint answers with HTTP 303."""
    response = _request_status(client, token, task_id)
    return response.status_code == DONE_STATUS_CODE


def fetch_bundle(client: httpx.Client, token: SessionToken | str, task_id: str) -> BundleManifest:
    """Fetch the list of output files for a completed task."""
    response = _send(client, "GET", f"/bundle/{task_id}", headers=_bearer(token))
    body = _json_body(response)
    try:
        bundle = BundleManifest.model_validate(body)
    except ValidationError as exc:
        raise InvalidBundle(f"Malformed bundle for task {task_id}: {exc}") from exc
    if not bundle.files:
        raise InvalidBundle(f"No files in bundle for task {task_id}")
    return bundle


def sanitize_file_name(file_name: str) -> str:
    """Replace path separators with hyphens so the name stays inside one directory."""
    sanitized = file_name
    for separator in PATH_SEPARATORS:
        sanitized = sanitized.replace(separator, "-")
    if sanitized in {"", ".", ".."}:
        raise ValueError(f"Unusable file name: {file_name!r}")
    return sanitized


def bundle_file_url(bundle_base_url: str, task_id: str, file_id: str) -> str:
    return f"{bundle_base_url.rstrip('/')}/bundle/{task_id}/{file_id}"


def download_bundle_files(
    client: httpx.Client,
    task_id: str,
    bundle: BundleManifest,
    dest_path: str | os.PathLike[str],
    *,
    token: SessionToken | str | None = None,
    bundle_base_url: str | None = None,
) -> list[Path]:
    """Stream every bundle file into ``dest_path``.

    The destination directory must already exist. The first failure aborts
    the loop; files written before it stay on disk.

    Raises:
        DownloadFailure: If any file cannot be fetched or written.
    """
    destination = Path(dest_path)
    base_url = bundle_base_url or str(client.base_url)
    headers = _bearer(token) if token is not None else {}

    written: list[Path] = []
    for bundle_file in bundle.files:
        url = bundle_file_url(base_url, task_id, bundle_file.file_id)
        try:
            target = destination / sanitize_file_name(bundle_file.file_name)
            with client.stream("GET", url, headers=headers, follow_redirects=True) as response:
                response.raise_for_status()
                with target.open("wb") as handle:
                    for chunk in response.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        handle.write(chunk)
        except (httpx.HTTPError, OSError, ValueError) as exc:
            logger.error("Failed to download %s for task %s: %s", bundle_file.file_name, task_id, exc)
            raise DownloadFailure(task_id, str(exc)) from exc

        logger.info("Downloaded %s", target)
        written.append(target)

    return written
