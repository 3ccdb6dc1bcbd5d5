"""Prefect flow running an AppEEARS data request."""

import logging
from pathlib import Path
from typing import Any

from prefect import flow
from pydantic import BaseModel, Field

from appeears_client.config import MIN_POLL_INTERVAL_SECONDS, credentials_from_env, load_settings
from appeears_client.orchestrator import get_data
from appeears_client.schemas import DataRequestResult, TaskDescriptor
from appeears_client.startup import configure_logging

logger = logging.getLogger(__name__)


class DownloadFlowInput(BaseModel):
    """Input for the AppEEARS download flow."""

    descriptor: TaskDescriptor
    dest_path: str = Field(..., min_length=1, description="Directory receiving the bundle files")
    poll_interval_seconds: float | None = Field(
        default=None,
        ge=MIN_POLL_INTERVAL_SECONDS,
        description="Seconds between status checks; the configured default when omitted",
    )
    max_wait_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Upper bound on the completion wait; the configured default when omitted",
    )


@flow(name="appeears-download", description="Submit an AppEEARS task, wait for it, and download its bundle.")
def appeears_download_flow(inputs: DownloadFlowInput) -> DataRequestResult:
    """Download one AppEEARS task bundle using credentials from the environment."""
    configure_logging()
    settings = load_settings()
    credentials = credentials_from_env()

    destination = Path(inputs.dest_path)
    destination.mkdir(parents=True, exist_ok=True)

    overrides: dict[str, Any] = {}
    if inputs.poll_interval_seconds is not None:
        overrides["poll_interval_seconds"] = inputs.poll_interval_seconds
    if inputs.max_wait_seconds is not None:
        overrides["max_wait_seconds"] = inputs.max_wait_seconds

    result = get_data(credentials, inputs.descriptor, destination, settings=settings, **overrides)

    logger.info("appeears-download finished status=%s message=%s", result.status, result.message)
    return result
