"""Pydantic models for AppEEARS task inputs, API responses, and run results."""

from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator


class Credentials(BaseModel):
    """Earthdata login used once to obtain a session token."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: SecretStr

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: SecretStr) -> SecretStr:
        """Reject empty passwords."""
        if not value.get_secret_value():
            raise ValueError("password must not be empty")
        return value


class PointRecord(BaseModel):
    """One sample location for a point extraction."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    latitude: float = Field(..., validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(..., validation_alias=AliasChoices("longitude", "long", "lon"))
    id: str
    category: str


class PolygonSelection(BaseModel):
    """Area selection given as an ordered ring of (longitude, latitude) vertices."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["polygon"] = "polygon"
    vertices: list[tuple[float, float]] = Field(
        ...,
        min_length=3,
        description="Ring vertices as (longitude, latitude); closing the ring is up to the caller",
    )


class PointSelection(BaseModel):
    """Point selection given as a list of sample locations."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["point"] = "point"
    points: list[PointRecord] = Field(..., min_length=1)


GeometrySelection = Annotated[PolygonSelection | PointSelection, Field(discriminator="kind")]


class TaskDescriptor(BaseModel):
    """Everything needed to build one AppEEARS task request."""

    model_config = ConfigDict(frozen=True)

    task_name: str = Field(..., min_length=1)
    product: str = Field(..., min_length=1, description="Product identifier (name.version)")
    layers: list[str] = Field(..., min_length=1, description="Layer names, all from the same product")
    start_date: str = Field(..., min_length=1, description="Start date (MM-DD-YYYY)")
    end_date: str = Field(..., min_length=1, description="End date (MM-DD-YYYY)")
    geometry: GeometrySelection

    @property
    def task_type(self) -> Literal["polygon", "point"]:
        return self.geometry.kind


class SessionToken(BaseModel):
    """Login response from the AppEEARS API."""

    model_config = ConfigDict(extra="allow", frozen=True)

    token: str = Field(..., min_length=1)
    token_type: str | None = None
    expiration: str | None = None

    def authorization(self) -> str:
        return f"Bearer {self.token}"


class TaskHandle(BaseModel):
    """Task submission response."""

    model_config = ConfigDict(extra="allow", frozen=True)

    task_id: str = Field(..., min_length=1)
    status: str | None = None


class TaskStatus(BaseModel):
    """Task status response plus the out-of-band completion signal."""

    model_config = ConfigDict(extra="allow")

    task_id: str | None = None
    status: str | None = None
    progress: float | dict[str, Any] | None = None
    done: bool = Field(default=False, description="True when the status call answered with HTTP 303")

    @property
    def percent_complete(self) -> float | None:
        """Progress percentage when the server reports one."""
        if isinstance(self.progress, (int, float)):
            return float(self.progress)
        if isinstance(self.progress, dict):
            summary = self.progress.get("summary")
            if isinstance(summary, (int, float)):
                return float(summary)
        return None


class BundleFile(BaseModel):
    """One output file listed in a task bundle."""

    model_config = ConfigDict(extra="allow", frozen=True)

    file_id: str
    file_name: str
    file_size: int | None = None
    file_type: str | None = None
    sha256: str | None = None


class BundleManifest(BaseModel):
    """Bundle response listing the output files of a completed task."""

    model_config = ConfigDict(extra="allow", frozen=True)

    task_id: str | None = None
    files: list[BundleFile] = Field(default_factory=list)


class DataRequestResult(BaseModel):
    """Outcome of one end-to-end data request."""

    status: Literal["success", "failure"]
    message: str = ""
    error: str | None = Field(default=None, description="Error code when the run failed")
    task_id: str | None = None
    files: list[str] = Field(default_factory=list, description="Paths to downloaded files")

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def as_pair(self) -> tuple[bool, str]:
        """Return the (success flag, message) view of the result."""
        return (self.ok, self.message)
