"""Task request payload construction for the AppEEARS task endpoint.

Payloads are built as typed models and serialised in one step, so
user-supplied strings are always JSON-escaped.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Literal

from geojson_pydantic import Feature, FeatureCollection, Polygon
from pydantic import BaseModel, Field, ValidationError

from appeears_client.errors import InvalidTaskRequest
from appeears_client.schemas import PointRecord, PointSelection, PolygonSelection, TaskDescriptor

TASK_TYPES = ("polygon", "point")
AREA_OUTPUT_FORMAT = "geotiff"
AREA_OUTPUT_PROJECTION = "albers_weld_conus"
POLYGON_FILE_NAME = "User-Drawn-Polygon"


class DateRange(BaseModel):
    startDate: str
    endDate: str


class LayerSpec(BaseModel):
    product: str
    layer: str


class OutputFormat(BaseModel):
    type: str = AREA_OUTPUT_FORMAT


class AreaOutput(BaseModel):
    format: OutputFormat = Field(default_factory=OutputFormat)
    projection: str = AREA_OUTPUT_PROJECTION


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[tuple[float, float]]]


class PolygonFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: dict[str, Any] = Field(default_factory=dict)
    geometry: PolygonGeometry


class PolygonFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    fileName: str = POLYGON_FILE_NAME
    features: list[PolygonFeature]


class Coordinate(BaseModel):
    latitude: float
    longitude: float
    id: str
    category: str


class AreaParams(BaseModel):
    dates: list[DateRange]
    layers: list[LayerSpec]
    output: AreaOutput = Field(default_factory=AreaOutput)
    geo: PolygonFeatureCollection


class PointParams(BaseModel):
    dates: list[DateRange]
    layers: list[LayerSpec]
    coordinates: list[Coordinate]


class AreaTaskRequest(BaseModel):
    task_type: Literal["area"] = "area"
    task_name: str
    params: AreaParams


class PointTaskRequest(BaseModel):
    task_type: Literal["point"] = "point"
    task_name: str
    params: PointParams


def _polygon_feature_collection(selection: PolygonSelection) -> PolygonFeatureCollection:
    """Wrap the selection ring in a single-feature FeatureCollection, unchanged."""
    ring = [(lon, lat) for lon, lat in selection.vertices]
    return PolygonFeatureCollection(features=[PolygonFeature(geometry=PolygonGeometry(coordinates=[ring]))])


def build_task_request(descriptor: TaskDescriptor) -> AreaTaskRequest | PointTaskRequest:
    """Build the typed request object for a task descriptor."""
    dates = [DateRange(startDate=descriptor.start_date, endDate=descriptor.end_date)]
    layers = [LayerSpec(product=descriptor.product, layer=name) for name in descriptor.layers]

    geometry = descriptor.geometry
    if isinstance(geometry, PolygonSelection):
        return AreaTaskRequest(
            task_name=descriptor.task_name,
            params=AreaParams(dates=dates, layers=layers, geo=_polygon_feature_collection(geometry)),
        )
    if isinstance(geometry, PointSelection):
        coordinates = [
            Coordinate(latitude=point.latitude, longitude=point.longitude, id=point.id, category=point.category)
            for point in geometry.points
        ]
        return PointTaskRequest(
            task_name=descriptor.task_name,
            params=PointParams(dates=dates, layers=layers, coordinates=coordinates),
        )
    raise InvalidTaskRequest(f"Unsupported geometry selection: {type(geometry).__name__}")


def build_task_payload(descriptor: TaskDescriptor) -> dict[str, Any]:
    """Return the JSON-ready task submission payload."""
    return build_task_request(descriptor).model_dump(mode="json")


def render_task_payload(descriptor: TaskDescriptor) -> str:
    """Return the task submission payload as indented JSON text."""
    return build_task_request(descriptor).model_dump_json(indent=2)


def polygon_from_geojson(obj: Mapping[str, Any]) -> PolygonSelection:
    """Read the exterior ring of a GeoJSON Polygon, Feature or single-feature FeatureCollection."""
    geo_type = obj.get("type")
    try:
        if geo_type == "FeatureCollection":
            collection = FeatureCollection[Feature[Polygon, dict]].model_validate(obj)
            if len(collection.features) != 1:
                raise InvalidTaskRequest(
                    f"Expected exactly one polygon feature, got {len(collection.features)}"
                )
            geometry = collection.features[0].geometry
        elif geo_type == "Feature":
            geometry = Feature[Polygon, dict].model_validate(obj).geometry
        elif geo_type == "Polygon":
            geometry = Polygon.model_validate(obj)
        else:
            raise InvalidTaskRequest(f"Unsupported GeoJSON type for a polygon selection: {geo_type!r}")
    except ValidationError as exc:
        raise InvalidTaskRequest(f"Invalid GeoJSON polygon: {exc}") from exc

    if geometry is None:
        raise InvalidTaskRequest("GeoJSON feature has no geometry")

    exterior = geometry.coordinates[0]
    return PolygonSelection(vertices=[(float(position[0]), float(position[1])) for position in exterior])


def _coerce_geometry(task_type: str, geometry: Any) -> PolygonSelection | PointSelection:
    if isinstance(geometry, (PolygonSelection, PointSelection)):
        if geometry.kind != task_type:
            raise InvalidTaskRequest(f"Task type '{task_type}' does not match a {geometry.kind} geometry")
        return geometry

    if task_type == "polygon":
        if isinstance(geometry, Mapping):
            return polygon_from_geojson(geometry)
        return PolygonSelection(vertices=[(float(lon), float(lat)) for lon, lat in geometry])

    points = [point if isinstance(point, PointRecord) else PointRecord.model_validate(point) for point in geometry]
    return PointSelection(points=points)


def describe_task(
    task_name: str,
    start_date: str,
    end_date: str,
    product: str,
    layers: Iterable[str],
    task_type: str,
    geometry: Any,
) -> TaskDescriptor:
    """Build a task descriptor from loose inputs and a polygon/point type flag.

    Args:
        task_name: User-chosen name for the task.
        start_date: Start of the date range (MM-DD-YYYY).
        end_date: End of the date range (MM-DD-YYYY).
        product: Product identifier in ``name.version`` form.
        layers: Layer names, all belonging to ``product``.
        task_type: ``"polygon"`` or ``"point"``.
        geometry: A selection model, an iterable of ``(longitude, latitude)``
            pairs or a GeoJSON mapping for polygons, or an iterable of point
            mappings (``latitude``/``lat``, ``longitude``/``long``, ``id``,
            ``category``) for points.

    Returns:
        The validated task descriptor.

    Raises:
        InvalidTaskRequest: If the type flag is unknown, disagrees with the
            geometry, or any input fails validation.
    """
    if task_type not in TASK_TYPES:
        raise InvalidTaskRequest(f"Unsupported task type '{task_type}'; expected one of {list(TASK_TYPES)}")

    try:
        selection = _coerce_geometry(task_type, geometry)
        return TaskDescriptor(
            task_name=task_name,
            product=product,
            layers=list(layers),
            start_date=start_date,
            end_date=end_date,
            geometry=selection,
        )
    except InvalidTaskRequest:
        raise
    except ValidationError as exc:
        raise InvalidTaskRequest(str(exc)) from exc
    except (TypeError, ValueError) as exc:
        raise InvalidTaskRequest(f"Invalid {task_type} geometry: {exc}") from exc
