import pytest
from pydantic import ValidationError

from appeears_client.schemas import (
    Credentials,
    DataRequestResult,
    PointRecord,
    PointSelection,
    TaskDescriptor,
    TaskStatus,
)


@pytest.mark.parametrize(
    ("progress", "expected"),
    [
        (None, None),
        (55, 55.0),
        ({"summary": 80, "details": [{"step": 1}]}, 80.0),
        ({"details": []}, None),
    ],
)
def test_percent_complete(progress: object, expected: float | None) -> None:
    assert TaskStatus(progress=progress).percent_complete == expected


def test_data_request_result_pair() -> None:
    success = DataRequestResult(status="success", message="Successfully downloaded files", files=["/tmp/a.tif"])
    failure = DataRequestResult(status="failure", message="Credentials invalid", error="InvalidCredentials")

    assert success.as_pair() == (True, "Successfully downloaded files")
    assert failure.as_pair() == (False, "Credentials invalid")
    assert failure.files == []


def test_credentials_reject_empty_values() -> None:
    with pytest.raises(ValidationError):
        Credentials(username="user", password="")
    with pytest.raises(ValidationError):
        Credentials(username="", password="secret")


def test_task_descriptor_from_dict_selects_geometry_kind() -> None:
    descriptor = TaskDescriptor.model_validate(
        {
            "task_name": "points",
            "product": "MOD11A1.061",
            "layers": ["LST_Day"],
            "start_date": "01-01-2020",
            "end_date": "01-31-2020",
            "geometry": {
                "kind": "point",
                "points": [{"lat": 10.5, "long": 20.25, "id": "S1", "category": "Crop"}],
            },
        }
    )

    assert isinstance(descriptor.geometry, PointSelection)
    assert descriptor.task_type == "point"
    assert descriptor.geometry.points[0].latitude == 10.5
    assert descriptor.geometry.points[0].longitude == 20.25


def test_task_descriptor_rejects_unknown_geometry_kind() -> None:
    with pytest.raises(ValidationError):
        TaskDescriptor.model_validate(
            {
                "task_name": "lines",
                "product": "MOD11A1.061",
                "layers": ["LST_Day"],
                "start_date": "01-01-2020",
                "end_date": "01-31-2020",
                "geometry": {"kind": "line", "vertices": [[0, 0], [1, 1]]},
            }
        )


def test_point_record_accepts_numeric_identifiers() -> None:
    point = PointRecord.model_validate({"lat": 1.5, "long": 2.5, "id": 7, "category": 3})

    assert point.id == "7"
    assert point.category == "3"
