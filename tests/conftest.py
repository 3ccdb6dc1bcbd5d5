from collections.abc import Callable

import httpx
import pytest

from appeears_client.config import AppEEARSSettings
from appeears_client.schemas import PointRecord, PointSelection, PolygonSelection, TaskDescriptor

BASE_URL = "https://appeears.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> AppEEARSSettings:
    return AppEEARSSettings(base_url=BASE_URL, bundle_base_url=BASE_URL, timeout_seconds=5.0)


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.Client]:
    def _make(handler: Handler) -> httpx.Client:
        return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def point_descriptor() -> TaskDescriptor:
    return TaskDescriptor(
        task_name="minneapolis-lst",
        product="MOD11A1.061",
        layers=["LST_Day"],
        start_date="01-01-2020",
        end_date="01-31-2020",
        geometry=PointSelection(points=[PointRecord(latitude=45.0, longitude=-93.2, id="P1", category="Urban")]),
    )


@pytest.fixture
def polygon_descriptor() -> TaskDescriptor:
    return TaskDescriptor(
        task_name="field-ndvi",
        product="MOD13Q1.061",
        layers=["_250m_16_days_NDVI", "_250m_16_days_EVI"],
        start_date="06-01-2021",
        end_date="08-31-2021",
        geometry=PolygonSelection(
            vertices=[(-93.3, 44.9), (-93.1, 44.9), (-93.1, 45.1), (-93.3, 45.1), (-93.3, 44.9)]
        ),
    )
