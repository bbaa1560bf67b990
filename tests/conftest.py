from __future__ import annotations

from typing import Any

import pytest
import structlog

from healthpi_charts.models import Record


def make_record(timestamp: str, **values: Any) -> Record:
    return Record(timestamp=timestamp, values=dict(values))


@pytest.fixture
def scenario_a() -> list[Record]:
    return [
        make_record("2024-01-01T08:00:00", weight=80, fatPercent=25),
        make_record("2024-01-02T08:00:00", weight=79),
    ]


@pytest.fixture
def scenario_b() -> list[Record]:
    return [
        make_record("2024-01-01T09:00:00", glucose=95, meal="NoMeal"),
        make_record("2024-01-01T13:00:00", glucose=140, meal="AfterMeal"),
    ]


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
