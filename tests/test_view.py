import asyncio

import httpx
import pytest

from healthpi_charts.charts import glucose, weight
from healthpi_charts.client import RecordFetcher
from healthpi_charts.errors import FetchError
from healthpi_charts.models import Record
from healthpi_charts.view import ChartView, initialize


class GatedFetcher:
    """Fetcher whose calls complete only when the test releases them."""

    def __init__(self):
        self.calls = []

    async def fetch(self, fields):
        gate = asyncio.Event()
        slot = {"gate": gate, "fields": fields, "records": []}
        self.calls.append(slot)
        await gate.wait()
        if isinstance(slot["records"], Exception):
            raise slot["records"]
        return slot["records"]

    def release(self, i, records):
        self.calls[i]["records"] = records
        self.calls[i]["gate"].set()


def _failing_fetcher() -> RecordFetcher:
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    return RecordFetcher("http://healthpi.test/", timeout=5, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _static_fetcher(payload) -> RecordFetcher:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
    return RecordFetcher("http://healthpi.test/", timeout=5, client=httpx.AsyncClient(transport=transport))


def test_initialize_builds_state():
    fetcher = _static_fetcher([{"timestamp": "2024-01-01T08:00:00", "values": {"weight": 70, "fatPercent": 20}}])
    view = ChartView(weight, fetcher)

    data = asyncio.run(view.initialize())

    assert view.state is data
    assert data.labels == ["2024-01-01T08:00:00"]
    assert data.series_by_label("Fat").data == [14.0]


def test_module_level_initialize():
    fetcher = _static_fetcher([{"timestamp": "2024-01-01T09:00:00", "values": {"glucose": 95, "meal": "NoMeal"}}])
    data = asyncio.run(initialize(fetcher, glucose))
    assert len(data.series_by_label("After fast").data) == 1


def test_fetch_failure_leaves_state_unset():
    view = ChartView(glucose, _failing_fetcher())

    with pytest.raises(FetchError):
        asyncio.run(view.initialize())

    assert view.state is None
    assert isinstance(view.last_error, FetchError)


def test_failed_refresh_keeps_previous_state():
    fetcher = GatedFetcher()
    view = ChartView(weight, fetcher)

    async def run():
        first = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        fetcher.release(0, [Record("2024-01-01T08:00:00", {"weight": 80})])
        good = await first

        second = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        fetcher.release(1, FetchError("down"))
        with pytest.raises(FetchError):
            await second
        return good

    good = asyncio.run(run())
    assert view.state is good
    assert str(view.last_error) == "down"


def test_refresh_requests_chart_fields():
    fetcher = GatedFetcher()
    view = ChartView(glucose, fetcher)

    async def run():
        task = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        fetcher.release(0, [])
        await task

    asyncio.run(run())
    assert fetcher.calls[0]["fields"] == glucose.FIELDS


def test_superseded_refresh_is_discarded():
    fetcher = GatedFetcher()
    view = ChartView(weight, fetcher)

    async def run():
        stale = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        fresh = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)

        fetcher.release(1, [Record("2024-01-02T08:00:00", {"weight": 79})])
        fresh_result = await fresh
        fetcher.release(0, [Record("2024-01-01T08:00:00", {"weight": 80})])
        stale_result = await stale
        return stale_result, fresh_result

    stale_result, fresh_result = asyncio.run(run())
    assert stale_result is None
    assert view.state is fresh_result
    assert view.state.labels == ["2024-01-02T08:00:00"]


def test_teardown_discards_state_and_in_flight_result():
    fetcher = GatedFetcher()
    view = ChartView(weight, fetcher)

    async def run():
        task = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        view.teardown()
        fetcher.release(0, [Record("2024-01-01T08:00:00", {"weight": 80})])
        return await task

    assert asyncio.run(run()) is None
    assert view.state is None
