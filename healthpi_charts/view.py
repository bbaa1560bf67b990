from __future__ import annotations

from types import ModuleType
from typing import Optional

import structlog

from .client import RecordFetcher
from .errors import FetchError
from .models import ChartData

logger = structlog.get_logger()


class ChartView:
    """Holds the chart state of one dashboard chart.

    ``chart`` is one of the builder modules from ``healthpi_charts.charts``.
    Each refresh takes a new generation number; a result is only applied if
    no newer refresh (or teardown) happened while the request was in flight.
    """

    def __init__(self, chart: ModuleType, fetcher: RecordFetcher) -> None:
        self.chart = chart
        self.fetcher = fetcher
        self.state: Optional[ChartData] = None
        self.last_error: Optional[FetchError] = None
        self._generation = 0

    @property
    def name(self) -> str:
        return self.chart.NAME

    async def initialize(self) -> ChartData:
        data = await self.refresh()
        if data is None:
            # superseded by a concurrent refresh/teardown before the first load finished
            raise FetchError(f"initial load of chart {self.name!r} was superseded")
        return data

    async def refresh(self) -> Optional[ChartData]:
        self._generation += 1
        token = self._generation

        try:
            records = await self.fetcher.fetch(self.chart.FIELDS)
        except FetchError as exc:
            if token == self._generation:
                self.last_error = exc
            logger.warning("chart_fetch_failed", chart=self.name, error=str(exc))
            raise

        if token != self._generation:
            logger.info("refresh_superseded", chart=self.name, generation=token, current=self._generation)
            return None

        data = self.chart.build(records)
        self.state = data
        self.last_error = None
        return data

    def teardown(self) -> None:
        self._generation += 1
        self.state = None
        self.last_error = None


async def initialize(fetcher: RecordFetcher, chart: ModuleType) -> ChartData:
    """Build the initial state of ``chart`` with records from ``fetcher``."""
    return await ChartView(chart, fetcher).initialize()
