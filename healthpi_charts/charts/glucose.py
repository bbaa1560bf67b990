# charts/glucose.py
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import structlog

from ..models import ChartData, ChartPoint, ChartSeries, Field, MealContext, Record
from ..utils import to_epoch_ms

logger = structlog.get_logger()

NAME = "glucose"
TITLE = "Glucose"
FIELDS = (Field.GLUCOSE, Field.MEAL)

# Output order of the scatter datasets
BUCKETS: Tuple[Tuple[MealContext, str], ...] = (
    (MealContext.NO_MEAL, "After fast"),
    (MealContext.AFTER_MEAL, "After meal"),
    (MealContext.BEFORE_MEAL, "Before meal"),
    (MealContext.NO_INDICATION, "Other"),
)


def _point(record: Record) -> ChartPoint:
    y = record.get(Field.GLUCOSE)
    return ChartPoint(x=to_epoch_ms(record.timestamp), y=y if y is not None else 0)


def build(records: Sequence[Record]) -> ChartData:
    """Scatter chart of glucose readings, one dataset per meal context.

    Records without a glucose value are skipped (a reading of 0 is kept).
    Points stay in input order inside their bucket.
    """
    by_meal: Dict[MealContext, List[ChartPoint]] = {meal: [] for meal, _ in BUCKETS}
    for r in records:
        if not r.has(Field.GLUCOSE):
            continue
        by_meal[r.meal()].append(_point(r))

    series = [ChartSeries(label=label, data=by_meal[meal]) for meal, label in BUCKETS]
    logger.debug(
        "chart_built",
        chart=NAME,
        records=len(records),
        points={s.label: len(s.data) for s in series},
    )
    return ChartData(kind="scatter", series=series)
