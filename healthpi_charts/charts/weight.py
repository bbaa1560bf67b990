# charts/weight.py
from __future__ import annotations

from typing import List, Optional, Sequence

import structlog

from ..models import ChartData, ChartSeries, Field, Record
from ..utils import fat_mass, parse_timestamp

logger = structlog.get_logger()

NAME = "weight"
TITLE = "Weight"
FIELDS = (Field.WEIGHT, Field.FAT_PERCENT)

WEIGHT_LABEL = "Weight"
FAT_LABEL = "Fat"


def _fat_mass(record: Record) -> Optional[float]:
    return fat_mass(record.get(Field.WEIGHT), record.get(Field.FAT_PERCENT))


def build(records: Sequence[Record]) -> ChartData:
    """
    Line chart over the positional label axis:
      - labels:  one timestamp per record, input order, no sort/dedup
      - Weight:  kg or None where the record has no weight
      - Fat:     fat mass (weight * fatPercent / 100) or None; gaps are spanned

    Every record keeps its index in all three lists.
    Raises MalformedTimestampError for a timestamp not in YYYY-MM-DDTHH:mm:ss form.
    """
    for r in records:
        parse_timestamp(r.timestamp)
    labels: List[str] = [r.timestamp for r in records]
    weight = ChartSeries(label=WEIGHT_LABEL, data=[r.get(Field.WEIGHT) for r in records])
    fat = ChartSeries(label=FAT_LABEL, data=[_fat_mass(r) for r in records], span_gaps=True)

    logger.debug(
        "chart_built",
        chart=NAME,
        records=len(records),
        weight_points=sum(v is not None for v in weight.data),
        fat_points=sum(v is not None for v in fat.data),
    )
    return ChartData(kind="line", series=[weight, fat], labels=labels)
