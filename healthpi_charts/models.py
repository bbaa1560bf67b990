from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from .errors import MalformedRecordError


class Field(str, Enum):
    """HealthPi value types. The value is the name used in ``?select=``."""

    WEIGHT = "Weight"
    BODY_MASS_INDEX = "BodyMassIndex"
    BASAL_METABOLIC_RATE = "BasalMetabolicRate"
    WATER_PERCENT = "WaterPercent"
    MUSCLE_PERCENT = "MusclePercent"
    FAT_PERCENT = "FatPercent"
    GLUCOSE = "Glucose"
    MEAL = "Meal"
    BLOOD_PRESSURE_SYSTOLIC = "BloodPressureSystolic"
    BLOOD_PRESSURE_DIASTOLIC = "BloodPressureDiastolic"
    HEART_RATE = "HeartRate"

    @property
    def key(self) -> str:
        """Key of this field inside a record's ``values`` object (camelCase)."""
        return self.value[0].lower() + self.value[1:]

    @classmethod
    def parse(cls, name: Union[str, "Field"]) -> "Field":
        if isinstance(name, Field):
            return name
        wanted = str(name).strip().lower()
        for f in cls:
            if wanted in (f.value.lower(), f.name.lower()):
                return f
        raise ValueError(f"unknown field {name!r}; expected one of: {', '.join(f.value for f in cls)}")


class MealContext(str, Enum):
    NO_MEAL = "NoMeal"
    AFTER_MEAL = "AfterMeal"
    BEFORE_MEAL = "BeforeMeal"
    NO_INDICATION = "NoIndication"


@dataclass
class Record:
    timestamp: str
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, obj: Any) -> "Record":
        if not isinstance(obj, dict):
            raise MalformedRecordError(f"record must be an object, got {type(obj).__name__}")
        ts = obj.get("timestamp")
        if not isinstance(ts, str):
            raise MalformedRecordError(f"record timestamp must be a string, got {ts!r}")
        values = obj.get("values")
        if values is None:
            values = {}
        if not isinstance(values, dict):
            raise MalformedRecordError(f"record values must be an object (timestamp={ts})")
        return cls(timestamp=ts, values=dict(values))

    def to_json(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "values": dict(self.values)}

    def get(self, f: Field) -> Any:
        """Value of ``f`` or None when absent; a null on the wire counts as absent."""
        return self.values.get(f.key)

    def has(self, f: Field) -> bool:
        return self.values.get(f.key) is not None

    def meal(self) -> MealContext:
        raw = self.get(Field.MEAL)
        if raw is None:
            return MealContext.NO_INDICATION
        try:
            return MealContext(raw)
        except ValueError:
            raise MalformedRecordError(
                f"unknown meal indicator {raw!r} (timestamp={self.timestamp})"
            ) from None


@dataclass(frozen=True)
class ChartPoint:
    x: int  # epoch milliseconds
    y: float

    def as_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}


SeriesValue = Union[Optional[float], ChartPoint]


@dataclass
class ChartSeries:
    label: str
    data: List[SeriesValue] = field(default_factory=list)
    span_gaps: bool = False

    def as_dict(self) -> Dict[str, Any]:
        data = [d.as_dict() if isinstance(d, ChartPoint) else d for d in self.data]
        return {"label": self.label, "data": data, "spanGaps": self.span_gaps}


@dataclass
class ChartData:
    """What a builder hands to the renderer: datasets plus optional category labels."""

    kind: Literal["line", "scatter"]
    series: List[ChartSeries]
    labels: Optional[List[str]] = None

    def series_by_label(self, label: str) -> ChartSeries:
        for s in self.series:
            if s.label == label:
                return s
        raise KeyError(label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "labels": self.labels,
            "datasets": [s.as_dict() for s in self.series],
        }
