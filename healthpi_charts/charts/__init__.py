from __future__ import annotations

from types import ModuleType

from . import glucose, weight

CHARTS: dict[str, ModuleType] = {
    weight.NAME: weight,
    glucose.NAME: glucose,
}


def get_chart(name: str) -> ModuleType:
    key = name.strip().lower()
    if key not in CHARTS:
        raise KeyError(f"unknown chart {name!r}; expected one of: {', '.join(CHARTS)}")
    return CHARTS[key]
