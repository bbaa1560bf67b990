"""
Plotly render sink - draws built ChartData as interactive figures.

Styling lives here only; builders stay free of any presentation concern.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

import plotly.graph_objects as go
import structlog

from .models import ChartData, ChartPoint
from .utils import from_epoch_ms

logger = structlog.get_logger()

DAY_TICK_FORMAT = "%Y-%m-%d"


class PlotlyRenderer:
    """Turns ChartData into Plotly figures with consistent styling."""

    def __init__(self, height: int = 400, font_family: str = "Inter, sans-serif"):
        self.height = height
        self.font_family = font_family

    def _get_base_layout(self, **kwargs) -> dict:
        """Get base layout for consistent styling."""
        return {
            'height': self.height,
            'margin': dict(l=50, r=30, t=50, b=30),
            'paper_bgcolor': 'rgba(0,0,0,0)',
            'plot_bgcolor': 'rgba(0,0,0,0)',
            'font': dict(family=self.font_family, size=12),
            'legend': dict(orientation='h', yanchor='bottom', y=1.02, xanchor='right', x=1),
            **kwargs
        }

    def _line_traces(self, data: ChartData) -> list[go.Scatter]:
        labels = data.labels or []
        return [
            go.Scatter(
                x=labels,
                y=s.data,
                name=s.label,
                mode='lines+markers',
                connectgaps=s.span_gaps,
            )
            for s in data.series
        ]

    def _scatter_traces(self, data: ChartData) -> list[go.Scatter]:
        traces = []
        for s in data.series:
            points = [p for p in s.data if isinstance(p, ChartPoint)]
            traces.append(
                go.Scatter(
                    x=[from_epoch_ms(p.x) for p in points],
                    y=[p.y for p in points],
                    name=s.label,
                    mode='markers',
                    hovertemplate='%{x|%Y-%m-%d %H:%M}<br><b>%{y}</b><extra></extra>',
                )
            )
        return traces

    def to_figure(self, data: ChartData, title: Optional[str] = None) -> go.Figure:
        """Create a figure for one chart.

        Args:
            data: Built chart data.
            title: Optional chart title.

        Returns:
            Plotly Figure.
        """
        traces = self._line_traces(data) if data.kind == 'line' else self._scatter_traces(data)
        fig = go.Figure(data=traces)

        layout = self._get_base_layout()
        if title:
            layout['title'] = dict(text=title, font=dict(size=14))
        fig.update_layout(**layout)

        fig.update_xaxes(type='date', tickformat=DAY_TICK_FORMAT, showgrid=True, gridcolor='rgba(128,128,128,0.15)')
        fig.update_yaxes(rangemode='tozero', showgrid=True, gridcolor='rgba(128,128,128,0.15)')
        return fig


def to_figure(data: ChartData, title: Optional[str] = None) -> go.Figure:
    return PlotlyRenderer().to_figure(data, title)


def write_html(figures: Iterable[go.Figure], path: Union[str, Path]) -> Path:
    """Write all figures into one self-contained HTML page."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    parts = []
    for i, fig in enumerate(figures):
        parts.append(fig.to_html(full_html=False, include_plotlyjs='inline' if i == 0 else False))
    html = "<html><head><meta charset=\"utf-8\"><title>HealthPi</title></head><body>\n{}\n</body></html>\n".format(
        "\n".join(parts)
    )
    out.write_text(html, encoding="utf-8")
    logger.info("html_written", path=str(out), figures=len(parts))
    return out
