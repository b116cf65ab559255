"""
Plotly-backed render surface for the synesthetic landscape.

Keeps draw commands keyed by element so the interaction controller can
replace a node or an edge in place, and turns the current scene into a figure.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import plotly.graph_objects as go

import config

Point = tuple[float, float]

EDGE_COLOR = "#e1bee7"
BACKGROUND = "#f3e5f5"


@dataclass
class _Element:
    kind: str                      # "circle" | "line" | "text"
    points: tuple[Point, ...]
    radius: float = 0.0
    fill: str = ""
    text: str = ""


@dataclass
class _DragBinding:
    on_start: Callable[[], None]
    on_move: Callable[[float, float], None]
    on_end: Callable[[], None]


class PlotlySurface:
    """Scene graph of circles, lines and labels rendered with Plotly."""

    def __init__(self, width: int = config.CANVAS_WIDTH, height: int = config.CANVAS_HEIGHT):
        self.width = width
        self.height = height
        self._elements: dict[str, _Element] = {}
        self._order: list[str] = []
        self._drag: dict[str, _DragBinding] = {}

    # -------------------------------------------------------------------------
    # RenderSurface protocol
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        self._elements = {}
        self._order = []
        self._drag = {}

    def draw_circle(self, key: str, center: Point, radius: float, fill: str) -> None:
        self._put(key, _Element("circle", (center,), radius=radius, fill=fill))

    def draw_line(self, key: str, start: Point, end: Point) -> None:
        self._put(key, _Element("line", (start, end)))

    def draw_text(self, key: str, position: Point, text: str) -> None:
        self._put(key, _Element("text", (position,), text=text))

    def raise_to_top(self, key: str) -> None:
        if key in self._elements:
            self._order.remove(key)
            self._order.append(key)

    def bind_drag(
        self,
        key: str,
        on_start: Callable[[], None],
        on_move: Callable[[float, float], None],
        on_end: Callable[[], None],
    ) -> None:
        self._drag[key] = _DragBinding(on_start, on_move, on_end)

    # -------------------------------------------------------------------------
    # Gesture dispatch and output
    # -------------------------------------------------------------------------

    def drag(self, key: str, path: list[Point]) -> None:
        """Replay a drag gesture along a pointer path: start, moves, end."""
        binding = self._drag.get(key)
        if binding is None:
            raise KeyError(f"No drag handler bound to {key}")

        binding.on_start()
        try:
            for x, y in path:
                binding.on_move(x, y)
        finally:
            binding.on_end()

    def element(self, key: str) -> Optional[_Element]:
        return self._elements.get(key)

    @property
    def order(self) -> list[str]:
        """Element keys, bottom to top."""
        return list(self._order)

    def to_figure(self) -> go.Figure:
        """Render lines, then circles and labels, each group in z-order."""
        fig = go.Figure()

        lines = [self._elements[k] for k in self._order if self._elements[k].kind == "line"]
        if lines:
            xs, ys = [], []
            for line in lines:
                (x1, y1), (x2, y2) = line.points
                xs += [x1, x2, None]
                ys += [y1, y2, None]
            fig.add_trace(go.Scatter(
                x=xs, y=ys,
                mode="lines",
                line=dict(color=EDGE_COLOR, width=1),
                opacity=0.6,
                hoverinfo="skip",
                name="Connections",
            ))

        circles = [self._elements[k] for k in self._order if self._elements[k].kind == "circle"]
        if circles:
            fig.add_trace(go.Scatter(
                x=[c.points[0][0] for c in circles],
                y=[c.points[0][1] for c in circles],
                mode="markers",
                marker=dict(
                    color=[c.fill for c in circles],
                    size=[2 * c.radius for c in circles],
                    opacity=0.8,
                    line=dict(color="white", width=2),
                ),
                hoverinfo="skip",
                name="Words",
            ))

        texts = [self._elements[k] for k in self._order if self._elements[k].kind == "text"]
        if texts:
            fig.add_trace(go.Scatter(
                x=[t.points[0][0] for t in texts],
                y=[t.points[0][1] for t in texts],
                mode="text",
                text=[t.text for t in texts],
                textfont=dict(color="white", size=12),
                hovertemplate="%{text}<extra></extra>",
                name="Labels",
            ))

        fig.update_layout(
            height=self.height,
            width=self.width,
            paper_bgcolor="rgba(0,0,0,0)",
            plot_bgcolor=BACKGROUND,
            showlegend=False,
            margin=dict(l=10, r=10, t=10, b=10),
            # Screen coordinates: y grows downward
            xaxis=dict(range=[0, self.width], visible=False, fixedrange=True),
            yaxis=dict(range=[self.height, 0], visible=False, fixedrange=True,
                       scaleanchor="x", scaleratio=1),
        )
        return fig

    def _put(self, key: str, element: _Element) -> None:
        if key not in self._elements:
            self._order.append(key)
        self._elements[key] = element
