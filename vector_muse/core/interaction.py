"""
Drag interaction over a rendered word landscape.

Each node moves Idle -> Dragging -> Idle. Drag transitions are pure functions
on InteractiveNode; InteractionController applies them to a render surface and
an audio session. Dragging moves only the rendered point; the embedding and
its projection are never recomputed.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Callable, Optional, Protocol, Sequence

from vector_muse.audio.tone import AudioSession
from vector_muse.core.perceptual import RGB, AudioParams, seed_frequency, to_audio_params
import config

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class RenderSurface(Protocol):
    """2D drawing collaborator. Drawing with an existing key replaces that element."""

    def clear(self) -> None: ...

    def draw_circle(self, key: str, center: Point, radius: float, fill: str) -> None: ...

    def draw_line(self, key: str, start: Point, end: Point) -> None: ...

    def draw_text(self, key: str, position: Point, text: str) -> None: ...

    def raise_to_top(self, key: str) -> None: ...

    def bind_drag(
        self,
        key: str,
        on_start: Callable[[], None],
        on_move: Callable[[float, float], None],
        on_end: Callable[[], None],
    ) -> None: ...


@dataclass(frozen=True)
class Edge:
    source: int
    target: int

    @property
    def key(self) -> str:
        return f"edge-{self.source}-{self.target}"

    def other(self, node_id: int) -> int:
        return self.target if node_id == self.source else self.source


@dataclass(frozen=True)
class InteractiveNode:
    """Per-session render state of one word."""
    node_id: int
    label: str
    position: Point
    color: RGB
    connections: frozenset[int] = field(default_factory=frozenset)
    dragging: bool = False

    @property
    def key(self) -> str:
        return f"node-{self.node_id}"

    @property
    def label_key(self) -> str:
        return f"label-{self.node_id}"


def circle_layout(n: int, width: float, height: float) -> list[Point]:
    """Evenly spaced positions on a circle around the canvas centre."""
    cx, cy = width / 2, height / 2
    radius = min(width, height) * config.LAYOUT_RADIUS_RATIO
    return [
        (cx + radius * math.cos(2 * math.pi * i / n), cy + radius * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]


def build_adjacency(n: int) -> tuple[list[Edge], dict[int, list[Edge]]]:
    """Connect every pair i < j once; index edges by node id."""
    edges = [Edge(i, j) for i in range(n) for j in range(i + 1, n)]
    adjacency: dict[int, list[Edge]] = {i: [] for i in range(n)}
    for edge in edges:
        adjacency[edge.source].append(edge)
        adjacency[edge.target].append(edge)
    return edges, adjacency


def begin_drag(node: InteractiveNode) -> InteractiveNode:
    return replace(node, dragging=True)


def apply_drag(node: InteractiveNode, dx: float, dy: float) -> InteractiveNode:
    """Move a dragging node by a pointer delta."""
    if not node.dragging:
        raise ValueError(f"Node {node.node_id} ({node.label}) is not being dragged")
    x, y = node.position
    return replace(node, position=(x + dx, y + dy))


def end_drag(node: InteractiveNode) -> InteractiveNode:
    return replace(node, dragging=False)


class InteractionController:
    """
    Owns node state for one rendered batch and routes drag gestures.

    Tone policy: one live tone per audio session; a new drag start stops the
    previous tone before starting its own.
    """

    def __init__(
        self,
        surface: RenderSurface,
        audio: Optional[AudioSession] = None,
        width: float = config.CANVAS_WIDTH,
        height: float = config.CANVAS_HEIGHT,
        node_radius: float = config.NODE_RADIUS,
    ):
        self.surface = surface
        self.audio = audio or AudioSession()
        self.width = width
        self.height = height
        self.node_radius = node_radius

        self._nodes: dict[int, InteractiveNode] = {}
        self._edges: list[Edge] = []
        self._adjacency: dict[int, list[Edge]] = {}

    @property
    def nodes(self) -> list[InteractiveNode]:
        return [self._nodes[i] for i in sorted(self._nodes)]

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    def node(self, node_id: int) -> InteractiveNode:
        if node_id not in self._nodes:
            raise KeyError(f"Unknown node: {node_id}")
        return self._nodes[node_id]

    def edges_of(self, node_id: int) -> list[Edge]:
        self.node(node_id)
        return list(self._adjacency[node_id])

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, labels: Sequence[str], colors: Sequence[RGB]) -> list[InteractiveNode]:
        """
        Lay out a batch and draw it, replacing whatever was rendered before.

        Args:
            labels: Node labels in batch order
            colors: One color per label (from the perceptual mapper)
        """
        if len(labels) != len(colors):
            raise ValueError(f"{len(labels)} labels but {len(colors)} colors")

        self.clear()

        positions = circle_layout(len(labels), self.width, self.height)
        self._edges, self._adjacency = build_adjacency(len(labels))

        for i, (label, color) in enumerate(zip(labels, colors)):
            peers = frozenset(edge.other(i) for edge in self._adjacency[i])
            self._nodes[i] = InteractiveNode(
                node_id=i,
                label=label,
                position=positions[i],
                color=color,
                connections=peers,
            )

        for edge in self._edges:
            self._draw_edge(edge)

        for node in self.nodes:
            self._draw_node(node)
            self.surface.bind_drag(
                node.key,
                on_start=partial(self.drag_start, node.node_id),
                on_move=partial(self.drag_move, node.node_id),
                on_end=partial(self.drag_end, node.node_id),
            )

        logger.debug(f"Rendered {len(self._nodes)} nodes and {len(self._edges)} edges")
        return self.nodes

    def clear(self) -> None:
        """Drop all nodes and release the audio device."""
        self.audio.close()
        self.surface.clear()
        self._nodes = {}
        self._edges = []
        self._adjacency = {}

    def _draw_node(self, node: InteractiveNode) -> None:
        self.surface.draw_circle(node.key, node.position, self.node_radius, node.color.css())
        self.surface.draw_text(node.label_key, node.position, node.label)

    def _draw_edge(self, edge: Edge) -> None:
        start = self._nodes[edge.source].position
        end = self._nodes[edge.target].position
        self.surface.draw_line(edge.key, start, end)

    # -------------------------------------------------------------------------
    # Drag protocol
    # -------------------------------------------------------------------------

    def drag_start(self, node_id: int) -> InteractiveNode:
        """Raise the node and start its tone from its static color."""
        node = begin_drag(self.node(node_id))
        self._nodes[node_id] = node

        self.surface.raise_to_top(node.key)
        self.surface.raise_to_top(node.label_key)

        self.audio.start(node_id, seed_frequency(node.color), config.SEED_GAIN)
        return node

    def drag_move(self, node_id: int, x: float, y: float) -> AudioParams:
        """
        Move a dragging node to the pointer, re-draw its edges, retune its tone.

        Returns:
            Audio parameters for the node's new position
        """
        node = self.node(node_id)
        px, py = node.position
        moved = apply_drag(node, x - px, y - py)
        self._nodes[node_id] = moved

        self._draw_node(moved)
        for edge in self._adjacency[node_id]:
            self._draw_edge(edge)

        params = to_audio_params(*self.position_ratio(moved.position))
        self.audio.update(node_id, params.frequency_hz, params.gain)
        return params

    def drag_end(self, node_id: int) -> InteractiveNode:
        """Return the node to Idle and release its tone."""
        node = end_drag(self.node(node_id))
        self._nodes[node_id] = node
        self.audio.stop(node_id)
        return node

    def position_ratio(self, position: Point) -> Point:
        """Position as a fraction of the canvas, clamped to [0, 1]."""
        x, y = position
        return (
            min(max(x / self.width, 0.0), 1.0),
            min(max(y / self.height, 0.0), 1.0),
        )
