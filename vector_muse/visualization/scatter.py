"""
Interactive scatter plot of projected embeddings.
Uses Plotly for 3D rotation and hover labels.
"""

from typing import Optional, Sequence

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

import config


class ProjectionPlotBuilder:
    """
    Builds Plotly scatter plots for projected embeddings.

    Features:
    - 3D scatter when the projection has three axes, 2D otherwise
    - In 2D, a third axis (if any) is shown as marker size
    - Per-point colors (perceptual mapping or role colors) or a categorical palette
    - Optional extra points placed in the same space (e.g. similar words)
    """

    # Role colors used by the analogy machine
    COLORS = {
        "positive": "#4CAF50",    # Green
        "negative": "#F44336",    # Red
        "result": "#2196F3",      # Blue
        "candidate": "#94a3b8",   # Slate
        "default": "#1f77b4",
    }

    CATEGORICAL_COLORS = px.colors.qualitative.D3

    # Marker size range for z encoded as size
    SIZE_RANGE = (5, 15)

    def __init__(
        self,
        height: int = config.PLOT_HEIGHT,
        width: int = config.PLOT_WIDTH
    ):
        """
        Initialize the plot builder.

        Args:
            height: Plot height in pixels
            width: Plot width in pixels
        """
        self.height = height
        self.width = width

    def build(
        self,
        labels: Sequence[str],
        coords: np.ndarray,
        colors: Optional[Sequence[str]] = None,
        highlight_index: Optional[int] = None,
        extra_labels: Optional[Sequence[str]] = None,
        extra_coords: Optional[np.ndarray] = None,
        mode_3d: Optional[bool] = None,
    ) -> go.Figure:
        """
        Build a labelled scatter plot.

        Args:
            labels: One label per point
            coords: Array of shape (n, k) with projected coordinates
            colors: Optional CSS color per point (default: categorical palette)
            highlight_index: Point to draw enlarged (e.g. hovered sentence)
            extra_labels: Labels for secondary points
            extra_coords: Coordinates of secondary points, same width as coords
            mode_3d: Force 3D/2D; default is 3D when coords has 3+ columns

        Returns:
            Plotly Figure object
        """
        coords = np.asarray(coords, dtype=np.float64)
        if coords.ndim != 2 or coords.shape[0] != len(labels):
            raise ValueError(f"Expected {len(labels)} rows of coordinates, got shape {coords.shape}")

        if mode_3d is None:
            mode_3d = coords.shape[1] >= 3

        if colors is None:
            colors = [self.CATEGORICAL_COLORS[i % len(self.CATEGORICAL_COLORS)] for i in range(len(labels))]

        if mode_3d:
            fig = self._build_3d(labels, coords, colors, highlight_index)
        else:
            fig = self._build_2d(labels, coords, colors, highlight_index)

        if extra_coords is not None and extra_labels:
            self._add_extra_points(fig, extra_labels, np.asarray(extra_coords), mode_3d)

        return fig

    def _build_2d(
        self,
        labels: Sequence[str],
        coords: np.ndarray,
        colors: Sequence[str],
        highlight_index: Optional[int],
    ) -> go.Figure:
        """2D scatter; z (when present) becomes marker size."""
        x = coords[:, 0]
        y = coords[:, 1] if coords.shape[1] > 1 else np.zeros(len(coords))
        sizes = self._z_sizes(coords)
        if highlight_index is not None:
            sizes = sizes.copy()
            sizes[highlight_index] *= 1.8

        fig = go.Figure(go.Scatter(
            x=x,
            y=y,
            mode="markers+text",
            marker=dict(
                color=list(colors),
                size=sizes,
                opacity=0.7,
                line=dict(color="white", width=1),
            ),
            text=list(labels),
            textposition="middle right",
            hovertemplate="%{text}<extra></extra>",
            name="Embeddings",
        ))

        fig.update_layout(
            height=self.height,
            width=self.width,
            template="plotly_dark",
            paper_bgcolor="rgba(0,0,0,0)",
            plot_bgcolor="rgba(17,17,17,0.8)",
            showlegend=False,
            margin=dict(l=20, r=20, t=30, b=20),
            xaxis=dict(showgrid=False, showticklabels=False, zeroline=False, title=""),
            yaxis=dict(showgrid=False, showticklabels=False, zeroline=False, title=""),
            hovermode="closest",
        )
        return fig

    def _build_3d(
        self,
        labels: Sequence[str],
        coords: np.ndarray,
        colors: Sequence[str],
        highlight_index: Optional[int],
    ) -> go.Figure:
        """3D scatter with labels."""
        sizes = np.full(len(coords), 8.0)
        if highlight_index is not None:
            sizes[highlight_index] = 14.0

        fig = go.Figure(go.Scatter3d(
            x=coords[:, 0],
            y=coords[:, 1],
            z=coords[:, 2],
            mode="markers+text",
            marker=dict(
                color=list(colors),
                size=sizes,
                opacity=0.8,
                line=dict(color="white", width=1),
            ),
            text=list(labels),
            hovertemplate="%{text}<extra></extra>",
            name="Embeddings",
        ))

        axis = dict(
            showgrid=True,
            gridcolor="rgba(102, 126, 234, 0.2)",
            showticklabels=False,
            title="",
            zeroline=False,
        )
        fig.update_layout(
            height=self.height + 100,  # Slightly taller for 3D
            width=self.width,
            template="plotly_dark",
            paper_bgcolor="rgba(0,0,0,0)",
            scene=dict(
                bgcolor="rgba(17,17,17,0.8)",
                xaxis=axis,
                yaxis=axis,
                zaxis=axis,
            ),
            showlegend=False,
            margin=dict(l=0, r=0, t=30, b=0),
        )
        return fig

    def _add_extra_points(
        self,
        fig: go.Figure,
        labels: Sequence[str],
        coords: np.ndarray,
        mode_3d: bool,
    ) -> None:
        """Overlay secondary points in a muted style."""
        marker = dict(color=self.COLORS["candidate"], size=5, opacity=0.5)
        if mode_3d:
            fig.add_trace(go.Scatter3d(
                x=coords[:, 0],
                y=coords[:, 1],
                z=coords[:, 2],
                mode="markers+text",
                marker=marker,
                text=list(labels),
                textfont=dict(size=9, color=self.COLORS["candidate"]),
                hovertemplate="%{text}<extra></extra>",
                name="Similar",
            ))
        else:
            fig.add_trace(go.Scatter(
                x=coords[:, 0],
                y=coords[:, 1] if coords.shape[1] > 1 else np.zeros(len(coords)),
                mode="markers+text",
                marker=marker,
                text=list(labels),
                textposition="middle right",
                textfont=dict(size=9, color=self.COLORS["candidate"]),
                hovertemplate="%{text}<extra></extra>",
                name="Similar",
            ))

    def _z_sizes(self, coords: np.ndarray) -> np.ndarray:
        """Linear map of the z column onto SIZE_RANGE; 8 when there is no z."""
        if coords.shape[1] < 3:
            return np.full(len(coords), 8.0)
        z = coords[:, 2]
        lo, hi = self.SIZE_RANGE
        span = z.max() - z.min()
        if span == 0:
            return np.full(len(coords), (lo + hi) / 2)
        return lo + (z - z.min()) / span * (hi - lo)

    @classmethod
    def role_colors(cls, n_positive: int, n_negative: int, n_result: int = 1) -> list[str]:
        """Green for positives, red for negatives, blue for results."""
        return (
            [cls.COLORS["positive"]] * n_positive +
            [cls.COLORS["negative"]] * n_negative +
            [cls.COLORS["result"]] * n_result
        )
