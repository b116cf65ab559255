"""Synesthetic landscape view: colored word nodes you can drag and hear."""

import logging
from typing import TYPE_CHECKING

import numpy as np
import streamlit as st

from vector_muse.audio.tone import AudioSession, SynthAudioOutput
from vector_muse.core.interaction import InteractionController
from vector_muse.core.perceptual import map_colors, to_audio_params
from vector_muse.ui.actions import fetch_batch, parse_word_list, project_batch
from vector_muse.ui.state import AppState
from vector_muse.ui.styles import render_warning
from vector_muse.visualization.scatter import ProjectionPlotBuilder
from vector_muse.visualization.surface import PlotlySurface
import config

if TYPE_CHECKING:
    from vector_muse.embedders.fetcher import BatchFetcher

logger = logging.getLogger(__name__)

DRAG_STEPS = 8


def render_landscape_tab(fetcher: "BatchFetcher") -> None:
    """Render the landscape tab."""
    st.markdown("### Synesthetic Landscape")
    st.caption(
        "Each word's color comes from its position in the 3D projection. "
        "Drag a word to hear it: left to right raises the pitch, top to bottom lowers the volume."
    )

    text = st.text_area(
        "Words (one per line):",
        value="\n".join(config.DEFAULT_WORDS),
        height=160,
        key="landscape_words",
    )

    if st.button("Map Words", type="primary"):
        words = parse_word_list(text)
        if not words:
            st.warning("Enter at least one word.")
        else:
            _build_landscape(fetcher, words)

    if not AppState.has_landscape():
        return

    if st.session_state.landscape_projection.rank_deficient:
        render_warning(
            "These words span fewer than three independent directions; "
            "the missing color channels are held at their midpoint."
        )

    col_canvas, col_controls = st.columns([3, 2])
    with col_controls:
        _render_drag_controls()
    with col_canvas:
        surface: PlotlySurface = st.session_state.landscape_surface
        st.plotly_chart(surface.to_figure(), use_container_width=False, key="landscape_canvas")

    with st.expander("3D projection"):
        _render_projection()


def _build_landscape(fetcher: "BatchFetcher", words: list[str]) -> None:
    """Fetch, project, color and lay out a new batch."""
    batch = fetch_batch(fetcher, words)
    if batch is None:
        AppState.clear_landscape()
        return

    projection = project_batch(batch)
    colors = map_colors(projection.coords)

    surface = PlotlySurface()
    controller = InteractionController(surface, AudioSession(SynthAudioOutput()))
    controller.render(batch.labels, colors)

    AppState.set_landscape(batch, projection, controller, surface)
    logger.info(f"Landscape built for {len(batch)} words")


def _render_drag_controls() -> None:
    """Pick a node and a target point; the drag is replayed along a straight path."""
    controller: InteractionController = st.session_state.landscape_controller
    surface: PlotlySurface = st.session_state.landscape_surface
    nodes = controller.nodes

    node_id = st.selectbox(
        "Word to drag:",
        [n.node_id for n in nodes],
        format_func=lambda i: controller.node(i).label,
        key="landscape_node",
    )
    node = controller.node(node_id)
    x0, y0 = node.position

    x = st.slider("Horizontal position", 0, int(controller.width), int(x0), key=f"drag_x_{node_id}")
    y = st.slider("Vertical position", 0, int(controller.height), int(y0), key=f"drag_y_{node_id}")

    ratio = controller.position_ratio((x, y))
    preview = to_audio_params(*ratio)
    col1, col2 = st.columns(2)
    col1.metric("Pitch", f"{preview.frequency_hz:.0f} Hz")
    col2.metric("Volume", f"{preview.gain:.2f}")

    if st.button("Drag", use_container_width=True):
        path = [
            (float(px), float(py))
            for px, py in zip(np.linspace(x0, x, DRAG_STEPS + 1)[1:], np.linspace(y0, y, DRAG_STEPS + 1)[1:])
        ]
        surface.drag(node.key, path)
        st.rerun()

    audio: AudioSession = controller.audio
    tone = audio.last_tone
    if tone is not None and isinstance(audio.output, SynthAudioOutput):
        st.markdown(f"**Last tone:** {tone.history[0][0]:.0f} Hz → {tone.frequency_hz:.0f} Hz")
        st.audio(audio.output.render_wav(tone), format="audio/wav")


def _render_projection() -> None:
    batch = st.session_state.landscape_batch
    projection = st.session_state.landscape_projection
    colors = [c.css() for c in map_colors(projection.coords)]

    fig = ProjectionPlotBuilder().build(batch.labels, projection.coords, colors=colors)
    st.plotly_chart(fig, use_container_width=True, key="landscape_projection")
