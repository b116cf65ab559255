"""Analogy machine view: word arithmetic and its nearest words."""

import logging
import warnings
from typing import TYPE_CHECKING

import pandas as pd
import streamlit as st

from vector_muse.core.analogy import AnalogyQuery, filter_candidates, rank_similar, resolve
from vector_muse.core.errors import RankDeficientProjection, VectorMuseError
from vector_muse.core.projector import PCAProjector
from vector_muse.core.vector_math import as_matrix, blend
from vector_muse.ui.actions import fetch_batch
from vector_muse.ui.state import AppState
from vector_muse.ui.styles import render_equation
from vector_muse.visualization.scatter import ProjectionPlotBuilder
import config

if TYPE_CHECKING:
    from vector_muse.core.batch import EmbeddingBatch
    from vector_muse.embedders.fetcher import BatchFetcher

logger = logging.getLogger(__name__)


def render_analogy_tab(fetcher: "BatchFetcher") -> None:
    """Render the analogy machine tab."""
    st.markdown("### Analogy Machine")
    st.caption("Add and subtract word vectors, then look for the words closest to the result.")

    col_pos, col_neg = st.columns(2)
    with col_pos:
        _render_word_side(positive=True)
    with col_neg:
        _render_word_side(positive=False)

    positives = st.session_state.analogy_positives
    negatives = st.session_state.analogy_negatives
    if positives:
        render_equation(positives, negatives)

    custom = st.text_input(
        "Extra candidate word (optional):",
        key="analogy_custom",
        help="Checked first, alongside the built-in word list"
    )

    if st.button("Compute Analogy", type="primary", disabled=not positives):
        query = AnalogyQuery.of(positives, negatives)
        candidates = ([custom.strip().lower()] if custom.strip() else []) + config.POETIC_WORD_LIST
        _fetch_analogy(fetcher, query, filter_candidates(candidates, query))

    batch = st.session_state.analogy_batch
    query = st.session_state.analogy_query
    if batch is None or query is None:
        return

    try:
        result = resolve(
            [batch.vector(w) for w in query.positives],
            [batch.vector(w) for w in query.negatives],
        )
    except VectorMuseError as e:
        st.error(str(e))
        return

    candidates = [(label, vector) for label, vector in batch if label not in query.words]
    similar = rank_similar(result, candidates)[:config.DEFAULT_K_SIMILAR]

    col_table, col_plot = st.columns([2, 3])
    with col_table:
        st.markdown(f"**{query.equation()}**")
        st.dataframe(
            pd.DataFrame(similar, columns=["Word", "Similarity"]),
            hide_index=True,
            use_container_width=True,
            column_config={"Similarity": st.column_config.NumberColumn(format="%.4f")},
        )
    with col_plot:
        _render_analogy_plot(batch, query, result, similar)

    with st.expander("Blend two words"):
        _render_blend(batch)


def _render_word_side(positive: bool) -> None:
    side = "positive" if positive else "negative"
    words = st.session_state.analogy_positives if positive else st.session_state.analogy_negatives

    st.markdown(f"**{'Add (+)' if positive else 'Subtract (-)'}**")
    new_word = st.text_input(f"New {side} word:", key=f"analogy_new_{side}", label_visibility="collapsed")
    if st.button(f"Add {side}", key=f"analogy_add_{side}", use_container_width=True):
        AppState.add_analogy_word(new_word, positive)
        st.rerun()

    for word in list(words):
        col_word, col_remove = st.columns([3, 1])
        col_word.markdown(f"`{'+' if positive else '-'}{word}`")
        if col_remove.button("✕", key=f"analogy_remove_{side}_{word}"):
            AppState.remove_analogy_word(word, positive)
            st.rerun()


def _fetch_analogy(fetcher: "BatchFetcher", query: AnalogyQuery, candidates: list[str]) -> None:
    texts = list(query.words) + candidates
    batch = fetch_batch(fetcher, texts)
    st.session_state.analogy_batch = batch
    st.session_state.analogy_query = query if batch is not None else None
    if batch is not None:
        logger.info(f"Analogy '{query.equation()}' fetched with {len(candidates)} candidates")


def _render_analogy_plot(
    batch: "EmbeddingBatch",
    query: AnalogyQuery,
    result,
    similar: list[tuple[str, float]],
) -> None:
    """Project query words and result together; similar words are placed on the same axes."""
    points = [batch.vector(w) for w in query.words] + [result]
    labels = query.labels + ["Result"]

    projector = PCAProjector()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RankDeficientProjection)
        projection = projector.fit(as_matrix(points))

    extra_labels = [word for word, _ in similar]
    extra_coords = projector.transform([batch.vector(w) for w in extra_labels]) if extra_labels else None

    fig = ProjectionPlotBuilder().build(
        labels,
        projection.coords,
        colors=ProjectionPlotBuilder.role_colors(len(query.positives), len(query.negatives)),
        extra_labels=extra_labels,
        extra_coords=extra_coords,
    )
    st.plotly_chart(fig, use_container_width=True, key="analogy_plot")


def _render_blend(batch: "EmbeddingBatch") -> None:
    """Interpolate between two fetched words and list what lies near the mix."""
    labels = batch.labels
    col1, col2 = st.columns(2)
    first = col1.selectbox("From:", labels, index=0, key="blend_from")
    second = col2.selectbox("To:", labels, index=min(1, len(labels) - 1), key="blend_to")
    ratio = st.slider("Mix", 0.0, 1.0, 0.5, 0.05, key="blend_ratio")

    mixed = blend(batch.vector(first), batch.vector(second), ratio)
    nearest = rank_similar(mixed, [(label, vector) for label, vector in batch if label not in (first, second)])
    st.dataframe(
        pd.DataFrame(nearest[:5], columns=["Word", "Similarity"]),
        hide_index=True,
        use_container_width=True,
    )
