"""Word-in-context views: the word explorer and the context morphing playground."""

import logging
from typing import TYPE_CHECKING, Optional

import pandas as pd
import streamlit as st

from vector_muse.core.contexts import generate_sentence_variations, sentences_for_word, short_label
from vector_muse.ui.actions import fetch_batch, project_batch
from vector_muse.ui.styles import render_info, render_warning
from vector_muse.visualization.scatter import ProjectionPlotBuilder
import config

if TYPE_CHECKING:
    from vector_muse.embedders.fetcher import BatchFetcher

logger = logging.getLogger(__name__)


def render_explorer_tab(fetcher: "BatchFetcher") -> None:
    """Render the word embedding explorer."""
    st.markdown("### Word Embedding Explorer")
    st.caption(
        f"The same word lands in different places depending on its sentence. "
        f"Write contexts with {config.WORD_PLACEHOLDER} where the word goes."
    )

    col_word, col_contexts = st.columns([1, 2])
    with col_word:
        word = st.text_input("Word:", value="light", key="explorer_word")
    with col_contexts:
        contexts = st.text_area(
            "Contexts (one per line):",
            value="\n".join(config.DEFAULT_CONTEXTS),
            height=200,
            key="explorer_contexts",
        )

    if st.button("Explore", type="primary"):
        try:
            sentences = sentences_for_word(word, contexts.splitlines())
        except ValueError as e:
            st.warning(str(e))
        else:
            st.session_state.explorer_figure, st.session_state.explorer_sentences = \
                _plot_sentences(fetcher, sentences)

    if st.session_state.explorer_figure is not None:
        st.plotly_chart(st.session_state.explorer_figure, use_container_width=True, key="explorer_plot")
        st.dataframe(st.session_state.explorer_sentences, hide_index=True, use_container_width=True)


def render_morphing_tab(fetcher: "BatchFetcher") -> None:
    """Render the context morphing playground."""
    st.markdown("### Context Morphing Playground")
    st.caption("Keep one word fixed and swap the words around it. Watch how far the sentence moves.")

    sentence = st.text_input("Sentence:", value=config.DEFAULT_MORPH_SENTENCE, key="morph_sentence")
    target = st.text_input("Word to keep:", value=config.DEFAULT_MORPH_TARGET, key="morph_target")

    if st.button("Generate Variations", type="primary"):
        try:
            variations = generate_sentence_variations(sentence, target)
        except ValueError as e:
            st.warning(str(e))
        else:
            st.session_state.morph_variations = variations
            st.session_state.morph_figure, _ = _plot_sentences(fetcher, variations, highlight_index=0)

    variations = st.session_state.morph_variations
    if not variations:
        return

    if len(variations) == 1:
        render_info("No variations could be made; the word needs other words before it.")

    if st.session_state.morph_figure is not None:
        st.plotly_chart(st.session_state.morph_figure, use_container_width=True, key="morph_plot")

    st.markdown("**Variations** (the original is enlarged in the plot)")
    for i, variation in enumerate(variations):
        st.markdown(f"{i + 1}. {variation}")


def _plot_sentences(
    fetcher: "BatchFetcher",
    sentences: list[str],
    highlight_index: Optional[int] = None,
) -> tuple[Optional[object], Optional[pd.DataFrame]]:
    """Embed sentences, project to 3D and build the labelled figure."""
    labels = [short_label(i, s) for i, s in enumerate(sentences)]
    batch = fetch_batch(fetcher, sentences, labels)
    if batch is None:
        return None, None

    projection = project_batch(batch)
    if projection.rank_deficient:
        render_warning("Too few distinct sentences for a full 3D projection; flat axes are fixed at 0.")

    fig = ProjectionPlotBuilder().build(batch.labels, projection.coords, highlight_index=highlight_index)
    table = pd.DataFrame({"Label": batch.labels, "Sentence": sentences})
    logger.info(f"Plotted {len(sentences)} sentences")
    return fig, table
