"""Sidebar UI components for Vector-Muse."""

import logging
import os
import streamlit as st
from typing import TYPE_CHECKING

from vector_muse.ui.state import AppState
import config

if TYPE_CHECKING:
    from vector_muse.embedders.fetcher import BatchFetcher

logger = logging.getLogger(__name__)


def render_sidebar(fetcher: "BatchFetcher") -> None:
    """Render the complete sidebar."""
    with st.sidebar:
        render_provider_switcher()
        st.markdown("---")
        render_api_key_input()
        st.markdown("---")
        render_provider_info(fetcher)
        st.markdown("---")
        render_reset_controls()
        st.markdown("---")
        render_about()


def render_provider_switcher() -> None:
    """Render embedding provider radio buttons."""
    st.markdown("### Embedding Provider")

    keys = list(config.PROVIDERS)
    current = st.session_state.provider
    if current not in keys:
        current = keys[0]
        st.session_state.provider = current

    selected = st.radio(
        "Select provider:",
        keys,
        format_func=lambda k: config.PROVIDERS[k]["label"],
        index=keys.index(current),
        key="provider_radio",
        help="Embeddings from different providers live in different spaces"
    )

    if selected != current:
        logger.info(f"Switching provider {current} -> {selected}")
        st.session_state.provider = selected
        AppState.reset_for_provider_change()
        st.rerun()


def render_api_key_input() -> None:
    """Render API key field for the current provider (session only)."""
    provider = st.session_state.provider
    env_key = config.PROVIDERS[provider]["env_key"]

    st.markdown("### API Key")
    key = st.text_input(
        f"{env_key}:",
        value=AppState.api_key(provider) or "",
        type="password",
        help="Kept in this browser session only; falls back to the .env file"
    )

    if key != (AppState.api_key(provider) or ""):
        AppState.set_api_key(provider, key)
        st.rerun()

    if AppState.api_key(provider):
        st.caption("Using the key entered above")
    elif os.getenv(env_key):
        st.caption(f"Using {env_key} from the environment")
    elif provider == "huggingface":
        st.caption("No token set; anonymous requests may be rate limited")
    else:
        st.warning("No API key set")


def render_provider_info(fetcher: "BatchFetcher") -> None:
    """Render provider details."""
    st.markdown("### Model")
    st.markdown(f"**Name:** `{fetcher.embedder.name}`")
    st.markdown(f"**Dimensions:** {fetcher.embedder.dimension:,}")
    st.markdown(f"**Projection:** PCA to {config.PCA_N_COMPONENTS}D")


def render_reset_controls() -> None:
    """Render a button that clears every view."""
    if st.button("Clear All Views", help="Forget fetched batches and stop any tone"):
        AppState.reset_for_provider_change()
        st.rerun()


def render_about() -> None:
    st.markdown("### About")
    st.caption(
        "Words become points in a high-dimensional space. "
        "Vector-Muse projects them to 3D and lets you see, hear and combine them."
    )
