"""
Centralized session state management for Vector-Muse.
Provides typed accessors and clear state transition methods.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
import streamlit as st
import pandas as pd

from vector_muse.embedders.base import get_embedder
from vector_muse.embedders.fetcher import BatchFetcher
import config


@dataclass
class StateDefaults:
    """Default values for all session state variables."""
    provider: str = config.DEFAULT_PROVIDER
    api_keys: dict = field(default_factory=dict)
    fetcher: Optional[Any] = None                   # BatchFetcher owned by this session
    fetcher_key: Optional[tuple] = None             # (provider, api_key) it was built for

    # Synesthetic landscape
    landscape_batch: Optional[Any] = None           # EmbeddingBatch
    landscape_projection: Optional[Any] = None      # Projection
    landscape_controller: Optional[Any] = None      # InteractionController
    landscape_surface: Optional[Any] = None         # PlotlySurface

    # Analogy machine
    analogy_positives: List[str] = field(default_factory=lambda: list(config.DEFAULT_ANALOGY["positives"]))
    analogy_negatives: List[str] = field(default_factory=lambda: list(config.DEFAULT_ANALOGY["negatives"]))
    analogy_batch: Optional[Any] = None             # EmbeddingBatch of query words + candidates
    analogy_query: Optional[Any] = None             # AnalogyQuery it was fetched for

    # Word explorer and context morphing
    explorer_figure: Optional[Any] = None
    explorer_sentences: Optional[pd.DataFrame] = None
    morph_figure: Optional[Any] = None
    morph_variations: Optional[List[str]] = None

    last_error: Optional[str] = None


class AppState:
    """
    Wrapper around Streamlit session state with type hints and defaults.
    Provides clear API for state transitions.
    """

    @classmethod
    def init(cls, default_provider: str = config.DEFAULT_PROVIDER) -> None:
        """Initialize all session state with defaults."""
        defaults = StateDefaults(provider=default_provider)
        for field_name in defaults.__dataclass_fields__:
            if field_name not in st.session_state:
                st.session_state[field_name] = getattr(defaults, field_name)

    @classmethod
    def reset_for_provider_change(cls) -> None:
        """Drop everything embedded with the previous provider."""
        cls.clear_landscape()
        st.session_state.analogy_batch = None
        st.session_state.analogy_query = None
        st.session_state.explorer_figure = None
        st.session_state.explorer_sentences = None
        st.session_state.morph_figure = None
        st.session_state.morph_variations = None
        st.session_state.last_error = None

    @classmethod
    def set_error(cls, message: str) -> None:
        """Record an error for display."""
        st.session_state.last_error = message

    @classmethod
    def clear_error(cls) -> None:
        """Clear any recorded error."""
        st.session_state.last_error = None

    @classmethod
    def set_api_key(cls, provider: str, key: str) -> None:
        """Remember a key for this session only."""
        if key:
            st.session_state.api_keys[provider] = key
        else:
            st.session_state.api_keys.pop(provider, None)

    @staticmethod
    def api_key(provider: str) -> Optional[str]:
        return st.session_state.get("api_keys", {}).get(provider)

    @classmethod
    def get_fetcher(cls, provider: str) -> BatchFetcher:
        """
        This session's fetcher, rebuilt when the provider or key changes.

        Each browser session owns its fetcher, so a newer batch only ever
        supersedes an older batch of the same session.

        Raises:
            ProviderError: If the provider cannot be configured
        """
        api_key = cls.api_key(provider)
        fetcher_key = (provider, api_key)
        if st.session_state.get("fetcher") is None or st.session_state.get("fetcher_key") != fetcher_key:
            st.session_state.fetcher = BatchFetcher(get_embedder(provider, api_key=api_key))
            st.session_state.fetcher_key = fetcher_key
        return st.session_state.fetcher

    @classmethod
    def set_landscape(cls, batch: Any, projection: Any, controller: Any, surface: Any) -> None:
        """Replace the rendered landscape, releasing the previous one's audio."""
        cls.clear_landscape()
        st.session_state.landscape_batch = batch
        st.session_state.landscape_projection = projection
        st.session_state.landscape_controller = controller
        st.session_state.landscape_surface = surface

    @classmethod
    def clear_landscape(cls) -> None:
        controller = st.session_state.get("landscape_controller")
        if controller is not None:
            controller.clear()
        st.session_state.landscape_batch = None
        st.session_state.landscape_projection = None
        st.session_state.landscape_controller = None
        st.session_state.landscape_surface = None

    @classmethod
    def add_analogy_word(cls, word: str, positive: bool) -> None:
        """Append a word to the positive or negative side, ignoring duplicates."""
        word = word.strip().lower()
        side = st.session_state.analogy_positives if positive else st.session_state.analogy_negatives
        if word and word not in side:
            side.append(word)

    @classmethod
    def remove_analogy_word(cls, word: str, positive: bool) -> None:
        side = st.session_state.analogy_positives if positive else st.session_state.analogy_negatives
        if word in side:
            side.remove(word)

    # Property-style accessors for common checks
    @staticmethod
    def has_landscape() -> bool:
        """Check if a landscape is rendered."""
        return st.session_state.get("landscape_controller") is not None

    @staticmethod
    def has_error() -> bool:
        """Check if there's an error to display."""
        return st.session_state.get("last_error") is not None


def init_session_state(default_provider: str = config.DEFAULT_PROVIDER) -> None:
    """Convenience function to initialize session state."""
    AppState.init(default_provider)
