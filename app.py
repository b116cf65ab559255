"""
Vector-Muse: see, hear and combine word embeddings
Main Streamlit application.

Run with: streamlit run app.py
"""

import logging

import streamlit as st

from vector_muse.core.errors import ProviderError
from vector_muse.ui.state import AppState, init_session_state
from vector_muse.ui.styles import inject_styles, render_header
from vector_muse.ui.sidebar import render_sidebar, render_provider_switcher, render_api_key_input
from vector_muse.ui.landscape import render_landscape_tab
from vector_muse.ui.analogy import render_analogy_tab
from vector_muse.ui.explorer import render_explorer_tab, render_morphing_tab
from vector_muse.ui.docs import render_methodology_tab
import config

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Page Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="Vector-Muse",
    page_icon="🎨",
    layout="wide",
    initial_sidebar_state="expanded"
)

inject_styles()
init_session_state()


# -----------------------------------------------------------------------------
# Main Application
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    render_header()

    provider = st.session_state.provider
    try:
        fetcher = AppState.get_fetcher(provider)
    except ProviderError as e:
        logger.warning(f"Provider {provider} not configured: {e}")
        with st.sidebar:
            render_provider_switcher()
            render_api_key_input()
        st.error(f"""
        **{config.PROVIDERS[provider]['label']} is not configured.**

        {e.message}

        Create a `.env` file in the project root:
        ```
        {config.PROVIDERS[provider]['env_key']}=your-key-here
        ```
        """)
        st.stop()

    render_sidebar(fetcher)

    tab_landscape, tab_analogy, tab_explorer, tab_morph, tab_docs = st.tabs([
        "🎨 Landscape", "➕ Analogies", "🔍 Word Explorer", "🔀 Context Morphing", "📚 How It Works"
    ])

    with tab_landscape:
        render_landscape_tab(fetcher)

    with tab_analogy:
        render_analogy_tab(fetcher)

    with tab_explorer:
        render_explorer_tab(fetcher)

    with tab_morph:
        render_morphing_tab(fetcher)

    with tab_docs:
        render_methodology_tab()


if __name__ == "__main__":
    main()
