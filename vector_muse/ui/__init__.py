"""UI components for the Vector-Muse Streamlit application."""

from .state import AppState, init_session_state
from .styles import inject_styles, render_header, THEME
from . import sidebar
from . import landscape
from . import analogy
from . import explorer
from . import docs

__all__ = [
    "AppState",
    "init_session_state",
    "inject_styles",
    "render_header",
    "THEME",
    "sidebar",
    "landscape",
    "analogy",
    "explorer",
    "docs",
]
