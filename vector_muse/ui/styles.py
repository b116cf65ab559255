"""
Theme constants and CSS injection for Vector-Muse.
Centralizes all styling in one place for easy customization.
"""

import streamlit as st
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Central theme configuration - all colors in one place."""
    # Primary palette (gradient)
    primary_start: str = "#8e24aa"
    primary_end: str = "#3949ab"

    # Backgrounds
    bg_dark: str = "#120f23"
    bg_medium: str = "#1c1633"
    bg_light: str = "#231d40"
    bg_card: str = "rgba(38, 30, 66, 0.8)"

    # Text
    text_primary: str = "#ede7f6"
    text_secondary: str = "#b39ddb"

    # Analogy roles
    accent_positive: str = "#4CAF50"
    accent_negative: str = "#F44336"
    accent_result: str = "#2196F3"

    # Borders
    border_subtle: str = "rgba(142, 36, 170, 0.3)"
    border_focus: str = "rgba(142, 36, 170, 0.6)"


THEME = Theme()


def get_css() -> str:
    """Generate CSS using theme constants."""
    return f"""
<style>
    [data-testid="stAppViewContainer"] {{
        background: linear-gradient(135deg, {THEME.bg_dark} 0%, {THEME.bg_medium} 50%, {THEME.bg_light} 100%);
    }}

    [data-testid="stSidebar"] {{
        background: rgba(18, 15, 35, 0.95);
    }}

    .vm-header {{
        font-family: 'JetBrains Mono', 'Fira Code', 'SF Mono', monospace;
        background: linear-gradient(90deg, {THEME.primary_start} 0%, {THEME.primary_end} 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        background-clip: text;
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 0;
    }}

    .vm-subheader {{
        color: {THEME.text_secondary};
        font-size: 1rem;
        margin-top: 0.25rem;
    }}

    .vm-equation {{
        font-family: 'JetBrains Mono', monospace;
        font-size: 1.3rem;
        color: {THEME.text_primary};
        background: {THEME.bg_card};
        border: 1px solid {THEME.border_subtle};
        border-radius: 8px;
        padding: 0.75rem 1rem;
        margin: 0.5rem 0 1rem 0;
    }}

    .vm-positive {{ color: {THEME.accent_positive}; }}
    .vm-negative {{ color: {THEME.accent_negative}; }}
    .vm-result {{ color: {THEME.accent_result}; }}

    .vm-error {{
        background: rgba(239, 68, 68, 0.1);
        border: 1px solid rgba(239, 68, 68, 0.3);
        border-radius: 8px;
        padding: 1rem;
        color: #fca5a5;
    }}

    .vm-warning {{
        background: rgba(245, 158, 11, 0.1);
        border: 1px solid rgba(245, 158, 11, 0.3);
        border-radius: 8px;
        padding: 1rem;
        color: #fcd34d;
    }}

    .vm-info {{
        background: {THEME.bg_card};
        border: 1px solid {THEME.border_subtle};
        border-radius: 8px;
        padding: 1rem;
        color: {THEME.text_secondary};
    }}

    [data-testid="stExpander"] {{
        background: {THEME.bg_card};
        border: 1px solid {THEME.border_subtle};
        border-radius: 8px;
    }}

    [data-testid="stMetric"] {{
        background: {THEME.bg_card};
        padding: 1rem;
        border-radius: 8px;
        border: 1px solid {THEME.border_subtle};
    }}
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(get_css(), unsafe_allow_html=True)


def render_header() -> None:
    """Render the styled application header."""
    st.markdown('<h1 class="vm-header">Vector-Muse</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="vm-subheader">Explore the geometry of word embeddings by sight and sound</p>',
        unsafe_allow_html=True
    )


def render_equation(positives: list[str], negatives: list[str]) -> None:
    """Render an analogy as colored '+a + b - c = ?'."""
    parts = [f'<span class="vm-positive">{w}</span>' for w in positives]
    text = " + ".join(parts)
    for w in negatives:
        text += f' - <span class="vm-negative">{w}</span>'
    text += ' = <span class="vm-result">?</span>'
    st.markdown(f'<div class="vm-equation">{text}</div>', unsafe_allow_html=True)


def render_error(message: str) -> None:
    """Render a styled error message."""
    st.markdown(f'<div class="vm-error">Error: {message}</div>', unsafe_allow_html=True)


def render_warning(message: str) -> None:
    """Render a styled warning message."""
    st.markdown(f'<div class="vm-warning">{message}</div>', unsafe_allow_html=True)


def render_info(message: str) -> None:
    """Render a styled info message."""
    st.markdown(f'<div class="vm-info">{message}</div>', unsafe_allow_html=True)
