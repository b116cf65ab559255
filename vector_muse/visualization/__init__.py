"""
Plotly visualizations for Vector-Muse.
"""

from .scatter import ProjectionPlotBuilder
from .surface import PlotlySurface

__all__ = ["ProjectionPlotBuilder", "PlotlySurface"]
