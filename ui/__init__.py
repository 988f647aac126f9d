"""
ui/
---
Presentation layer.

    from ui import CommandSurface, bind_graph, render_canvas
    from ui import tool_panel, edge_selector, algorithm_selector, …
"""

from ui.surface import DrawableSurface, CommandSurface, bind_graph
from ui.canvas import render_canvas, CanvasConfig

from ui.controls import (
    tool_panel,
    edge_selector,
    algorithm_selector,
    speed_slider,
    run_summary,
)

__all__ = [
    "DrawableSurface",
    "CommandSurface",
    "bind_graph",
    "render_canvas",
    "CanvasConfig",
    "tool_panel",
    "edge_selector",
    "algorithm_selector",
    "speed_slider",
    "run_summary",
]
