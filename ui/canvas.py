"""
canvas.py — SVG Graph Renderer
================================
Pure rendering function: Graph + element states → SVG string.

Used for the first paint of the page; after that the browser applies the
incremental surface commands it polls for, using the same palette
(shipped to the page as JSON via `CanvasConfig.palette()`).

Design decisions:
  - NO mutation.  The caller passes in everything it needs and gets
    back a string.
  - State-based coloring is a simple dict lookup: ElementState → hex color.
  - Edge rendering respects directedness (arrows) and draws weights as
    labels for weighted edges.
"""

import math
from typing import Dict, Optional

from markupsafe import escape

from config import EditorConfig
from graph import Graph, Node, Edge, ElementState


# ---------------------------------------------------------------------------
# Visual Config: color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 600
    bg:     str = "#0d1117"

    # node colors (state → fill)
    node_colors: Dict[str, str] = {
        "default": "#1c2128",   # dark grey
        "visited": "#10b981",   # emerald green
        "path":    "#a855f7",   # purple, final path
        "start":   "#0ea5e9",   # cyan
        "end":     "#ec4899",   # pink
    }

    # edge colors
    edge_colors: Dict[str, str] = {
        "default": "#484f58",
        "visited": "#10b981",
        "path":    "#a855f7",
        "start":   "#484f58",
        "end":     "#484f58",
    }

    # node
    node_radius:        int = int(EditorConfig.NODE_RADIUS)
    node_stroke:        str = "#30363d"
    node_stroke_width:  int = 2
    node_label_color:   str = "#e6edf3"
    node_label_size:    int = 13

    # edge
    edge_width:         int = 2
    edge_width_path:    int = 4
    edge_arrow_size:    int = 10
    edge_weight_color:  str = "#7d8590"
    edge_weight_size:   int = 12
    edge_weight_bg:     str = "#161b22"

    @classmethod
    def palette(cls) -> dict:
        return {
            "node": dict(cls.node_colors),
            "edge": dict(cls.edge_colors),
            "radius": cls.node_radius,
        }


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Graph,
    states: Optional[Dict[str, ElementState]] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string.

    Args:
        graph  : The graph to render.
        states : {element_id: ElementState}; missing ids render as DEFAULT.
        config : Visual config.
    """
    states = states or {}

    svg_parts = [
        f'<svg id="board" width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        '<g id="edges">',
    ]

    # -- edges (draw first so nodes sit on top) --
    for edge in graph.edges.values():
        svg_parts.append(_render_edge(graph, edge, states.get(edge.id, ElementState.DEFAULT), config))
    svg_parts.append('</g>')

    # -- nodes --
    svg_parts.append('<g id="nodes">')
    for node in graph.nodes.values():
        svg_parts.append(_render_node(node, states.get(node.id, ElementState.DEFAULT), config))
    svg_parts.append('</g>')

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Node Rendering
# ---------------------------------------------------------------------------
def _render_node(node: Node, state: ElementState, config: CanvasConfig) -> str:
    fill = config.node_colors.get(state.value, config.node_colors["default"])
    cx, cy = node.x, node.y
    r = config.node_radius

    parts = [
        f'<g class="node" data-id="{node.id}">',
        f'  <circle cx="{cx}" cy="{cy}" r="{r}" '
        f'fill="{fill}" stroke="{config.node_stroke}" stroke-width="{config.node_stroke_width}"/>',
        f'  <text x="{cx}" y="{cy + 5}" text-anchor="middle" '
        f'font-size="{config.node_label_size}" font-family="sans-serif" '
        f'fill="{config.node_label_color}" font-weight="600">{escape(node.label)}</text>',
        '</g>',
    ]
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(graph: Graph, edge: Edge, state: ElementState, config: CanvasConfig) -> str:
    src_node = graph.get_node(edge.source)
    tgt_node = graph.get_node(edge.target)
    if not src_node or not tgt_node:
        return ""

    stroke = config.edge_colors.get(state.value, config.edge_colors["default"])
    stroke_width = config.edge_width_path if state is ElementState.PATH else config.edge_width

    x1, y1 = src_node.x, src_node.y
    x2, y2 = tgt_node.x, tgt_node.y

    # shorten the line by node_radius on both ends
    dx, dy = x2 - x1, y2 - y1
    dist = math.sqrt(dx * dx + dy * dy)
    if dist < 0.001:
        return ""  # degenerate edge

    ux, uy = dx / dist, dy / dist
    r = config.node_radius

    x1_adj = x1 + ux * r
    y1_adj = y1 + uy * r
    x2_adj = x2 - ux * r
    y2_adj = y2 - uy * r

    parts = [f'<g class="edge" data-id="{edge.id}">']
    parts.append(
        f'  <line x1="{x1_adj}" y1="{y1_adj}" x2="{x2_adj}" y2="{y2_adj}" '
        f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
    )

    if edge.directed:
        parts.append(_render_arrow(x2_adj, y2_adj, ux, uy, stroke, config))

    if edge.kind.is_weighted:
        # label at the midpoint, offset perpendicular to the edge
        mx = (x1 + x2) / 2 - uy * 12
        my = (y1 + y2) / 2 + ux * 12
        parts.append(
            f'  <circle cx="{mx}" cy="{my}" r="12" fill="{config.edge_weight_bg}" opacity="0.9"/>'
        )
        parts.append(
            f'  <text x="{mx}" y="{my + 4}" text-anchor="middle" '
            f'font-size="{config.edge_weight_size}" font-family="sans-serif" '
            f'fill="{config.edge_weight_color}" font-weight="600">{_format_weight(edge.weight)}</text>'
        )

    parts.append('</g>')
    return "\n".join(parts)


def _render_arrow(x: float, y: float, ux: float, uy: float, color: str, config: CanvasConfig) -> str:
    """Draw an arrowhead at (x, y) pointing in direction (ux, uy)."""
    size = config.edge_arrow_size
    px, py = -uy, ux
    p1_x = x - ux * size + px * (size * 0.5)
    p1_y = y - uy * size + py * (size * 0.5)
    p2_x = x - ux * size - px * (size * 0.5)
    p2_y = y - uy * size - py * (size * 0.5)
    return f'<polygon points="{x},{y} {p1_x},{p1_y} {p2_x},{p2_y}" fill="{color}"/>'


def _format_weight(weight: float) -> str:
    return str(int(weight)) if float(weight).is_integer() else f"{weight:g}"
