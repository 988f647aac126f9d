"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • tool_panel          – node tools, edge tools, reset
  • edge_selector       – "Select Edge" dropdown (undirected / directed / weighted)
  • algorithm_selector  – "Select Algorithm" dropdown
  • speed_slider        – step delay, 100 – 1000 ms
  • run_summary         – nodes visited, path, path cost, rejection message

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - Every widget is rendered disabled while playback is running; the
    controller enforces the same rule server-side.
  - The main app stitches them together.
"""

from typing import Dict, List, Optional

from markupsafe import escape

from config import PlaybackConfig


TOOL_BUTTONS = [
    # (tool value, label, group)
    ("draw_node",   "Draw Node",   "node"),
    ("move_node",   "Move Node",   "node"),
    ("delete_node", "Delete Node", "node"),
    ("edit_edge",   "Edit Edge",   "edge"),
    ("delete_edge", "Delete Edge", "edge"),
    ("reset",       "Reset",       "board"),
]

EDGE_KINDS = [
    ("undirected", "Undirected"),
    ("directed",   "Directed"),
    ("weighted",   "Weighted"),
]


def _disabled(running: bool) -> str:
    return "disabled" if running else ""


# ---------------------------------------------------------------------------
# Tool Buttons
# ---------------------------------------------------------------------------
def tool_panel(flags: Dict[str, bool], running: bool = False) -> str:
    buttons = []
    for value, label, group in TOOL_BUTTONS:
        active = "active" if flags.get(value) else ""
        buttons.append(
            f'<button class="tool-btn {active}" data-tool="{value}" data-group="{group}" '
            f'{_disabled(running)}>{label}</button>'
        )

    anchor_hint = ""
    if flags.get("select_start_node"):
        anchor_hint = '<p class="hint" id="anchor-hint">Click a node to pick the start.</p>'
    elif flags.get("select_end_node"):
        anchor_hint = '<p class="hint" id="anchor-hint">Click a node to pick the end.</p>'

    return f"""
    <div class="panel tool-panel">
      <h3>✏️ Tools</h3>
      <div class="button-grid">
        {''.join(buttons)}
      </div>
      {anchor_hint}
    </div>
    """


# ---------------------------------------------------------------------------
# Edge Kind Dropdown
# ---------------------------------------------------------------------------
def edge_selector(selected_kind: Optional[str] = None, running: bool = False) -> str:
    options = [f'<option value="" {"selected" if not selected_kind else ""}>Select Edge</option>']
    for value, label in EDGE_KINDS:
        sel = "selected" if value == selected_kind else ""
        options.append(f'<option value="{value}" {sel}>{label}</option>')

    return f"""
    <div class="panel edge-selector">
      <h3>🔗 Edges</h3>
      <select id="edge-kind-selector" {_disabled(running)}>
        {''.join(options)}
      </select>
      <p class="hint">Drag from one node to another to draw an edge.</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Dropdown
# ---------------------------------------------------------------------------
def algorithm_selector(algorithms: list, selected_key: Optional[str] = None, running: bool = False) -> str:
    """`algorithms` is the registry's AlgoInfo list, in display order."""
    options = [f'<option value="" {"selected" if not selected_key else ""}>Select Algorithm</option>']
    for algo in algorithms:
        sel = "selected" if algo.key == selected_key else ""
        options.append(
            f'<option value="{algo.key}" title="{escape(algo.description)}" {sel}>{escape(algo.label)} — {escape(algo.complexity_time)}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector" {_disabled(running)}>
        {''.join(options)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Speed Slider
# ---------------------------------------------------------------------------
def speed_slider(speed_ms: int = PlaybackConfig.DEFAULT_SPEED_MS, running: bool = False) -> str:
    return f"""
    <div class="panel speed-control">
      <h3>⏱ Speed</h3>
      <label>Step delay: <span id="speed-val">{speed_ms}</span> ms</label>
      <input type="range" id="speed-slider"
             min="{PlaybackConfig.MIN_SPEED_MS}" max="{PlaybackConfig.MAX_SPEED_MS}"
             step="{PlaybackConfig.SPEED_STEP_MS}" value="{speed_ms}" {_disabled(running)}>
      <button id="btn-cancel" class="btn-secondary" {"" if running else "disabled"}>■ Stop</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Run Summary
# ---------------------------------------------------------------------------
def run_summary(metrics: Optional[dict] = None, error: Optional[str] = None) -> str:
    """`metrics` is RunMetrics.to_dict() (the same shape /api/frame returns)."""
    if error:
        return f"""
        <div class="panel run-summary">
          <h3>📊 Last Run</h3>
          <p class="error">{escape(error)}</p>
        </div>
        """

    if not metrics:
        return """
        <div class="panel run-summary">
          <h3>📊 Last Run</h3>
          <p class="hint">Pick an algorithm, then click the start node.</p>
        </div>
        """

    rows: List[str] = [
        f'<tr><td>Algorithm</td><td>{escape(metrics["algo_label"])}</td></tr>',
        f'<tr><td>Nodes visited</td><td>{metrics["nodes_visited"]}</td></tr>',
        f'<tr><td>Edges visited</td><td>{metrics["edges_visited"]}</td></tr>',
        f'<tr><td>Steps</td><td>{metrics["total_steps"]}</td></tr>',
    ]
    if metrics["path_found"]:
        rows.append(f'<tr><td>Path cost</td><td>{metrics["path_cost"]:g}</td></tr>')
        rows.append(f'<tr><td>Path length</td><td>{len(metrics["path"])} nodes</td></tr>')
    elif metrics["path_expected"]:
        rows.append('<tr><td>Path</td><td>unreachable</td></tr>')

    return f"""
    <div class="panel run-summary">
      <h3>📊 Last Run</h3>
      <table>
        {''.join(rows)}
      </table>
    </div>
    """
