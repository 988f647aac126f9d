"""
main.py — Graph Playground Flask App
======================================
The web server that plays the control-surface role: it renders the
widgets, forwards every intent to the ToolModeController and ships the
drawable-surface commands to the browser.

Routes:
  GET  /                    – main UI (widgets + SVG snapshot)
  POST /api/tool            – activate a tool            {"tool": "draw_node"}
  POST /api/edge-kind       – pick the edge kind         {"kind": "weighted" | null}
  POST /api/algorithm       – pick the algorithm         {"algorithm": "bfs" | null}
  POST /api/speed           – set the step delay         {"speed": 300}
  POST /api/pointer/down    – canvas press               {"x", "y", "weight"?}
  POST /api/pointer/move    – canvas drag                {"x", "y"}
  POST /api/pointer/up      – canvas release             {"x", "y"}
  POST /api/cancel          – stop the running playback
  GET  /api/frame           – fire due timers, drain surface commands, status
  GET  /api/graph           – JSON snapshot of the graph

State management:
  Each browser session owns a Workspace (graph, surface, clock,
  scheduler, controller) kept in process memory and looked up by an id
  stored in the Flask session.  Requests for one workspace are
  serialised by its lock.  Playback timers fire from /api/frame, which
  the page polls while it is open.
  Workspaces idle longer than WORKSPACE_IDLE_SECONDS are dropped, and
  the least recently used go first once MAX_WORKSPACES exist.

Errors:
  409  – editing attempted while playback is running
  400  – malformed input (unknown tool, algorithm, edge kind, bad number)
"""

import logging
import math
import secrets
import threading
import time
from typing import Callable, Dict

from flask import Flask, render_template_string, request, jsonify, session

from config import ServerConfig
from graph import Graph, EdgeKind, GraphError
from algorithms import AlgorithmError, list_algorithms
from engine import TickClock, PlaybackScheduler
from editor import Tool, ToolModeController
from ui import (
    CommandSurface,
    CanvasConfig,
    bind_graph,
    render_canvas,
    tool_panel,
    edge_selector,
    algorithm_selector,
    speed_slider,
    run_summary,
)

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.setdefault("CLOCK_TIME_FN", time.monotonic)
app.config.setdefault("WORKSPACE_IDLE_SECONDS", ServerConfig.WORKSPACE_IDLE_SECONDS)
app.config.setdefault("MAX_WORKSPACES", ServerConfig.MAX_WORKSPACES)


# ---------------------------------------------------------------------------
# Per-session workspace
# ---------------------------------------------------------------------------
class Workspace:
    """Everything one browser session edits and watches."""

    def __init__(self, time_fn: Callable[[], float] = time.monotonic):
        self.graph      = Graph()
        self.surface    = CommandSurface()
        self.clock      = TickClock(time_fn)
        self.scheduler  = PlaybackScheduler(self.surface, self.clock)
        self.controller = ToolModeController(self.graph, self.scheduler, self.surface)
        self.lock       = threading.Lock()
        self.last_seen  = time_fn()
        self._unbind    = bind_graph(self.graph, self.surface)


WORKSPACES: Dict[str, Workspace] = {}
_workspaces_lock = threading.Lock()


def _evict_workspaces(now: float) -> None:
    """Drop idle workspaces, then the least recently used ones over the cap.

    Caller holds `_workspaces_lock`.
    """
    idle_limit = app.config["WORKSPACE_IDLE_SECONDS"]
    for ws_id in [k for k, ws in WORKSPACES.items() if now - ws.last_seen > idle_limit]:
        del WORKSPACES[ws_id]
        logger.info("workspace %s evicted (idle)", ws_id)

    # leave room for the one about to be created
    overflow = len(WORKSPACES) - app.config["MAX_WORKSPACES"] + 1
    if overflow > 0:
        oldest = sorted(WORKSPACES, key=lambda k: WORKSPACES[k].last_seen)[:overflow]
        for ws_id in oldest:
            del WORKSPACES[ws_id]
            logger.info("workspace %s evicted (capacity)", ws_id)


def get_workspace() -> Workspace:
    """Look up (or create) the workspace of the current session."""
    time_fn = app.config["CLOCK_TIME_FN"]
    now = time_fn()
    with _workspaces_lock:
        ws_id = session.get("workspace")
        ws = WORKSPACES.get(ws_id) if ws_id else None
        if ws is None:
            _evict_workspaces(now)
            ws_id = secrets.token_hex(16)
            session["workspace"] = ws_id
            ws = WORKSPACES[ws_id] = Workspace(time_fn)
            logger.info("new workspace %s", ws_id)
        ws.last_seen = now
        return ws


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _number(data: dict, key: str) -> float:
    """Read a required number from the JSON body (ValueError → 400)."""
    if key not in data:
        raise ValueError(f"missing '{key}'")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"'{key}' must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"'{key}' must be finite")
    return number


def _respond(ws: Workspace, accepted: bool):
    return jsonify({"accepted": bool(accepted), **ws.controller.status()})


def _busy(ws: Workspace):
    return jsonify({"error": "playback is running", **ws.controller.status()}), 409


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.errorhandler(ValueError)
def handle_bad_value(exc):
    logger.info("bad request: %s", exc)
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(AlgorithmError)
def handle_algorithm_error(exc):
    logger.info("algorithm request rejected: %s", exc)
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(GraphError)
def handle_graph_error(exc):
    logger.info("graph edit rejected: %s", exc)
    return jsonify({"error": str(exc)}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    ws = get_workspace()
    with ws.lock:
        ctl = ws.controller
        ws.clock.run_due()
        svg = render_canvas(ws.graph, ws.surface.element_states)
        # the snapshot already reflects every buffered command
        ws.surface.drain()

        status = ctl.status()
        html = render_template_string(INDEX_TEMPLATE,
            svg=svg,
            tools=tool_panel(status["flags"], status["running"]),
            edges=edge_selector(status["edge_kind"], status["running"]),
            algo_selector=algorithm_selector(list_algorithms(), status["selection"]["algorithm"], status["running"]),
            speed=speed_slider(status["speed_ms"], status["running"]),
            summary=run_summary(status["last_run"], status["last_error"]),
            palette=CanvasConfig.palette(),
            status=status,
        )
    return html


# ---------------------------------------------------------------------------
# API: Control-panel intents
# ---------------------------------------------------------------------------
@app.route("/api/tool", methods=["POST"])
def api_tool():
    tool = Tool(_payload().get("tool"))
    ws = get_workspace()
    with ws.lock:
        if ws.controller.running:
            return _busy(ws)
        return _respond(ws, ws.controller.activate_tool(tool))


@app.route("/api/edge-kind", methods=["POST"])
def api_edge_kind():
    raw = _payload().get("kind")
    kind = EdgeKind(raw) if raw else None
    ws = get_workspace()
    with ws.lock:
        if ws.controller.running:
            return _busy(ws)
        return _respond(ws, ws.controller.select_edge_kind(kind))


@app.route("/api/algorithm", methods=["POST"])
def api_algorithm():
    key = _payload().get("algorithm") or None
    if key is not None and not isinstance(key, str):
        raise ValueError("'algorithm' must be a string")
    ws = get_workspace()
    with ws.lock:
        if ws.controller.running:
            return _busy(ws)
        return _respond(ws, ws.controller.select_algorithm(key))


@app.route("/api/speed", methods=["POST"])
def api_speed():
    speed = _number(_payload(), "speed")
    ws = get_workspace()
    with ws.lock:
        if ws.controller.running:
            return _busy(ws)
        return _respond(ws, ws.controller.set_speed(speed))


@app.route("/api/cancel", methods=["POST"])
def api_cancel():
    ws = get_workspace()
    with ws.lock:
        return _respond(ws, ws.controller.cancel())


# ---------------------------------------------------------------------------
# API: Pointer events
# ---------------------------------------------------------------------------
@app.route("/api/pointer/<phase>", methods=["POST"])
def api_pointer(phase: str):
    if phase not in ("down", "move", "up"):
        return jsonify({"error": f"unknown pointer phase {phase!r}"}), 404

    data = _payload()
    x, y = _number(data, "x"), _number(data, "y")
    weight = _number(data, "weight") if data.get("weight") is not None else None

    ws = get_workspace()
    with ws.lock:
        ctl = ws.controller
        if ctl.running:
            return _busy(ws)
        if phase == "down":
            accepted = ctl.pointer_down(x, y, weight)
        elif phase == "move":
            accepted = ctl.pointer_move(x, y)
        else:
            accepted = ctl.pointer_up(x, y)
        return _respond(ws, accepted)


# ---------------------------------------------------------------------------
# API: Polling
# ---------------------------------------------------------------------------
@app.route("/api/frame")
def api_frame():
    ws = get_workspace()
    with ws.lock:
        fired = ws.clock.run_due()
        commands = ws.surface.drain()
        if fired:
            logger.debug("frame: %d timer(s) fired, %d command(s)", fired, len(commands))
        status = ws.controller.status()
        return jsonify({
            "commands": commands,
            "summary":  run_summary(status["last_run"], status["last_error"]),
            **status,
        })


@app.route("/api/graph")
def api_graph():
    ws = get_workspace()
    with ws.lock:
        return jsonify(ws.graph.to_dict())


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Graph Playground</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --text-muted: #484f58;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --accent-rose: #f43f5e;
    }

    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 300px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
    }

    #canvas-container.running { cursor: progress; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }

    .panel h3 {
      font-size: 13px;
      font-weight: 700;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
    }

    .button-grid {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 8px;
    }

    button {
      background: var(--bg-darker);
      color: var(--text-primary);
      border: 1px solid var(--border);
      padding: 9px 12px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
    }

    button.active {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      border-color: transparent;
    }

    button:disabled, select:disabled, input:disabled { opacity: 0.45; cursor: not-allowed; }

    select, input[type="range"] {
      width: 100%;
      padding: 8px 10px;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
    }

    label {
      display: block;
      margin: 6px 0 4px;
      font-size: 12px;
      color: var(--text-secondary);
    }

    table { width: 100%; font-size: 13px; }
    table td:first-child { color: var(--text-secondary); }
    table td:last-child { text-align: right; color: var(--accent-cyan); }

    .hint { font-size: 11px; color: var(--text-muted); margin-top: 8px; font-style: italic; }
    .error { font-size: 13px; color: var(--accent-rose); }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="tools">{{ tools|safe }}</div>
    <div id="edges-panel">{{ edges|safe }}</div>
    <div id="algo-panel">{{ algo_selector|safe }}</div>
    <div id="speed-panel">{{ speed|safe }}</div>
    <div id="summary">{{ summary|safe }}</div>
  </div>

  <div id="canvas-container">{{ svg|safe }}</div>

  <script>
    const PALETTE = {{ palette|tojson }};
    const SVG_NS = 'http://www.w3.org/2000/svg';
    const board = document.getElementById('board');
    const edgeLayer = document.getElementById('edges');
    const nodeLayer = document.getElementById('nodes');
    let status = {{ status|tojson }};

    // client-side mirror of what the server drew, for edge geometry
    const nodes = {};
    const edges = {};

    board.querySelectorAll('g.node').forEach(g => {
      const c = g.querySelector('circle');
      nodes[g.dataset.id] = {x: +c.getAttribute('cx'), y: +c.getAttribute('cy')};
    });

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      const body = await res.json();
      if (body.flags) applyStatus(body);
      return body;
    }

    // -- surface commands --------------------------------------------------
    function svgEl(tag, attrs) {
      const el = document.createElementNS(SVG_NS, tag);
      for (const k in attrs) el.setAttribute(k, attrs[k]);
      return el;
    }

    function drawEdge(id) {
      const e = edges[id];
      const a = nodes[e.endpoints[0]], b = nodes[e.endpoints[1]];
      let g = edgeLayer.querySelector(`g[data-id="${id}"]`);
      if (g) g.remove();
      if (!a || !b) return;
      const dx = b.x - a.x, dy = b.y - a.y, d = Math.hypot(dx, dy) || 1;
      const ux = dx / d, uy = dy / d, r = PALETTE.radius;
      const color = PALETTE.edge[e.state] || PALETTE.edge.default;
      g = svgEl('g', {'class': 'edge', 'data-id': id});
      const x2 = b.x - ux * r, y2 = b.y - uy * r;
      g.appendChild(svgEl('line', {x1: a.x + ux * r, y1: a.y + uy * r, x2: x2, y2: y2,
                                   stroke: color, 'stroke-width': e.state === 'path' ? 4 : 2}));
      if (e.kind === 'directed') {
        const px = -uy, py = ux, s = 10;
        g.appendChild(svgEl('polygon', {fill: color, points:
          `${x2},${y2} ${x2 - ux*s + px*s/2},${y2 - uy*s + py*s/2} ${x2 - ux*s - px*s/2},${y2 - uy*s - py*s/2}`}));
      }
      if (e.kind === 'weighted') {
        const t = svgEl('text', {x: (a.x + b.x) / 2 - uy * 12, y: (a.y + b.y) / 2 + ux * 12 + 4,
                                 'text-anchor': 'middle', 'font-size': 12, fill: '#7d8590'});
        t.textContent = e.weight;
        g.appendChild(t);
      }
      edgeLayer.appendChild(g);
    }

    function apply(cmd) {
      if (cmd.op === 'render_node') {
        const [x, y] = cmd.position;
        const prev = nodes[cmd.id] || {};
        nodes[cmd.id] = {x, y, state: cmd.style.state || prev.state || 'default', label: cmd.style.label || prev.label};
        let g = nodeLayer.querySelector(`g[data-id="${cmd.id}"]`);
        if (!g) {
          g = svgEl('g', {'class': 'node', 'data-id': cmd.id});
          g.appendChild(svgEl('circle', {r: PALETTE.radius, stroke: '#30363d', 'stroke-width': 2}));
          const t = svgEl('text', {'text-anchor': 'middle', 'font-size': 13, fill: '#e6edf3'});
          g.appendChild(t);
          nodeLayer.appendChild(g);
        }
        const c = g.querySelector('circle'), t = g.querySelector('text');
        c.setAttribute('cx', x); c.setAttribute('cy', y);
        c.setAttribute('fill', PALETTE.node[nodes[cmd.id].state]);
        t.setAttribute('x', x); t.setAttribute('y', y + 5);
        if (cmd.style.label) t.textContent = cmd.style.label;
        for (const id in edges) if (edges[id].endpoints.includes(cmd.id)) drawEdge(id);
      } else if (cmd.op === 'render_edge') {
        const prev = edges[cmd.id] || {};
        edges[cmd.id] = {endpoints: cmd.endpoints, kind: cmd.kind, weight: cmd.weight,
                         state: cmd.style.state || prev.state || 'default'};
        drawEdge(cmd.id);
      } else if (cmd.op === 'remove_node') {
        delete nodes[cmd.id];
        nodeLayer.querySelector(`g[data-id="${cmd.id}"]`)?.remove();
      } else if (cmd.op === 'remove_edge') {
        delete edges[cmd.id];
        edgeLayer.querySelector(`g[data-id="${cmd.id}"]`)?.remove();
      } else if (cmd.op === 'set_state') {
        if (nodes[cmd.id]) {
          nodes[cmd.id].state = cmd.state;
          nodeLayer.querySelector(`g[data-id="${cmd.id}"] circle`)
            ?.setAttribute('fill', PALETTE.node[cmd.state]);
        } else if (edges[cmd.id]) {
          edges[cmd.id].state = cmd.state;
          drawEdge(cmd.id);
        }
      }
    }

    // -- widgets -----------------------------------------------------------
    function applyStatus(s) {
      status = s;
      document.querySelectorAll('.tool-btn').forEach(b => {
        b.classList.toggle('active', !!s.flags[b.dataset.tool]);
        b.disabled = s.running;
      });
      ['edge-kind-selector', 'algo-selector', 'speed-slider'].forEach(id => {
        document.getElementById(id).disabled = s.running;
      });
      document.getElementById('edge-kind-selector').value = s.edge_kind || '';
      document.getElementById('algo-selector').value = s.selection.algorithm || '';
      document.getElementById('btn-cancel').disabled = !s.running;
      document.getElementById('canvas-container').classList.toggle('running', s.running);
    }

    document.querySelectorAll('.tool-btn').forEach(btn => {
      btn.addEventListener('click', () => post('/api/tool', {tool: btn.dataset.tool}));
    });
    document.getElementById('edge-kind-selector').addEventListener('change', e => {
      post('/api/edge-kind', {kind: e.target.value || null});
    });
    document.getElementById('algo-selector').addEventListener('change', e => {
      post('/api/algorithm', {algorithm: e.target.value || null});
    });
    document.getElementById('speed-slider').addEventListener('input', e => {
      document.getElementById('speed-val').textContent = e.target.value;
    });
    document.getElementById('speed-slider').addEventListener('change', e => {
      post('/api/speed', {speed: +e.target.value});
    });
    document.getElementById('btn-cancel').addEventListener('click', () => post('/api/cancel'));

    // -- pointer -----------------------------------------------------------
    let pressed = false;
    function boardPoint(ev) {
      const p = board.createSVGPoint();
      p.x = ev.clientX; p.y = ev.clientY;
      const q = p.matrixTransform(board.getScreenCTM().inverse());
      return {x: q.x, y: q.y};
    }
    board.addEventListener('pointerdown', ev => {
      if (status.running) return;
      pressed = true;
      const body = boardPoint(ev);
      if (status.flags.edit_edge) {
        const w = prompt('Edge weight');
        if (w === null || w === '' || isNaN(+w)) return;
        body.weight = +w;
      }
      post('/api/pointer/down', body);
    });
    board.addEventListener('pointermove', ev => {
      if (pressed && status.flags.move_node) post('/api/pointer/move', boardPoint(ev));
    });
    board.addEventListener('pointerup', ev => {
      if (!pressed) return;
      pressed = false;
      post('/api/pointer/up', boardPoint(ev));
    });

    // -- polling -----------------------------------------------------------
    async function frame() {
      const res = await fetch('/api/frame');
      const data = await res.json();
      data.commands.forEach(apply);
      applyStatus(data);
      document.getElementById('summary').innerHTML = data.summary;
    }
    setInterval(frame, 50);
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, ServerConfig.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    logger.info("Graph Playground on http://%s:%d", ServerConfig.HOST, ServerConfig.PORT)
    app.run(debug=ServerConfig.DEBUG, host=ServerConfig.HOST, port=ServerConfig.PORT, threaded=False)
