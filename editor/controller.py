"""
controller.py — Tool-Mode Controller
=====================================
Turns control-panel intents and pointer events into Graph mutations or
into an algorithm run.

Intents:
    activate_tool(tool)          one tool on, edge kind + algorithm cleared
    select_edge_kind(kind|None)  tools off, later drags draw this kind of edge
    select_algorithm(key|None)   tools off, then anchor picking for `key`
    set_speed(ms) / cancel()

Pointer routing (pointer_down / pointer_move / pointer_up):
    DRAW_NODE          click empty canvas          → add_node
    MOVE_NODE          press node, drag, release   → move_node
    DELETE_NODE        click node                  → delete_node
    EDIT_EDGE          click near edge             → set_edge_weight
    DELETE_EDGE        click near edge             → delete_edge
    SELECT_START_NODE  click node                  → start anchor
    SELECT_END_NODE    click node                  → end anchor
    idle + edge kind   press node, release on node → add_or_replace_edge

Anchor rule: an algorithm declares how many anchors it needs in the
registry.  One-anchor algorithms run as soon as the start is picked.
Two-anchor algorithms pick the start, then switch to SELECT_END_NODE,
and run once the end is picked.

Safety gate: while the scheduler is running, every entry point except
cancel() returns False without touching anything.
"""

import functools
import logging
from typing import Callable, Dict, Optional, Tuple

from config import EditorConfig, PlaybackConfig
from graph import Edge, EdgeKind, ElementState, Graph
import algorithms
from algorithms import NegativeWeight, UnknownAlgorithm
from engine import PlaybackScheduler, RunMetrics, summarize
from editor.tools import AlgorithmSelection, Tool, tool_flags

logger = logging.getLogger(__name__)

WeightPrompt = Callable[[Edge], Optional[float]]


def refuse_while_running(method):
    """Entry-point guard: no-op (returns False) while playback is running."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.running:
            logger.info("%s refused: playback is running", method.__name__)
            return False
        return method(self, *args, **kwargs)

    return wrapper


class ToolModeController:
    """
    Attributes:
        graph        : The Graph being edited.
        scheduler    : PlaybackScheduler that owns the running flag.
        surface      : Drawable surface (anchor marks, clearing run colours).
        tool         : Active Tool, or None when idle.
        edge_kind    : EdgeKind for edge drawing, or None ("Select Edge").
        selection    : AlgorithmSelection.
        speed_ms     : Delay between animation steps.
        last_run     : RunMetrics of the most recent run.
        last_error   : Message of the most recent rejected run.
    """

    def __init__(
        self,
        graph: Graph,
        scheduler: PlaybackScheduler,
        surface,
        weight_prompt: Optional[WeightPrompt] = None,
        initial_tool: Optional[Tool] = Tool(EditorConfig.INITIAL_TOOL),
    ):
        self.graph      = graph
        self.scheduler  = scheduler
        self.surface    = surface
        self.weight_prompt = weight_prompt

        self.tool:      Optional[Tool]     = initial_tool
        self.edge_kind: Optional[EdgeKind] = None
        self.selection  = AlgorithmSelection()
        self.speed_ms:  int = PlaybackConfig.DEFAULT_SPEED_MS
        self.last_run:  Optional[RunMetrics] = None
        self.last_error: Optional[str] = None

        self._drag_node:  Optional[str] = None
        self._edge_from:  Optional[str] = None
        self._marked = False           # surface carries run / anchor colours

        scheduler.add_listener(self._on_running_changed)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.scheduler.running

    @property
    def flags(self) -> Dict[str, bool]:
        return tool_flags(self.tool)

    def status(self) -> dict:
        return {
            "running":   self.running,
            "tool":      self.tool.value if self.tool else None,
            "flags":     self.flags,
            "edge_kind": self.edge_kind.value if self.edge_kind else None,
            "selection": self.selection.to_dict(),
            "speed_ms":  self.speed_ms,
            "last_run":  self.last_run.to_dict() if self.last_run else None,
            "last_error": self.last_error,
        }

    # ------------------------------------------------------------------
    # Control-panel intents
    # ------------------------------------------------------------------
    @refuse_while_running
    def activate_tool(self, tool: Tool) -> bool:
        self._reset_transients()
        self.tool = tool
        self.edge_kind = None
        self.selection.clear()
        self._clear_marks()
        if tool is Tool.RESET:
            logger.info("reset: clearing %d node(s), %d edge(s)", self.graph.node_count(), self.graph.edge_count())
            self.graph.clear()
        return True

    @refuse_while_running
    def select_edge_kind(self, kind: Optional[EdgeKind]) -> bool:
        self._reset_transients()
        self.tool = None
        self.selection.clear()
        self._clear_marks()
        self.edge_kind = kind
        return True

    @refuse_while_running
    def select_algorithm(self, key: Optional[str]) -> bool:
        self._reset_transients()
        self.edge_kind = None
        self._clear_marks()
        if key is None:
            self.selection.clear()
            self.tool = None
            return True

        info = algorithms.get_algorithm(key)
        if info is None:
            raise UnknownAlgorithm(key)
        self.selection.choose(key, info.anchors)
        self.tool = Tool.SELECT_START_NODE
        self.last_error = None
        return True

    @refuse_while_running
    def set_speed(self, speed_ms) -> bool:
        self.speed_ms = PlaybackConfig.normalize_speed(speed_ms)
        return True

    def cancel(self) -> bool:
        return self.scheduler.cancel()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    @refuse_while_running
    def pointer_down(self, x: float, y: float, weight: Optional[float] = None) -> bool:
        tool = self.tool
        if tool is Tool.DRAW_NODE:
            if self._node_at(x, y) is not None:
                return False
            self.graph.add_node(x, y)
            return True

        if tool is Tool.MOVE_NODE:
            node_id = self._node_at(x, y)
            self._drag_node = node_id
            return node_id is not None

        if tool is Tool.DELETE_NODE:
            node_id = self._node_at(x, y)
            if node_id is None:
                return False
            self.selection.forget_node(node_id)
            self.graph.delete_node(node_id)
            return True

        if tool is Tool.EDIT_EDGE:
            return self._edit_edge_at(x, y, weight)

        if tool is Tool.DELETE_EDGE:
            edge = self.graph.edge_at(x, y, EditorConfig.EDGE_PICK_TOLERANCE)
            if edge is None:
                return False
            self.graph.delete_edge(edge.id)
            return True

        if tool in (Tool.SELECT_START_NODE, Tool.SELECT_END_NODE):
            node_id = self._node_at(x, y)
            if node_id is None or not self.selection.is_selected:
                return False
            return self._pick_anchor(tool, node_id)

        if tool is None and self.edge_kind is not None:
            self._edge_from = self._node_at(x, y)
            return self._edge_from is not None

        return False

    @refuse_while_running
    def pointer_move(self, x: float, y: float) -> bool:
        if self.tool is Tool.MOVE_NODE and self._drag_node is not None:
            self.graph.move_node(self._drag_node, x, y)
            return True
        return False

    @refuse_while_running
    def pointer_up(self, x: float, y: float) -> bool:
        if self.tool is Tool.MOVE_NODE and self._drag_node is not None:
            self.graph.move_node(self._drag_node, x, y)
            self._drag_node = None
            return True

        if self._edge_from is not None and self.edge_kind is not None:
            source, self._edge_from = self._edge_from, None
            target = self._node_at(x, y)
            if target is None or target == source:
                return False
            weight = EditorConfig.DEFAULT_WEIGHT if self.edge_kind.is_weighted else None
            self.graph.add_or_replace_edge(source, target, self.edge_kind, weight)
            return True

        return False

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _node_at(self, x: float, y: float) -> Optional[str]:
        node = self.graph.node_at(x, y, EditorConfig.NODE_RADIUS)
        return node.id if node else None

    def _edit_edge_at(self, x: float, y: float, weight: Optional[float]) -> bool:
        edge = self.graph.edge_at(x, y, EditorConfig.EDGE_PICK_TOLERANCE)
        if edge is None or not edge.kind.is_weighted:
            return False
        if weight is None and self.weight_prompt is not None:
            weight = self.weight_prompt(edge)
        if weight is None:
            return False
        return self.graph.set_edge_weight(edge.id, weight) is not None

    def _pick_anchor(self, tool: Tool, node_id: str) -> bool:
        if tool is Tool.SELECT_START_NODE:
            self.selection.start = node_id
            self.surface.set_element_state(node_id, ElementState.START)
            self._marked = True
            if self.selection.anchors >= 2:
                self.tool = Tool.SELECT_END_NODE
        else:
            self.selection.end = node_id
            self.surface.set_element_state(node_id, ElementState.END)
            self._marked = True

        if self.selection.complete:
            self._run()
        return True

    def _run(self) -> None:
        sel = self.selection
        try:
            steps = algorithms.run(self.graph, sel.key, sel.start, sel.end)
        except NegativeWeight as exc:
            logger.warning("run rejected: %s", exc)
            self.last_error = str(exc)
            self.selection.clear()
            self.tool = None
            self._clear_marks()
            return

        self.last_run = summarize(self.graph, sel.key, steps)
        self.last_error = None
        self.tool = None
        logger.info(
            "running %s from %s%s: %d step(s)",
            sel.key, sel.start, f" to {sel.end}" if sel.end else "", len(steps),
        )
        self._marked = True
        self.scheduler.start(steps, self.speed_ms)

    def _on_running_changed(self, running: bool) -> None:
        if not running:
            self.selection.clear()

    def _reset_transients(self) -> None:
        self._drag_node = None
        self._edge_from = None

    def _clear_marks(self) -> None:
        if not self._marked:
            return
        for node_id in self.graph.node_ids():
            self.surface.set_element_state(node_id, ElementState.DEFAULT)
        for edge_id in self.graph.edge_ids():
            self.surface.set_element_state(edge_id, ElementState.DEFAULT)
        self._marked = False
