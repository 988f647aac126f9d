"""
config.py — Application Settings
=================================
Every tunable the editor, the playback engine and the web shell read.

Groups are plain classes with class attributes (same shape as the SVG
canvas palette) so callers can read `PlaybackConfig.DEFAULT_SPEED_MS`
without instantiating anything.  Server settings can be overridden from
the environment:

    GRAPH_VIZ_HOST       bind address           (default 127.0.0.1)
    GRAPH_VIZ_PORT       port                   (default 5000)
    GRAPH_VIZ_DEBUG      "1" / "true" → debug   (default off)
    GRAPH_VIZ_LOG_LEVEL  logging level name     (default INFO)
    GRAPH_VIZ_IDLE_SECS  workspace idle timeout (default 3600)
    GRAPH_VIZ_MAX_WS     workspaces kept alive  (default 256)
"""

import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ---------------------------------------------------------------------------
# Playback: delay between animation steps (milliseconds)
# ---------------------------------------------------------------------------
class PlaybackConfig:
    MIN_SPEED_MS:     int = 100
    MAX_SPEED_MS:     int = 1000
    SPEED_STEP_MS:    int = 100
    DEFAULT_SPEED_MS: int = 300

    @classmethod
    def normalize_speed(cls, speed_ms) -> int:
        """Clamp into [MIN, MAX] and snap to the slider grid."""
        value = int(round(float(speed_ms)))
        value = max(cls.MIN_SPEED_MS, min(cls.MAX_SPEED_MS, value))
        snapped = int(round(value / cls.SPEED_STEP_MS)) * cls.SPEED_STEP_MS
        return max(cls.MIN_SPEED_MS, min(cls.MAX_SPEED_MS, snapped))


# ---------------------------------------------------------------------------
# Editor: hit testing and defaults for freshly drawn elements
# ---------------------------------------------------------------------------
class EditorConfig:
    NODE_RADIUS:        float = 20.0    # a click within this distance hits the node
    EDGE_PICK_TOLERANCE: float = 8.0    # max distance from cursor to an edge segment
    DEFAULT_WEIGHT:     float = 1.0     # weight given to a newly drawn weighted edge
    INITIAL_TOOL:       str   = "draw_node"


# ---------------------------------------------------------------------------
# Server: Flask shell
# ---------------------------------------------------------------------------
class ServerConfig:
    HOST:      str  = os.environ.get("GRAPH_VIZ_HOST", "127.0.0.1")
    PORT:      int  = int(os.environ.get("GRAPH_VIZ_PORT", "5000"))
    DEBUG:     bool = _env_flag("GRAPH_VIZ_DEBUG")
    LOG_LEVEL: str  = os.environ.get("GRAPH_VIZ_LOG_LEVEL", "INFO").upper()

    # per-session workspaces are dropped after this much inactivity,
    # and the oldest go first once MAX_WORKSPACES is reached
    WORKSPACE_IDLE_SECONDS: float = float(os.environ.get("GRAPH_VIZ_IDLE_SECS", "3600"))
    MAX_WORKSPACES:         int   = int(os.environ.get("GRAPH_VIZ_MAX_WS", "256"))
