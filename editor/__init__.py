"""
editor/
-------
Graph-editing state machine.

    from editor import ToolModeController, Tool
"""

from editor.tools      import Tool, AlgorithmSelection, tool_flags
from editor.controller import ToolModeController

__all__ = [
    "Tool",
    "AlgorithmSelection",
    "tool_flags",
    "ToolModeController",
]
