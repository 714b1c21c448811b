"""Terminal user interface"""

from .terminal_renderer import TerminalRenderer, render_field, render_lines

__all__ = ["TerminalRenderer", "render_field", "render_lines"]
