"""
Terminal Renderer - draws the navigable field list

One row per field, active row marked with ">" and bold:

    > [==========          ] brightness [128] (0-255)
      « on »                 auto focus
      « 60 hz »              power line frequency

render_lines() is pure; TerminalRenderer redraws the whole screen on every
SessionStateChangedEvent.
"""

import sys
from typing import List, Optional, TextIO

from models.enums import FieldType
from models.events import EventType, SessionStateChangedEvent
from models.field import BooleanField, Field, NumberField, SelectField
from services.event_bus import EventBus
from utils.logger import Colors, get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

CLEAR_SCREEN = "\033[2J\033[H"

FOOTER = "↑/k ↓/j select   ←/h →/l adjust   q quit"


def display_name(name: str) -> str:
    return name.replace("_", " ")


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _bar(fraction: float, cells: int) -> str:
    # Half-up rounding so a value halfway across a cell fills it
    filled = int(cells * fraction + 0.5)
    return ("=" * filled).ljust(cells)


def _number_row(field: NumberField, width: int) -> tuple:
    body = f"[{_bar(field.fraction, max(0, width - 2))}]"
    suffix = f" [{_format_number(field.value)}] ({_format_number(field.range.min)}-{_format_number(field.range.max)})"
    return body, suffix


def _boolean_row(field: BooleanField, width: int) -> tuple:
    body = f"« {'on' if field.is_on else 'off'} »".ljust(width)
    return body, ""


def _select_row(field: SelectField, width: int) -> tuple:
    label = field.active_label
    if label is None:
        text = f"? {field.value}"
    else:
        text = label.lower().replace("_", " ")
    return f"« {text} »".ljust(width), ""


def render_field(field: Field, is_active: bool, width: int = 24, use_colors: bool = True) -> Optional[str]:
    """
    One display row, or None for kinds that have no row (RANGE)
    """
    if field.type == FieldType.NUMBER:
        body, suffix = _number_row(field, width)
    elif field.type == FieldType.BOOLEAN:
        body, suffix = _boolean_row(field, width)
    elif field.type == FieldType.SELECT:
        body, suffix = _select_row(field, width)
    else:
        return None

    marker = ">" if is_active else " "
    main = f"{marker} {body} {display_name(field.name)}"
    if is_active and use_colors:
        main = f"{Colors.BOLD}{main}{Colors.RESET}"
    return main + suffix


def render_lines(fields: List[Field], active_index: int, width: int = 24, use_colors: bool = True) -> List[str]:
    """
    Build the screen content for a field list

    Args:
        fields: Navigable fields in display order
        active_index: Row carrying the marker
        width: Width of the value column (bar is width - 2 cells)
        use_colors: Bold the active row with ANSI codes

    Returns:
        Lines without trailing newlines, footer included
    """
    lines = []
    for index, field in enumerate(fields):
        row = render_field(field, index == active_index, width, use_colors)
        if row is not None:
            lines.append(row)

    if not lines:
        lines.append("  (no adjustable controls)")

    lines.append("")
    lines.append(f"{Colors.DIM}{FOOTER}{Colors.RESET}" if use_colors else FOOTER)
    return lines


class TerminalRenderer:
    """
    Redraws the control list on every session state change

    Example:
        renderer = TerminalRenderer(event_bus, width=config.ui.bar_width)
        # draws whenever ControlSession publishes SessionStateChangedEvent
    """

    def __init__(
        self,
        event_bus: EventBus,
        stream: Optional[TextIO] = None,
        width: int = 24,
        clear_screen: bool = True,
        use_colors: bool = True
    ):
        self.stream = stream or sys.stdout
        self.width = width
        self.clear_screen = clear_screen
        self.use_colors = use_colors
        self.frames = 0

        event_bus.subscribe(EventType.SESSION_STATE_CHANGED, self.on_state_changed)

    def on_state_changed(self, event: SessionStateChangedEvent) -> None:
        self.draw(event.fields, event.active_index)

    def draw(self, fields: List[Field], active_index: int) -> None:
        lines = render_lines(fields, active_index, self.width, self.use_colors)
        output = "\n".join(lines) + "\n"
        if self.clear_screen:
            output = CLEAR_SCREEN + output

        self.stream.write(output)
        self.stream.flush()
        self.frames += 1
        log.debug("Frame drawn", rows=len(fields), active_index=active_index)
