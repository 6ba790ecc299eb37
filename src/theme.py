"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Dark mode (the saved display preference) uses the palette as configured;
  light mode darkens it so pastel columns stay readable on a light terminal.
- Priority badges follow the board's red / yellow / green scheme.
"""
from __future__ import annotations
import os, sys
from typing import Dict, Mapping, Optional

from config import DEFAULT_PALETTE

PRIORITY_HEX: Dict[str, str] = {
    'high': '#EF4444',
    'medium': '#EAB308',
    'low': '#22C55E',
}
LIGHT_MODE_SHADE = 0.45


def _code(part: str) -> str:
    return f"\033[{part}m"

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _shade(hex_code: str, ratio: float) -> str:
    """Darken a hex color towards black by ratio (0..1)."""
    r, g, b = _hex_to_rgb(hex_code)
    keep = 1 - max(0.0, min(1.0, ratio))
    return '#%02X%02X%02X' % (int(r * keep), int(g * keep), int(b * keep))

def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def detect_color(force: bool = False, no_color: bool = False, stream=None) -> bool:
    stream = stream if stream is not None else sys.stdout
    return (force or stream.isatty()) and not no_color

def detect_truecolor() -> bool:
    colorterm = os.environ.get("COLORTERM", "").lower()
    return any(tok in colorterm for tok in ("truecolor", "24bit"))


class Theme:
    def __init__(self,
                 palette: Optional[Mapping[str, str]] = None,
                 dark: bool = False,
                 enabled: bool = True,
                 truecolor: bool = False):
        self.palette: Dict[str, str] = dict(DEFAULT_PALETTE)
        if palette:
            self.palette.update(palette)
        self.enabled = enabled
        self.truecolor = truecolor
        self.dark = dark

    @property
    def dark(self) -> bool:
        return self._dark

    @dark.setter
    def dark(self, value: bool) -> None:
        self._dark = bool(value)
        self._build()

    def _build(self) -> None:
        self.RESET = self._style('0')
        self.BOLD = self._style('1')
        self.DIM = self._style('2')
        self.REVERSE = self._style('7')
        primary = self._from_hex(self._mode_hex(self.palette['KANBAN_PRIMARY']))
        self.HEADER_COLOR = primary
        self.ID_COLOR = primary + self.BOLD
        self.EMPTY_COLOR = self.DIM + primary
        self.COLUMN_COLOR: Dict[str, str] = {
            'todo': self._from_hex(self._mode_hex(self.palette['KANBAN_TODO'])),
            'in-progress': self._from_hex(self._mode_hex(self.palette['KANBAN_INPROGRESS'])),
            'done': self._from_hex(self._mode_hex(self.palette['KANBAN_DONE'])),
        }
        self.PRIORITY_COLOR: Dict[str, str] = {
            name: self._from_hex(hex_code) + self.BOLD for name, hex_code in PRIORITY_HEX.items()
        }

    def _mode_hex(self, hex_code: str) -> str:
        return hex_code if self._dark else _shade(hex_code, LIGHT_MODE_SHADE)

    def _style(self, part: str) -> str:
        return _code(part) if self.enabled else ''

    def _from_hex(self, hex_code: str) -> str:
        if not self.enabled:
            return ''
        r, g, b = _hex_to_rgb(hex_code)
        if self.truecolor:
            return _fg_truecolor(r, g, b)
        return _fg_256(r, g, b)

    def toggle(self) -> bool:
        self.dark = not self.dark
        return self.dark

    def color(self, text: str, *styles: str) -> str:
        """Apply ANSI styles to a given text."""
        if not self.enabled or not any(styles):
            return text
        return ''.join(styles) + text + self.RESET

    @classmethod
    def from_settings(cls, settings, dark: bool = False) -> "Theme":
        return cls(
            palette=settings.palette,
            dark=dark,
            enabled=detect_color(settings.force_color, settings.no_color),
            truecolor=detect_truecolor(),
        )
