"""Annotation colors and a golden-angle palette to assign them from.

``Color`` is the value the color resolver and row builder pass around. The
palette is for upstream decoders that need distinct colors for sibling
fields: golden angle (137.508°) spacing in HSL keeps consecutively assigned
colors far apart on the wheel, so neighbouring fields never look alike.

Each color has two lightness levels:
  - Base (L≈0.40, S≈0.55): background of selected cells
  - Lighter (base L pushed 45% toward white): background of annotated,
    unselected cells
"""

from __future__ import annotations

import colorsys
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = 137.508

# Selection background for cells no annotation claims.
DEFAULT_HEX = "#4C566A"

_LIGHTER_FACTOR = 0.45


def _hsl_to_hex(h: float, s: float, lightness: float) -> str:
    """Convert HSL (h in 0-360, s/lightness in 0-1) to #RRGGBB hex string."""
    # colorsys uses h in 0-1
    r, g, b = colorsys.hls_to_rgb(h / 360.0, lightness, s)
    return "#{:02X}{:02X}{:02X}".format(
        int(round(r * 255)),
        int(round(g * 255)),
        int(round(b * 255)),
    )


def _hex_to_hsl(hex_color: str) -> tuple[float, float, float]:
    """Parse #RRGGBB to (H in 0-360, S in 0-1, L in 0-1)."""
    h_str = hex_color.lstrip("#")
    r, g, b = int(h_str[0:2], 16), int(h_str[2:4], 16), int(h_str[4:6], 16)
    h, lightness, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return (h * 360.0, s, lightness)


def _lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b by factor t."""
    return a + (b - a) * t


def _normalize_hex(value: str) -> str:
    """Canonical #RRGGBB for '#abc', 'abc', '#aabbcc' or 'aabbcc'."""
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError(f"not a hex color: {value!r}")
    try:
        int(digits, 16)
    except ValueError:
        raise ValueError(f"not a hex color: {value!r}") from None
    return "#" + digits.upper()


@dataclass(frozen=True)
class Color:
    """Display color of an annotation.

    The default sentinel means "no annotation color". It still carries a hex
    value so a selected, unannotated cell has something to paint with.
    """

    hex: str
    sentinel: bool = False

    @classmethod
    def parse(cls, value: str) -> Color:
        return cls(_normalize_hex(value))

    @classmethod
    def default(cls) -> Color:
        return DEFAULT_COLOR

    def is_default(self) -> bool:
        return self.sentinel

    def hex_lighter(self) -> str:
        """Lighter variant used behind annotated cells that are not selected."""
        h, s, lightness = _hex_to_hsl(self.hex)
        return _hsl_to_hex(h, s, _lerp(lightness, 1.0, _LIGHTER_FACTOR))


DEFAULT_COLOR = Color(DEFAULT_HEX, sentinel=True)


class Palette:
    """Annotation colors with golden-angle spacing from a seed hue.

    Args:
        seed_hue: Starting hue in degrees (0-360). Default 190 (cyan).
        count: Number of colors to generate. Default 38.
    """

    def __init__(self, seed_hue: float = 190.0, count: int = 38):
        self._seed_hue = seed_hue
        self._count = count

        self._hues: list[float] = []
        for i in range(count):
            hue = (seed_hue + i * GOLDEN_ANGLE) % 360
            self._hues.append(hue)

        self._colors: list[Color] = [Color(_hsl_to_hex(hue, 0.55, 0.40)) for hue in self._hues]

    def color(self, index: int) -> Color:
        """Annotation color at index (wraps)."""
        return self._colors[index % self._count]

    @property
    def seed_hue(self) -> float:
        return self._seed_hue


def _get_seed_hue() -> float:
    """Get seed hue from environment or default."""
    env = os.environ.get("BINVIEW_SEED_HUE")
    if env is not None:
        try:
            return float(env)
        except ValueError:
            logger.warning("invalid BINVIEW_SEED_HUE=%r, using default", env)
    return 190.0


def init_palette(seed_hue: float | None = None) -> None:
    """Initialize the global palette with a seed hue.

    Call this before the TUI starts if using --seed-hue CLI arg.
    """
    global PALETTE
    hue = seed_hue if seed_hue is not None else _get_seed_hue()
    PALETTE = Palette(seed_hue=hue)


# Module-level singleton; consumers import the module and read PALETTE
PALETTE = Palette(seed_hue=_get_seed_hue())
