from __future__ import annotations
from typing import Dict, Optional, Tuple

RGBA = Tuple[int, int, int, int]
# Vertical gradient: (top stop, bottom stop). None means no fill at all.
Fill = Optional[Tuple[RGBA, RGBA]]

TRANSPARENT = "clear"
DEFAULT_COLOR = "blue"


def _a(alpha: float) -> int:
    return int(round(alpha * 255))


def _grad(top: Tuple[int, int, int, float], bottom: Tuple[int, int, int, float]) -> Tuple[RGBA, RGBA]:
    return (top[0], top[1], top[2], _a(top[3])), (bottom[0], bottom[1], bottom[2], _a(bottom[3]))


COLOR_TABLE: Dict[str, Fill] = {
    "blue": _grad((60, 133, 255, 0.9), (0, 99, 179, 0.95)),
    "orange": _grad((232, 148, 0, 0.9), (254, 65, 2, 0.95)),
    "white": _grad((255, 255, 255, 0.95), (240, 240, 240, 0.95)),
    "white50": _grad((255, 255, 255, 0.5), (240, 240, 240, 0.5)),
    "white30": _grad((255, 255, 255, 0.3), (240, 240, 240, 0.3)),
    "darkblue": _grad((0, 34, 102, 0.95), (0, 17, 51, 0.95)),
    "red": _grad((239, 68, 68, 0.95), (185, 28, 28, 0.95)),
    "green": _grad((34, 197, 94, 0.95), (21, 128, 61, 0.95)),
    "yellow": _grad((250, 204, 21, 0.95), (217, 119, 6, 0.95)),
    "black": _grad((23, 23, 23, 0.95), (0, 0, 0, 0.95)),
    TRANSPARENT: None,

    # Team presets (used with a logo in cellOverlayImage)
    "nrl-broncos": _grad((124, 41, 79, 0.95), (92, 20, 49, 0.95)),
    "nrl-raiders": _grad((74, 189, 65, 0.95), (44, 141, 35, 0.95)),
    "nrl-bulldogs": _grad((30, 90, 159, 0.95), (0, 60, 119, 0.95)),
    "nrl-sharks": _grad((51, 146, 194, 0.95), (21, 106, 154, 0.95)),
    "nrl-dolphins": _grad((234, 48, 56, 0.95), (194, 8, 16, 0.95)),
    "nrl-titans": _grad((34, 145, 192, 0.95), (2, 105, 152, 0.95)),
    "nrl-seaeagles": _grad((124, 41, 79, 0.95), (92, 20, 49, 0.95)),
    "nrl-storm": _grad((109, 63, 160, 0.95), (69, 33, 120, 0.95)),
    "nrl-knights": _grad((30, 79, 135, 0.95), (0, 49, 95, 0.95)),
    "nrl-cowboys": _grad((32, 55, 84, 0.95), (6, 25, 50, 0.95)),
    "nrl-eels": _grad((30, 65, 134, 0.95), (0, 35, 94, 0.95)),
    "nrl-panthers": _grad((64, 67, 68, 0.95), (34, 37, 38, 0.95)),
    "nrl-rabbitohs": _grad((30, 79, 45, 0.95), (0, 49, 15, 0.95)),
    "nrl-dragons": _grad((215, 55, 64, 0.95), (175, 15, 24, 0.95)),
    "nrl-roosters": _grad((31, 65, 111, 0.95), (1, 35, 71, 0.95)),
    "nrl-warriors": _grad((41, 51, 129, 0.95), (11, 21, 89, 0.95)),
    "nrl-tigers": _grad((58, 58, 58, 0.95), (28, 28, 28, 0.95)),
}

DARK_INK: RGBA = (31, 41, 55, 255)    # #1f2937
LIGHT_INK: RGBA = (255, 255, 255, 255)
_DARK_INK_COLORS = ("white", "yellow", "white50", "white30")

# Chrome
HEADER_FILL = _grad((30, 58, 138, 0.85), (0, 21, 64, 1.0))
SUBHEADER_FILL: RGBA = (252, 252, 252, _a(0.85))
GLASS_FILL: RGBA = (187, 187, 188, _a(0.08))
GLASS_EDGE: RGBA = (255, 255, 255, _a(0.15))
PAGE_BACKGROUND: RGBA = (0, 0, 0, 255)


def is_transparent(key: str) -> bool:
    return key == TRANSPARENT


def fill_for(key: str) -> Fill:
    """Gradient for a color key; unknown keys get the default blue."""
    if key in COLOR_TABLE:
        return COLOR_TABLE[key]
    return COLOR_TABLE[DEFAULT_COLOR]


def text_color_for(key: str) -> RGBA:
    if key in _DARK_INK_COLORS:
        return DARK_INK
    return LIGHT_INK
