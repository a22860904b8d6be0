from __future__ import annotations
import argparse
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

DEFAULT_BACKGROUND = (
    "https://www.visitmelbourne.com/-/media/images/international/uk/"
    "great-ocean-road-trip/uk_great_ocean_road_drive_1150x863.jpg"
)

DIRECTIONS = ("left", "right", "top", "bottom")
ORDERS = ("top-to-bottom", "bottom-to-top")


# ---------- overlay configuration ----------

@dataclass(frozen=True)
class AnimationDirective:
    direction: str = "left"
    start_from: str = "top-to-bottom"

    def merged(self, raw: Any) -> "AnimationDirective":
        """Field-level override; invalid values are treated as absent."""
        if isinstance(raw, AnimationDirective):
            return raw
        if not isinstance(raw, Mapping):
            return self
        changes = {}
        direction = raw.get("direction")
        if direction in DIRECTIONS:
            changes["direction"] = direction
        start_from = raw.get("startFrom")
        if start_from in ORDERS:
            changes["start_from"] = start_from
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict:
        return {"direction": self.direction, "startFrom": self.start_from}


def partial_directive(raw: Any) -> dict | None:
    """Keep only the valid directive fields of a feed dict (None when nothing usable)."""
    if not isinstance(raw, Mapping):
        return None
    out = {}
    if raw.get("direction") in DIRECTIONS:
        out["direction"] = raw["direction"]
    if raw.get("startFrom") in ORDERS:
        out["startFrom"] = raw["startFrom"]
    return out or None


@dataclass(frozen=True)
class HeaderConfig:
    header_height: float = 110
    subheader_height: float = 40


@dataclass(frozen=True)
class PanelConfig:
    panel_width: float = 50       # % of surface width
    panel_padding: float = 2      # % of surface width, between cells and glass edge
    header_panel_gap: float = 80  # px below the subheader
    screen_margin: float = 10     # % safe area


@dataclass(frozen=True)
class RowsConfig:
    data_row_height: float = 80
    data_row_spacing: float = 20
    data_title_row_padding_top: float = 60     # unused on the first row
    data_title_row_padding_bottom: float = 20  # unused on the last row


@dataclass(frozen=True)
class FontsConfig:
    label_font_size: str = "2.2rem"
    value_font_size: str = "2.2rem"
    prefix_suffix_font_size: str = "1.4rem"
    title_row_font_size: str = "1.8rem"
    title_row_value_font_size: str = "1.8rem"


@dataclass(frozen=True)
class StylingConfig:
    cell_border_radius: float = 14
    background_image: str = DEFAULT_BACKGROUND


@dataclass(frozen=True)
class AnimationConfig:
    entrance_animation: AnimationDirective = field(default_factory=lambda: AnimationDirective("left", "top-to-bottom"))
    exit_animation: AnimationDirective = field(default_factory=lambda: AnimationDirective("right", "bottom-to-top"))


# wire key -> (attribute, accepted types)
_NUMBER = (int, float)
_FONT = (str, int, float)

SECTION_KEYS: dict[str, dict[str, tuple[str, tuple]]] = {
    "header": {
        "headerHeight": ("header_height", _NUMBER),
        "subheaderHeight": ("subheader_height", _NUMBER),
    },
    "panel": {
        "panelWidth": ("panel_width", _NUMBER),
        "panelPadding": ("panel_padding", _NUMBER),
        "headerPanelGap": ("header_panel_gap", _NUMBER),
        "screenMargin": ("screen_margin", _NUMBER),
    },
    "rows": {
        "dataRowHeight": ("data_row_height", _NUMBER),
        "dataRowSpacing": ("data_row_spacing", _NUMBER),
        "dataTitleRowPaddingTop": ("data_title_row_padding_top", _NUMBER),
        "dataTitleRowPaddingBottom": ("data_title_row_padding_bottom", _NUMBER),
    },
    "fonts": {
        "labelFontSize": ("label_font_size", _FONT),
        "valueFontSize": ("value_font_size", _FONT),
        "prefixSuffixFontSize": ("prefix_suffix_font_size", _FONT),
        "titleRowFontSize": ("title_row_font_size", _FONT),
        "titleRowValueFontSize": ("title_row_value_font_size", _FONT),
    },
    "styling": {
        "cellBorderRadius": ("cell_border_radius", _NUMBER),
        "backgroundImage": ("background_image", (str,)),
    },
}

# Row dicts may carry these keys directly; they override fonts and rows only.
ROW_OVERRIDE_SECTIONS = ("fonts", "rows")
ROW_OVERRIDE_KEYS = (
    "titleRowFontSize",
    "titleRowValueFontSize",
    "labelFontSize",
    "valueFontSize",
    "prefixSuffixFontSize",
    "dataTitleRowPaddingTop",
    "dataTitleRowPaddingBottom",
    "dataRowHeight",
)


def _valid(value: Any, types: tuple) -> bool:
    # bool is an int subclass but never a meaningful size
    return value is not None and not isinstance(value, bool) and isinstance(value, types)


def _merge_section(section, wire: str, raw: Any):
    if not isinstance(raw, Mapping):
        return section
    changes = {}
    for key, (attr, types) in SECTION_KEYS[wire].items():
        value = raw.get(key)
        if _valid(value, types):
            changes[attr] = value
    return replace(section, **changes) if changes else section


def _merge_animation(section: AnimationConfig, raw: Any) -> AnimationConfig:
    if not isinstance(raw, Mapping):
        return section
    return AnimationConfig(
        entrance_animation=section.entrance_animation.merged(raw.get("entranceAnimation")),
        exit_animation=section.exit_animation.merged(raw.get("exitAnimation")),
    )


@dataclass(frozen=True)
class OverlayConfig:
    header: HeaderConfig = field(default_factory=HeaderConfig)
    panel: PanelConfig = field(default_factory=PanelConfig)
    rows: RowsConfig = field(default_factory=RowsConfig)
    fonts: FontsConfig = field(default_factory=FontsConfig)
    styling: StylingConfig = field(default_factory=StylingConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)

    def to_dict(self) -> dict:
        out: dict[str, dict] = {}
        for wire, keys in SECTION_KEYS.items():
            section = getattr(self, wire)
            out[wire] = {key: getattr(section, attr) for key, (attr, _) in keys.items()}
        out["animation"] = {
            "entranceAnimation": self.animation.entrance_animation.to_dict(),
            "exitAnimation": self.animation.exit_animation.to_dict(),
        }
        return out


DEFAULT_CONFIG = OverlayConfig()


def resolve(
    default: OverlayConfig = DEFAULT_CONFIG,
    override: Mapping | None = None,
    row: Mapping | None = None,
) -> OverlayConfig:
    """
    Merge a feed's partial config over `default`, one level deep per section.
    Absent sections, unknown keys and values of the wrong type keep the default.
    When `row` is given its inline overrides are applied on top (fonts/rows only).
    """
    config = default
    if isinstance(override, Mapping) and override:
        changes = {}
        for wire in SECTION_KEYS:
            merged = _merge_section(getattr(config, wire), wire, override.get(wire))
            if merged is not getattr(config, wire):
                changes[wire] = merged
        animation = _merge_animation(config.animation, override.get("animation"))
        if animation != config.animation:
            changes["animation"] = animation
        if changes:
            config = replace(config, **changes)
    if row is not None:
        config = resolve_row(config, row)
    return config


def resolve_row(config: OverlayConfig, row: Mapping | None) -> OverlayConfig:
    """Apply a row's inline font/spacing keys on top of an already resolved config."""
    if not isinstance(row, Mapping):
        return config
    picked = {k: row[k] for k in ROW_OVERRIDE_KEYS if k in row}
    if not picked:
        return config
    changes = {}
    for wire in ROW_OVERRIDE_SECTIONS:
        merged = _merge_section(getattr(config, wire), wire, picked)
        if merged is not getattr(config, wire):
            changes[wire] = merged
    return replace(config, **changes) if changes else config


# ---------- command line ----------

@dataclass
class CliConfig:
    payloads: list[str]

    # Output surface
    width: int
    height: int
    fps: int
    seconds_per_payload: float

    # Destination
    out_dir: str
    font_path: str | None
    user_agent: str

    # Inspection modes
    dump_layout: bool = False
    dump_config: bool = False
    config_path: str | None = None


def parse_args(argv: list[str] | None = None) -> CliConfig:
    p = argparse.ArgumentParser("weatherpanel")
    p.add_argument("payloads", nargs="*", help="Feed payload JSON files, applied in order")

    out = p.add_argument_group("Output")
    out.add_argument("--w", "--width", dest="width", type=int, default=1920)
    out.add_argument("--h", "--height", dest="height", type=int, default=1080)
    out.add_argument("--fps", type=int, default=25, help="Frames rendered per second of timeline")
    out.add_argument("--seconds", dest="seconds_per_payload", type=float, default=2.0,
                     help="Timeline seconds rendered after each payload")
    out.add_argument("--out-dir", type=str, default="frames", help="Folder for rendered PNG frames")
    out.add_argument("--font", dest="font_path", type=str, default=None, help="TTF font for cell text")
    out.add_argument("--user-agent", type=str, default="WeatherPanel/1.0 (+contact)")

    insp = p.add_argument_group("Inspection")
    insp.add_argument("--config", dest="config_path", type=str, default=None,
                      help="JSON file with a base config override applied before each payload's own")
    insp.add_argument("--dump-layout", action="store_true", help="Print layout descriptors as JSON")
    insp.add_argument("--dump-config", action="store_true", help="Print the merged config as JSON")

    args = p.parse_args(argv)

    return CliConfig(
        payloads=list(args.payloads),
        width=max(1, args.width),
        height=max(1, args.height),
        fps=min(60, max(1, args.fps)),
        seconds_per_payload=max(0.0, args.seconds_per_payload),
        out_dir=args.out_dir,
        font_path=args.font_path,
        user_agent=args.user_agent,
        dump_layout=args.dump_layout,
        dump_config=args.dump_config,
        config_path=args.config_path,
    )
