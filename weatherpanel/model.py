from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from weatherpanel.config import ROW_OVERRIDE_KEYS, partial_directive

TEXT_ALIGNS = ("left", "center", "right")
OVERLAY_FITS = ("width", "height", "cover", "contain")


def _num(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _opt_num(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class Cell:
    type: str = "value"
    value: str = ""
    prefix: str = ""
    suffix: str = ""
    width: float = 0.0             # % of the group
    color: str = "blue"
    text_align: str = "center"
    gap: float = 0.0               # px of spacer after this cell
    overlay_image: Optional[str] = None
    overlay_opacity: float = 0.2
    overlay_fit: str = "contain"

    @property
    def is_text(self) -> bool:
        return self.type == "text"

    @property
    def has_gap(self) -> bool:
        return self.gap > 0

    @classmethod
    def from_dict(cls, raw: Any) -> "Cell":
        if not isinstance(raw, Mapping):
            return cls()
        align = raw.get("textAlign")
        fit = raw.get("cellOverlayFit")
        opacity = _opt_num(raw.get("cellOverlayOpacity"))
        image = raw.get("cellOverlayImage")
        return cls(
            type="text" if raw.get("type") == "text" else "value",
            value=_text(raw.get("value")),
            prefix=_text(raw.get("prefix")),
            suffix=_text(raw.get("suffix")),
            width=_num(raw.get("width")),
            color=raw.get("color") if isinstance(raw.get("color"), str) else "blue",
            text_align=align if align in TEXT_ALIGNS else "center",
            gap=_num(raw.get("gap")),
            overlay_image=image if isinstance(image, str) and image else None,
            # a zero opacity falls back too, matching `opacity || 0.2`
            overlay_opacity=opacity if opacity else 0.2,
            overlay_fit=fit if fit in OVERLAY_FITS else "contain",
        )


@dataclass(frozen=True)
class Group:
    width: float = 0.0             # % of the row
    cells: Tuple[Cell, ...] = ()
    entrance_animation: Optional[Dict[str, str]] = None
    exit_animation: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "Group":
        if not isinstance(raw, Mapping):
            return cls()
        cells = raw.get("cells")
        return cls(
            width=_num(raw.get("width")),
            cells=tuple(Cell.from_dict(c) for c in cells) if isinstance(cells, list) else (),
            entrance_animation=partial_directive(raw.get("entranceAnimation")),
            exit_animation=partial_directive(raw.get("exitAnimation")),
        )


@dataclass(frozen=True)
class Row:
    type: str = "data"
    groups: Tuple[Group, ...] = ()
    data_row_height: Optional[float] = None
    data_row_spacing: Optional[float] = None
    data_title_row_padding_top: Optional[float] = None
    data_title_row_padding_bottom: Optional[float] = None
    entrance_animation: Optional[Dict[str, str]] = None
    exit_animation: Optional[Dict[str, str]] = None
    # inline font/spacing keys exactly as sent, for config.resolve_row
    overrides: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_title(self) -> bool:
        return self.type == "title"

    @property
    def first_value(self) -> str:
        if self.groups and self.groups[0].cells:
            return self.groups[0].cells[0].value
        return ""

    @classmethod
    def from_dict(cls, raw: Any) -> "Row":
        if not isinstance(raw, Mapping):
            return cls()
        groups = raw.get("groups")
        return cls(
            type="title" if raw.get("type") == "title" else "data",
            groups=tuple(Group.from_dict(g) for g in groups) if isinstance(groups, list) else (),
            data_row_height=_opt_num(raw.get("dataRowHeight")),
            data_row_spacing=_opt_num(raw.get("dataRowSpacing")),
            data_title_row_padding_top=_opt_num(raw.get("dataTitleRowPaddingTop")),
            data_title_row_padding_bottom=_opt_num(raw.get("dataTitleRowPaddingBottom")),
            entrance_animation=partial_directive(raw.get("entranceAnimation")),
            exit_animation=partial_directive(raw.get("exitAnimation")),
            overrides={k: raw[k] for k in ROW_OVERRIDE_KEYS if k in raw},
        )


@dataclass(frozen=True)
class Payload:
    """One feed update. `Payload.from_dict(None)` is the hidden state."""
    present: bool = False
    config: Dict[str, Any] = field(default_factory=dict)
    rows: Tuple[Row, ...] = ()
    has_weather_data: bool = False
    title: str = ""
    subtitle: str = ""
    background_image: str = ""
    show_panel: bool = True

    @classmethod
    def from_dict(cls, raw: Any) -> "Payload":
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            return cls(present=True)
        weather = raw.get("weatherData")
        rows = weather.get("rows") if isinstance(weather, Mapping) else None
        config = raw.get("config")
        background = raw.get("backgroundImage")
        return cls(
            present=True,
            config=dict(config) if isinstance(config, Mapping) else {},
            rows=tuple(Row.from_dict(r) for r in rows) if isinstance(rows, list) else (),
            has_weather_data=weather is not None,
            title=_text(raw.get("title")),
            subtitle=_text(raw.get("subtitle")),
            background_image=background if isinstance(background, str) else "",
            show_panel=raw.get("showPanel") is not False,
        )

    @property
    def visible_rows(self) -> List[Row]:
        return [row for row in self.rows if row.groups]

    @property
    def panel_visible(self) -> bool:
        return self.present and self.show_panel and self.has_weather_data
