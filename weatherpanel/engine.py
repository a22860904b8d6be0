from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from weatherpanel.config import DEFAULT_CONFIG, OverlayConfig, resolve
from weatherpanel.core.crossfade import BackgroundCrossfade, Loader
from weatherpanel.core.layout import PanelLayout, build_panel
from weatherpanel.core.timeline import PanelPresence, RowTransitions, RowsFrame, TextSwap
from weatherpanel.model import Payload


@dataclass(frozen=True)
class Frame:
    visible: bool
    config: OverlayConfig
    rows: RowsFrame
    title: Tuple[str, float, float]
    subtitle: Tuple[str, float, float]
    panel_offset: Tuple[float, float]   # (y, opacity)
    background: str
    background_image: Any


class OverlayEngine:
    """
    Feed updates in, frames out. Single threaded: call update() for every
    payload and tick() once per rendered frame, with a monotonic clock in ms.
    """

    def __init__(self, surface_width: float = 1920, default_config: OverlayConfig = DEFAULT_CONFIG,
                 loader: Optional[Loader] = None):
        self.surface_width = surface_width
        self.default_config = default_config
        self.loader = loader
        self.config = default_config
        self.payload = Payload.from_dict(None)
        self.panel: Optional[PanelLayout] = None
        self.background: Optional[BackgroundCrossfade] = None
        self.rows = RowTransitions(on_exit_complete=self.on_exit_complete)
        self.title = TextSwap()
        self.subtitle = TextSwap()
        self.presence = PanelPresence()

    @property
    def visible(self) -> bool:
        """No payload at all hides the page, unlike an empty one."""
        return self.payload.present

    def on_exit_complete(self) -> None:
        if self.background is not None:
            self.background.on_exit_complete()

    def update(self, raw: Optional[Mapping], now_ms: float = 0.0) -> PanelLayout:
        payload = Payload.from_dict(raw)
        self.payload = payload
        self.config = resolve(self.default_config, payload.config)

        # settle exits that ran out since the last frame before a new request lands
        self.rows.tick(now_ms)

        url = payload.background_image or self.config.styling.background_image or ""
        if self.background is None:
            self.background = BackgroundCrossfade(url, loader=self.loader)
        else:
            self.background.request(url)

        panel = build_panel(payload.rows, self.config, self.surface_width, show=payload.panel_visible)
        self.panel = panel
        shown_before = self.rows.latest
        self.rows.update(panel, now_ms)
        if not panel.has_content and (shown_before is None or not shown_before.has_content):
            self.background.commit_if_no_content(False)

        self.title.update(payload.title, now_ms)
        self.subtitle.update(payload.subtitle, now_ms)
        self.presence.set_visible(payload.panel_visible, now_ms)
        return panel

    def tick(self, now_ms: float) -> Frame:
        rows = self.rows.tick(now_ms)
        bg = self.background
        return Frame(
            visible=self.visible,
            config=self.config,
            rows=rows,
            title=self.title.at(now_ms),
            subtitle=self.subtitle.at(now_ms),
            panel_offset=self.presence.at(now_ms),
            background=bg.current if bg else "",
            background_image=bg.current_image if bg else None,
        )
