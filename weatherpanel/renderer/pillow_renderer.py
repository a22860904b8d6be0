from __future__ import annotations
from PIL import Image, ImageDraw, ImageFont
import numpy as np
from pathlib import Path
from functools import lru_cache
from typing import Optional

from weatherpanel.colors import (
    DARK_INK, GLASS_EDGE, GLASS_FILL, HEADER_FILL, LIGHT_INK, SUBHEADER_FILL, Fill,
)
from weatherpanel.core.geometry import percent_of
from weatherpanel.core.layout import CellLayout, GroupLayout, PanelLayout, overlay_size
from weatherpanel.core.timeline import ENTERING, EXITING
from weatherpanel.engine import Frame
from weatherpanel.images import ImageCache

TITLE_FONT_PX = 48      # 3rem
SUBTITLE_FONT_PX = 24   # 1.5rem
PANEL_RADIUS = 32


# ---------- font helpers ----------
def _font_candidates(preferred: str | None, bold: bool) -> list[Path]:
    candidates: list[Path] = []
    if preferred:
        candidates.append(Path(preferred))

    here = Path(__file__).resolve()
    names = ["Roboto-Bold.ttf", "Inter-Bold.ttf"] if bold else []
    names += ["Roboto-Regular.ttf", "Inter-Regular.ttf"]
    # Try repo assets
    for up in range(1, 5):
        for name in names:
            candidates.append(here.parents[up - 1] / "assets" / "fonts" / name)

    candidates += [
        Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf" if bold else
             "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
        Path("/Library/Fonts/Arial.ttf"),
        Path("/System/Library/Fonts/Supplemental/Arial.ttf"),
    ]
    return candidates


@lru_cache(maxsize=64)
def _load_font(preferred: str | None, size: int, bold: bool = False):
    for p in _font_candidates(preferred, bold):
        try:
            if p.exists():
                return ImageFont.truetype(str(p), size=size)
        except OSError:
            continue

    print("[weatherpanel] WARNING: No TTF font found; using ImageFont.load_default()", flush=True)
    return ImageFont.load_default()


# ---------- paint helpers ----------
def vertical_gradient(size: tuple[int, int], fill: Fill) -> Optional[Image.Image]:
    """RGBA image filled top-to-bottom between the two stops of `fill`."""
    w, h = size
    if fill is None or w <= 0 or h <= 0:
        return None
    top, bottom = (np.array(c, dtype=np.float32) for c in fill)
    k = np.linspace(0.0, 1.0, h, dtype=np.float32)[:, None]
    column = top[None, :] * (1 - k) + bottom[None, :] * k
    arr = np.repeat(column[:, None, :], w, axis=1)
    return Image.fromarray(np.clip(arr + 0.5, 0, 255).astype(np.uint8), "RGBA")


def rounded_mask(size: tuple[int, int], corners) -> Image.Image:
    mask = Image.new("L", size, 0)
    d = ImageDraw.Draw(mask)
    radius = int(round(max(corners.as_tuple())))
    flags = tuple(bool(c) for c in corners.as_tuple())
    if radius <= 0:
        d.rectangle((0, 0, size[0] - 1, size[1] - 1), fill=255)
    else:
        d.rounded_rectangle((0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255, corners=flags)
    return mask


def fade(im: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1:
        return im
    alpha = im.getchannel("A").point(lambda a: int(a * max(0.0, opacity)))
    out = im.copy()
    out.putalpha(alpha)
    return out


def cover(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    w, h = size
    s = max(w / image.width, h / image.height)
    scaled = image.resize((max(1, int(image.width * s + 0.5)), max(1, int(image.height * s + 0.5))), Image.LANCZOS)
    x = (scaled.width - w) // 2
    y = (scaled.height - h) // 2
    return scaled.crop((x, y, x + w, y + h))


# ---------- canvas ----------
class Canvas:
    """Pillow render surface for OverlayEngine frames."""

    def __init__(self, width: int, height: int, font_path: str | None = None, images: ImageCache | None = None):
        self.width = width
        self.height = height
        self.font_path = font_path
        self.images = images or ImageCache()
        self._clear_color = (0, 0, 0, 0)
        self._page_color = (0, 0, 0, 255)
        self.img = Image.new("RGBA", (width, height), self._clear_color)
        self.draw = ImageDraw.Draw(self.img, "RGBA")
        self._bg_key: str | None = None
        self._bg_scaled: Image.Image | None = None

    def reset(self) -> None:
        """Clear this surface WITHOUT reallocating."""
        self.img.paste(self._clear_color, (0, 0, self.width, self.height))
        self.draw = ImageDraw.Draw(self.img, "RGBA")

    def font(self, size: float, bold: bool = False):
        return _load_font(self.font_path, max(1, int(round(size))), bold)

    # -- page -----------------------------------------------------------
    def render(self, frame: Frame) -> Image.Image:
        self.reset()
        if not frame.visible:
            return self.img
        self.img.paste(self._page_color, (0, 0, self.width, self.height))
        self._background(frame)
        self._header(frame)
        self._panel(frame)
        return self.img

    def _background(self, frame: Frame) -> None:
        image = frame.background_image
        if image is None:
            return
        if self._bg_key != frame.background or self._bg_scaled is None:
            self._bg_scaled = cover(image, (self.width, self.height))
            self._bg_key = frame.background
        self.img.alpha_composite(self._bg_scaled)

    def _header(self, frame: Frame) -> None:
        cfg = frame.config
        head_h = int(round(cfg.header.header_height))
        sub_h = int(round(cfg.header.subheader_height))
        margin = percent_of(self.width, cfg.panel.screen_margin)

        band = vertical_gradient((self.width, head_h), HEADER_FILL)
        if band is not None:
            self.img.alpha_composite(band, dest=(0, 0))
        if sub_h > 0:
            self.img.alpha_composite(Image.new("RGBA", (self.width, sub_h), SUBHEADER_FILL), dest=(0, head_h))

        text, dx, opacity = frame.title
        self._line(text, margin + dx, 0, head_h, self.font(TITLE_FONT_PX, bold=True), LIGHT_INK, opacity)
        text, dx, opacity = frame.subtitle
        self._line(text, margin + dx, head_h, sub_h, self.font(SUBTITLE_FONT_PX, bold=True), DARK_INK, opacity)

    def _line(self, text: str, x: float, top: int, band_h: int, font, fill, opacity: float) -> None:
        if not text or opacity <= 0 or band_h <= 0:
            return
        box = self.draw.textbbox((0, 0), text, font=font)
        y = top + (band_h - (box[3] - box[1])) / 2 - box[1]
        layer = Image.new("RGBA", self.img.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).text((x, y), text, font=font, fill=fill)
        self.img.alpha_composite(fade(layer, opacity))

    # -- panel ----------------------------------------------------------
    def _panel(self, frame: Frame) -> None:
        panel = frame.rows.panel
        dy, opacity = frame.panel_offset
        if panel is None or opacity <= 0:
            return
        box = panel.box
        pad = box.padding
        w = int(round(box.width))
        h = int(round(frame.rows.panel_height + 2 * pad))
        if w <= 0 or h <= 0:
            return

        layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        d = ImageDraw.Draw(layer, "RGBA")
        d.rounded_rectangle((0, 0, w - 1, h - 1), radius=PANEL_RADIUS, fill=GLASS_FILL, outline=GLASS_EDGE)

        content = Image.new("RGBA", (max(1, int(round(box.width - 2 * pad))), max(1, h - int(2 * pad))), (0, 0, 0, 0))
        self._rows(content, panel, frame.rows.phase, frame.rows.elapsed_ms)
        layer.alpha_composite(content, dest=(int(round(pad)), int(round(pad))))

        # overflow hidden on the rounded glass
        clip = Image.new("L", (w, h), 0)
        ImageDraw.Draw(clip).rounded_rectangle((0, 0, w - 1, h - 1), radius=PANEL_RADIUS, fill=255)
        layer.putalpha(Image.composite(layer.getchannel("A"), clip, clip))
        self.img.alpha_composite(fade(layer, opacity), dest=(int(round(box.x)), int(round(box.y + dy))))

    def _rows(self, target: Image.Image, panel: PanelLayout, phase: str, elapsed_ms: float) -> None:
        for row in panel.rows:
            y = row.box.box_top
            for group in row.groups:
                if phase == EXITING:
                    dx, dy, o = group.exit.at(elapsed_ms)
                elif phase == ENTERING:
                    dx, dy, o = group.entrance.at(elapsed_ms)
                else:
                    dx, dy, o = 0.0, 0.0, 1.0
                if o <= 0:
                    continue
                im = self._group(group, row.box.height, row.is_title)
                if im is None:
                    continue
                _paste_clipped(target, fade(im, o), int(round(group.x + dx)), int(round(y + dy)))

    def _group(self, group: GroupLayout, height: float, title: bool) -> Optional[Image.Image]:
        w, h = int(round(group.width)), int(round(height))
        if w <= 0 or h <= 0:
            return None
        im = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        for cell in group.cells:
            tile = self._cell(cell, title)
            if tile is not None:
                _paste_clipped(im, tile, int(round(cell.x)), 0)
        return im

    def _cell(self, cell: CellLayout, title: bool) -> Optional[Image.Image]:
        size = (int(round(cell.width)), int(round(cell.height)))
        if size[0] <= 0 or size[1] <= 0:
            return None
        tile = vertical_gradient(size, cell.fill)
        if tile is None:
            tile = Image.new("RGBA", size, (0, 0, 0, 0))

        if cell.overlay is not None:
            logo = self.images.load(cell.overlay.image)
            if logo is not None:
                ax, ay, aw, ah = cell.overlay.area
                lw, lh = overlay_size(logo.width, logo.height, aw, ah, cell.overlay.fit)
                if lw >= 1 and lh >= 1:
                    scaled = fade(logo.resize((int(lw), int(lh)), Image.LANCZOS), cell.overlay.opacity)
                    _paste_clipped(tile, scaled, int(ax + (aw - lw) / 2), int(ay + (ah - lh) / 2))

        self._cell_text(tile, cell, title)

        if cell.shadow:
            # inset hairline
            edge = Image.new("RGBA", size, (0, 0, 0, 0))
            ImageDraw.Draw(edge).rectangle((0, 0, size[0] - 1, size[1] - 1), outline=(255, 255, 255, 26))
            tile.alpha_composite(edge)
        mask = rounded_mask(size, cell.corners)
        tile.putalpha(Image.composite(tile.getchannel("A"), mask, mask))
        return tile

    def _cell_text(self, tile: Image.Image, cell: CellLayout, title: bool) -> None:
        d = ImageDraw.Draw(tile, "RGBA")
        main = self.font(cell.font_px, bold=True)
        small = self.font(cell.prefix_font_px, bold=False)
        # (text, font, margin before, margin after); affixes sit 0.25rem off the value
        parts = []
        if cell.cell.prefix:
            parts.append((cell.cell.prefix, small, 0, 4))
        parts.append((cell.cell.value, main, 0, 0))
        if cell.cell.suffix:
            parts.append((cell.cell.suffix, small, 4, 0))

        widths = [before + d.textlength(text, font=font) + after for text, font, before, after in parts]
        total = sum(widths)
        inner = tile.width - 2 * cell.padding_x
        if cell.text_align == "left":
            x = cell.padding_x
        elif cell.text_align == "right":
            x = cell.padding_x + inner - total
        else:
            x = cell.padding_x + (inner - total) / 2

        for (text, font, before, _), w in zip(parts, widths):
            if not text:
                x += w
                continue
            box = d.textbbox((0, 0), text, font=font)
            y = (tile.height - (box[3] - box[1])) / 2 - box[1]
            if title:
                d.text((x + before, y + 2), text, font=font, fill=(0, 0, 0, 77))
            d.text((x + before, y), text, font=font, fill=cell.text_color)
            x += w

    # -- export ---------------------------------------------------------
    def to_ndarray(self):
        return np.array(self.img, dtype=np.uint8)

    def to_bytes(self) -> bytes:
        """Return the raw RGBA bytes for streaming without an intermediate ndarray."""
        return self.img.tobytes()


def _paste_clipped(dst: Image.Image, src: Image.Image, x: int, y: int) -> None:
    """alpha_composite that tolerates sources hanging off any edge."""
    left, top = max(0, x), max(0, y)
    right, bottom = min(dst.width, x + src.width), min(dst.height, y + src.height)
    if right <= left or bottom <= top:
        return
    piece = src.crop((left - x, top - y, right - x, bottom - y))
    dst.alpha_composite(piece, dest=(left, top))
