from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import Any, Optional

from weatherpanel.config import DEFAULT_CONFIG, parse_args, resolve
from weatherpanel.core.layout import describe
from weatherpanel.engine import OverlayEngine
from weatherpanel.images import ImageCache


def _read_json(path: str) -> Optional[Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        print(f"[weatherpanel] skipping {path}: {e}", flush=True)
        return None


def main(argv: list[str] | None = None) -> int:
    cfg = parse_args(argv)

    base = DEFAULT_CONFIG
    if cfg.config_path:
        override = _read_json(cfg.config_path)
        if isinstance(override, dict):
            base = resolve(DEFAULT_CONFIG, override)

    if cfg.dump_config and not cfg.payloads:
        print(json.dumps(base.to_dict(), indent=2))
        return 0

    images = ImageCache(user_agent=cfg.user_agent)
    engine = OverlayEngine(surface_width=cfg.width, default_config=base, loader=images.loader())

    canvas = None
    if not (cfg.dump_layout or cfg.dump_config):
        # Pillow only needed when actually rendering
        from weatherpanel.renderer.pillow_renderer import Canvas
        canvas = Canvas(cfg.width, cfg.height, font_path=cfg.font_path, images=images)
        Path(cfg.out_dir).mkdir(parents=True, exist_ok=True)

    step_ms = 1000.0 / cfg.fps
    frames_per_payload = max(1, int(round(cfg.seconds_per_payload * cfg.fps)))
    now_ms = 0.0
    frame_no = 0

    for path in cfg.payloads:
        raw = _read_json(path)
        panel = engine.update(raw, now_ms)
        if cfg.dump_config:
            print(json.dumps(engine.config.to_dict(), indent=2))
        if cfg.dump_layout:
            print(json.dumps({"payload": path, "panel": describe(panel)}, indent=2))
        if canvas is None:
            continue

        for _ in range(frames_per_payload):
            frame = engine.tick(now_ms)
            image = canvas.render(frame)
            out = Path(cfg.out_dir) / f"frame_{frame_no:05d}.png"
            try:
                image.save(out)
            except OSError as e:
                print(f"[weatherpanel] write failed: {e!r}", flush=True)
                return 1
            frame_no += 1
            now_ms += step_ms

    if canvas is not None:
        print(f"[weatherpanel] wrote {frame_no} frames to {cfg.out_dir}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
