from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from weatherpanel.core.layout import PanelLayout
from weatherpanel.core.motion import (
    MotionPlan, Phase, Tween, panel_motion_plan, text_motion_plan,
)

IDLE = "idle"
EXITING = "exiting"
ENTERING = "entering"


@dataclass(frozen=True)
class RowsFrame:
    phase: str
    panel: Optional[PanelLayout]   # the set to draw right now
    elapsed_ms: float              # time since this phase started
    panel_height: float            # animated content height


class RowTransitions:
    """
    Row-set lifecycle on the render side. A new fingerprint makes the shown
    set run its exit plans; the new set enters only once that exit is over,
    and `on_exit_complete` fires exactly once per exit.
    """

    def __init__(self, on_exit_complete: Optional[Callable[[], None]] = None):
        self.on_exit_complete = on_exit_complete
        self.current: Optional[PanelLayout] = None
        self.outgoing: Optional[PanelLayout] = None
        self.incoming: Optional[PanelLayout] = None
        self.phase = IDLE
        self.phase_started_ms = 0.0
        self.height: Optional[Tween] = None
        self.exits_completed = 0

    @property
    def latest(self) -> Optional[PanelLayout]:
        """Most recently resolved set, whether or not it is on screen yet."""
        if self.incoming is not None:
            return self.incoming
        return self.current

    def _retarget_height(self, panel: PanelLayout, now_ms: float) -> None:
        start = self.height.at(now_ms) if self.height else panel.height
        if self.height is None or self.height.end != panel.height:
            self.height = Tween(start, panel.height, now_ms)

    def update(self, panel: PanelLayout, now_ms: float) -> bool:
        """Feed a freshly built layout. Returns True when a set transition started."""
        self.tick(now_ms)
        latest = self.latest
        self._retarget_height(panel, now_ms)

        if latest is not None and latest.fingerprint == panel.fingerprint:
            # same identity: refresh values in place, no motion
            if self.incoming is not None:
                self.incoming = panel
            else:
                self.current = panel
            return False

        if latest is None:
            # first set ever shown appears at rest
            self.current = panel
            self.phase = IDLE
            return False

        if self.phase == EXITING:
            # still leaving: swap the target, keep the running exit
            self.incoming = panel
            return True

        self.outgoing = self.current
        self.current = None
        self.incoming = panel
        self.phase = EXITING
        self.phase_started_ms = now_ms
        if self.outgoing is None or not self.outgoing.has_content:
            self._finish_exit(now_ms)
        return True

    def _finish_exit(self, at_ms: float) -> None:
        self.outgoing = None
        self.current = self.incoming
        self.incoming = None
        self.phase = ENTERING
        self.phase_started_ms = at_ms
        self.exits_completed += 1
        if self.on_exit_complete is not None:
            self.on_exit_complete()

    def tick(self, now_ms: float) -> RowsFrame:
        if self.phase == EXITING and self.outgoing is not None:
            done_at = self.phase_started_ms + self.outgoing.exit_end_ms
            if now_ms >= done_at:
                self._finish_exit(done_at)
        if self.phase == ENTERING:
            if self.current is None or now_ms >= self.phase_started_ms + self.current.entrance_end_ms:
                self.phase = IDLE

        shown = self.outgoing if self.phase == EXITING else self.current
        height = self.height.at(now_ms) if self.height else 0.0
        return RowsFrame(self.phase, shown, max(0.0, now_ms - self.phase_started_ms), height)


class TextSwap:
    """Header text that slides out before the replacement slides in."""

    def __init__(self, text: str = ""):
        self.text = text
        self.next_text: Optional[str] = None
        self.phase = IDLE
        self.started_ms = 0.0
        self.enter = text_motion_plan(Phase.ENTRANCE)
        self.exit = text_motion_plan(Phase.EXIT)

    def update(self, text: str, now_ms: float) -> None:
        self.at(now_ms)
        target = self.next_text if self.next_text is not None else self.text
        if text == target:
            return
        if self.phase == EXITING:
            self.next_text = text
            return
        if not self.text:
            # nothing on screen to slide out
            self.text = text
            self.phase = ENTERING
            self.started_ms = now_ms
            return
        self.next_text = text
        self.phase = EXITING
        self.started_ms = now_ms

    def at(self, now_ms: float) -> Tuple[str, float, float]:
        """(text, x offset, opacity)"""
        if self.phase == EXITING and now_ms >= self.started_ms + self.exit.end_ms:
            self.started_ms += self.exit.end_ms
            self.text = self.next_text or ""
            self.next_text = None
            self.phase = ENTERING
        if self.phase == ENTERING and now_ms >= self.started_ms + self.enter.end_ms:
            self.phase = IDLE
        if self.phase == EXITING:
            x, _, o = self.exit.at(now_ms - self.started_ms)
        elif self.phase == ENTERING:
            x, _, o = self.enter.at(now_ms - self.started_ms)
        else:
            x, o = 0.0, 1.0
        return self.text, x, o


class PanelPresence:
    """Glass panel fade/slide when `showPanel` flips."""

    def __init__(self, visible: bool = False):
        self.visible = visible
        self.plan: Optional[MotionPlan] = None
        self.started_ms = 0.0

    def set_visible(self, visible: bool, now_ms: float) -> None:
        if visible == self.visible:
            return
        self.visible = visible
        self.plan = panel_motion_plan(Phase.ENTRANCE if visible else Phase.EXIT)
        self.started_ms = now_ms

    def at(self, now_ms: float) -> Tuple[float, float]:
        """(y offset, opacity); opacity 0 means nothing to draw."""
        if self.plan is None:
            return 0.0, 1.0 if self.visible else 0.0
        _, y, o = self.plan.at(now_ms - self.started_ms)
        return y, o
