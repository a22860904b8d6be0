from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from weatherpanel.config import AnimationDirective, OverlayConfig
from weatherpanel.model import Group, Row

Offset = Tuple[float, float]

SLIDE_DISTANCE = 250
ROW_DELAY_MS = 30
GROUP_DELAY_MS = 20

TOP_TO_BOTTOM = "top-to-bottom"
BOTTOM_TO_TOP = "bottom-to-top"


class Phase(str, Enum):
    ENTRANCE = "entrance"
    EXIT = "exit"


def as_phase(phase) -> Phase:
    """Phases come from our own code only; a bad one is a caller bug."""
    try:
        return Phase(phase)
    except ValueError:
        raise ValueError(f"Invalid animation phase: {phase!r}. Must be 'entrance' or 'exit'.") from None


# ---------- easing ----------

@dataclass(frozen=True)
class CubicBezier:
    """CSS-style cubic-bezier timing function through (0,0), p1, p2, (1,1)."""
    p1x: float
    p1y: float
    p2x: float
    p2y: float

    def _curve(self, t: float, a1: float, a2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * t * a1 + 3 * u * t * t * a2 + t * t * t

    def _slope(self, t: float, a1: float, a2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * a1 + 6 * u * t * (a2 - a1) + 3 * t * t * (1 - a2)

    def _solve_t(self, x: float) -> float:
        t = x
        for _ in range(8):
            err = self._curve(t, self.p1x, self.p2x) - x
            if abs(err) < 1e-6:
                return t
            d = self._slope(t, self.p1x, self.p2x)
            if abs(d) < 1e-6:
                break
            t -= err / d
        # Newton stalled; bisect
        lo, hi = 0.0, 1.0
        t = x
        for _ in range(50):
            cx = self._curve(t, self.p1x, self.p2x)
            if abs(cx - x) < 1e-6:
                break
            if cx < x:
                lo = t
            else:
                hi = t
            t = (lo + hi) / 2
        return t

    def __call__(self, progress: float) -> float:
        if progress <= 0:
            return 0.0
        if progress >= 1:
            return 1.0
        return self._curve(self._solve_t(progress), self.p1y, self.p2y)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.p1x, self.p1y, self.p2x, self.p2y)


ENTRANCE_EASE = CubicBezier(0, 0, 0.35, 1)     # arrival eases out
EXIT_EASE = CubicBezier(0.65, 0, 1, 1)         # departure snaps away
STANDARD_EASE = CubicBezier(0.25, 0.1, 0.25, 1)
TEXT_EXIT_EASE = CubicBezier(0.4, 0, 1, 1)

ENTRANCE_MS = 400
EXIT_MS = 300


# ---------- motion plans ----------

@dataclass(frozen=True)
class MotionPlan:
    from_offset: Offset
    to_offset: Offset
    from_opacity: float
    to_opacity: float
    duration_ms: float
    easing: CubicBezier
    delay_ms: float = 0

    @property
    def end_ms(self) -> float:
        return self.delay_ms + self.duration_ms

    def with_delay(self, delay_ms: float) -> "MotionPlan":
        return MotionPlan(
            self.from_offset, self.to_offset, self.from_opacity, self.to_opacity,
            self.duration_ms, self.easing, delay_ms,
        )

    def progress(self, t_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0 if t_ms >= self.delay_ms else 0.0
        p = (t_ms - self.delay_ms) / self.duration_ms
        return min(1.0, max(0.0, p))

    def at(self, t_ms: float) -> Tuple[float, float, float]:
        """(x, y, opacity) at `t_ms` after the plan started (delay included)."""
        k = self.easing(self.progress(t_ms))
        x = self.from_offset[0] + (self.to_offset[0] - self.from_offset[0]) * k
        y = self.from_offset[1] + (self.to_offset[1] - self.from_offset[1]) * k
        o = self.from_opacity + (self.to_opacity - self.from_opacity) * k
        return x, y, o

    def to_dict(self) -> dict:
        return {
            "fromOffset": list(self.from_offset),
            "toOffset": list(self.to_offset),
            "fromOpacity": self.from_opacity,
            "toOpacity": self.to_opacity,
            "durationMs": self.duration_ms,
            "easing": list(self.easing.as_tuple()),
            "delayMs": self.delay_ms,
        }


def direction_offset(direction: str, distance: float = SLIDE_DISTANCE) -> Offset:
    if direction == "right":
        return (distance, 0)
    if direction == "top":
        return (0, -distance)
    if direction == "bottom":
        return (0, distance)
    return (-distance, 0)


def motion_plan(direction: str, phase, delay_ms: float = 0) -> MotionPlan:
    """
    Entrance slides in from the direction's offset to rest; exit slides from
    rest out to the same offset (so 'right' exits toward the right).
    """
    phase = as_phase(phase)
    offset = direction_offset(direction)
    if phase is Phase.ENTRANCE:
        return MotionPlan(offset, (0, 0), 0.0, 1.0, ENTRANCE_MS, ENTRANCE_EASE, delay_ms)
    return MotionPlan((0, 0), offset, 1.0, 0.0, EXIT_MS, EXIT_EASE, delay_ms)


def text_motion_plan(phase) -> MotionPlan:
    """Header title/subtitle text swap."""
    phase = as_phase(phase)
    if phase is Phase.ENTRANCE:
        return MotionPlan((-100, 0), (0, 0), 0.0, 1.0, 500, STANDARD_EASE)
    return MotionPlan((0, 0), (100, 0), 1.0, 0.0, 400, TEXT_EXIT_EASE)


def panel_motion_plan(phase) -> MotionPlan:
    phase = as_phase(phase)
    if phase is Phase.ENTRANCE:
        return MotionPlan((0, 50), (0, 0), 0.0, 1.0, 500, STANDARD_EASE)
    return MotionPlan((0, 0), (0, 20), 1.0, 0.0, 500, STANDARD_EASE)


PANEL_RESIZE_MS = 600


@dataclass(frozen=True)
class Tween:
    """Scalar tween, used for the panel's animated height."""
    start: float
    end: float
    started_ms: float
    duration_ms: float = PANEL_RESIZE_MS
    easing: CubicBezier = STANDARD_EASE

    def at(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            return self.end
        p = min(1.0, max(0.0, (now_ms - self.started_ms) / self.duration_ms))
        return self.start + (self.end - self.start) * self.easing(p)

    def done(self, now_ms: float) -> bool:
        return now_ms >= self.started_ms + self.duration_ms


# ---------- stagger ----------

def row_delay_ms(index: int, total_rows: int, order: str) -> float:
    if order == BOTTOM_TO_TOP:
        return (total_rows - 1 - index) * ROW_DELAY_MS
    return index * ROW_DELAY_MS


def group_delay_ms(base_delay_ms: float, group_index: int) -> float:
    return base_delay_ms + group_index * GROUP_DELAY_MS


def resolve_directive(group: Optional[Group], row: Row, config: OverlayConfig, phase) -> AnimationDirective:
    """group override -> row override -> global config, field by field."""
    phase = as_phase(phase)
    if phase is Phase.ENTRANCE:
        directive = config.animation.entrance_animation.merged(row.entrance_animation)
        if group is not None:
            directive = directive.merged(group.entrance_animation)
    else:
        directive = config.animation.exit_animation.merged(row.exit_animation)
        if group is not None:
            directive = directive.merged(group.exit_animation)
    return directive


@dataclass(frozen=True)
class RowSchedule:
    entrance: Tuple[MotionPlan, ...]
    exit: Tuple[MotionPlan, ...]

    @property
    def entrance_end_ms(self) -> float:
        return max((p.end_ms for p in self.entrance), default=0)

    @property
    def exit_end_ms(self) -> float:
        return max((p.end_ms for p in self.exit), default=0)


def group_plan(group: Group, group_index: int, row: Row, index: int, total_rows: int,
               config: OverlayConfig, phase) -> MotionPlan:
    directive = resolve_directive(group, row, config, phase)
    base = row_delay_ms(index, total_rows, directive.start_from)
    return motion_plan(directive.direction, phase, group_delay_ms(base, group_index))


def schedule_row(row: Row, index: int, total_rows: int, config: OverlayConfig) -> RowSchedule:
    groups = row.groups
    return RowSchedule(
        entrance=tuple(
            group_plan(g, gi, row, index, total_rows, config, Phase.ENTRANCE) for gi, g in enumerate(groups)
        ),
        exit=tuple(
            group_plan(g, gi, row, index, total_rows, config, Phase.EXIT) for gi, g in enumerate(groups)
        ),
    )


def schedule(rows: Sequence[Row], config: OverlayConfig) -> Tuple[RowSchedule, ...]:
    total = len(rows)
    return tuple(schedule_row(row, i, total, config) for i, row in enumerate(rows))


# ---------- row-set identity ----------

def fingerprint(rows: Sequence[Row]) -> Tuple[str, ...]:
    """
    Coarse identity of a row set: the first cell value of each row's first
    group, in order. Only a change here replaces the whole set with an
    exit/entrance; edits to any other cell update in place without motion.
    """
    return tuple(row.first_value for row in rows)
