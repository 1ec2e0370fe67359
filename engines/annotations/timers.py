"""
Timer resolver.

Replays create/start/pause/adjust/skip actions up to a playback time and
renders each timer's elapsed (or remaining) value. Nothing ticks: a timer that
is running at the cutoff is simply measured from its last start to the cutoff.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from engines.annotations.action_log import effective_actions, normalize_time, record_diagnostic
from engines.annotations.models import TIMER_ACTION_TYPES

DEFAULT_STEP_MS = 1000


@dataclass
class TimerState:
    """Per-timer accumulator for a single fold. All values in ms."""
    is_started: bool
    current_interval_time: float
    total: float
    format: str
    step: float
    direction: str
    cap: Optional[float]

    @property
    def sign(self) -> int:
        return 1 if self.direction == "up" else -1

    def seconds(self) -> float:
        value_ms = self.total + self.current_interval_time * self.sign
        if self.cap:
            value_ms = min(value_ms, self.cap) if self.direction == "up" else max(value_ms, self.cap)
        if self.step and math.isfinite(value_ms):
            # float noise from the seconds cutoff must not cost a whole step
            value_ms = round(value_ms, 3)
            remainder = math.fmod(value_ms, self.step)
            if remainder:
                value_ms -= remainder
        return value_ms / 1000


def format_timer(seconds: Optional[float] = 0, fmt: str = "s") -> str:
    """``ms`` renders MM:SS, ``s`` renders whole seconds. Non-finite -> "0"."""
    if seconds is None or not math.isfinite(seconds):
        return "0"
    seconds = max(seconds, 0)
    secs = int(math.floor(seconds % 60))
    minutes = int(math.floor(seconds / 60))

    if fmt == "ms":
        if minutes > 9:
            prefix = f"{minutes}:"
        elif minutes > 0:
            prefix = f"0{minutes}:"
        else:
            prefix = "00:"
        return prefix + (str(secs) if secs > 9 else f"0{secs}")
    return str(minutes * 60 + secs)


def resolve_timers(
    actions: Optional[Iterable[Any]],
    current_time: float,
    diagnostics: Optional[List[str]] = None,
) -> Dict[str, str]:
    """Timer name -> formatted value as of ``current_time`` (seconds)."""
    now_ms = normalize_time(current_time) * 1000
    timers: Dict[str, TimerState] = {}

    for action in effective_actions(actions, current_time, TIMER_ACTION_TYPES, diagnostics):
        data = action.data

        if action.type == "create_timer":
            timers[data.name] = TimerState(
                is_started=False,
                current_interval_time=0,
                total=data.start_value or 0,
                format=data.format,
                step=data.step or DEFAULT_STEP_MS,
                direction=data.direction or "up",
                cap=data.cap_value,
            )
            continue

        timer = timers.get(data.name)
        if timer is None:
            record_diagnostic(
                diagnostics,
                "%s for timer %s at offset %s has no prior create_timer",
                action.type,
                data.name,
                action.offset,
            )
            continue

        elapsed_since_action = now_ms - action.offset
        if action.type == "start_timer":
            timer.is_started = True
            timer.current_interval_time = elapsed_since_action
        elif action.type == "pause_timer":
            if not timer.is_started:
                continue
            timer.total += (timer.current_interval_time - elapsed_since_action) * timer.sign
            timer.current_interval_time = 0
            timer.is_started = False
        elif action.type == "adjust_timer":
            timer.total = data.value or 0
            timer.current_interval_time = elapsed_since_action if timer.is_started else 0
        elif action.type == "skip_timer":
            timer.total += data.value or 0

    return {name: format_timer(timer.seconds(), timer.format) for name, timer in timers.items()}
