"""Action log parsing: raw timeline payloads into typed actions, split by kind."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from engines.annotations.models import (
    ACTION_ADAPTER,
    MARKER_ACTION_TYPES,
    OVERLAY_ACTION_TYPES,
    TIMER_ACTION_TYPES,
    VARIABLE_ACTION_TYPES,
    BaseAction,
    Marker,
    ShowTimelineMarkerAction,
)
from engines.annotations.priority import sort_actions

logger = logging.getLogger(__name__)


def record_diagnostic(diagnostics: Optional[List[str]], message: str, *args: Any) -> None:
    """Log a skipped action and, when a collector is supplied, keep the message."""
    logger.warning(message, *args)
    if diagnostics is not None:
        diagnostics.append(message % args if args else message)


def normalize_time(current_time: Any) -> float:
    """Playback time in seconds; anything unusable collapses to 0."""
    try:
        value = float(current_time)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def coerce_actions(actions: Optional[Iterable[Any]], diagnostics: Optional[List[str]] = None) -> List[BaseAction]:
    """Validate raw dicts against the action union. Invalid entries are skipped."""
    typed: List[BaseAction] = []
    for raw in actions or []:
        if raw is None:
            continue
        if isinstance(raw, BaseAction):
            typed.append(raw)
            continue
        try:
            typed.append(ACTION_ADAPTER.validate_python(raw))
        except ValidationError as exc:
            action_id = raw.get("id") if isinstance(raw, dict) else None
            action_type = raw.get("type") if isinstance(raw, dict) else None
            record_diagnostic(
                diagnostics,
                "skipping invalid action id=%s type=%s (%d errors)",
                action_id,
                action_type,
                exc.error_count(),
            )
    return typed


def effective_actions(
    actions: Optional[Iterable[Any]],
    current_time: float,
    types: Iterable[str],
    diagnostics: Optional[List[str]] = None,
) -> List[BaseAction]:
    """Actions of the given types that have taken effect by ``current_time``, in fold order."""
    wanted = frozenset(types)
    cutoff = normalize_time(current_time)
    selected = [
        action
        for action in coerce_actions(actions, diagnostics)
        if action.type in wanted and action.offset_seconds <= cutoff
    ]
    return sort_actions(selected)


def marker_from_action(action: ShowTimelineMarkerAction) -> Marker:
    return Marker(
        key=action.id,
        label=action.data.label,
        offset=action.offset,
        seek_offset=action.data.seek_offset,
        time=action.offset_seconds,
        color=action.data.color,
    )


@dataclass
class AnnotationLog:
    """A timeline's actions validated once and partitioned by resolver."""
    variables: List[BaseAction] = field(default_factory=list)
    timers: List[BaseAction] = field(default_factory=list)
    overlays: List[BaseAction] = field(default_factory=list)
    markers: List[Marker] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    @classmethod
    def from_actions(cls, actions: Optional[Iterable[Any]]) -> "AnnotationLog":
        log = cls()
        for action in coerce_actions(actions, log.diagnostics):
            if action.type in VARIABLE_ACTION_TYPES:
                log.variables.append(action)
            elif action.type in TIMER_ACTION_TYPES:
                log.timers.append(action)
            elif action.type in OVERLAY_ACTION_TYPES:
                log.overlays.append(action)
            elif action.type in MARKER_ACTION_TYPES:
                log.markers.append(marker_from_action(action))
        return log

    def __len__(self) -> int:
        return len(self.variables) + len(self.timers) + len(self.overlays) + len(self.markers)
