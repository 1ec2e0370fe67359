"""
Overlay Visibility Resolver.

Folds show/hide overlay actions into the set of overlays alive at a playback
time, with the animation the renderer should play for each one.

An overlay stays mounted for DISPOSE_TIMEOUT seconds past the moment its
animation is due, so that a seek landing inside that window still animates.
A seek landing later shows the settled state: no enter animation, and hidden
overlays are gone.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from engines.annotations.action_log import coerce_actions, effective_actions, normalize_time
from engines.annotations.models import (
    OVERLAY_ACTION_TYPES,
    ActiveOverlay,
    AnimationIntent,
    HideAnimation,
    OverlayAnimations,
    ShowAnimation,
)
from engines.annotations.timers import resolve_timers
from engines.annotations.variables import resolve_variables

logger = logging.getLogger(__name__)

DISPOSE_TIMEOUT = 2.0  # seconds


def _hide_animation(data) -> HideAnimation:
    return HideAnimation(
        animateout_type=data.animateout_type,
        animateout_duration=data.animateout_duration,
    )


def animation_intent(animations: OverlayAnimations) -> AnimationIntent:
    if animations.hide is not None:
        return AnimationIntent.HIDE
    if animations.show is not None and animations.show.animatein_duration:
        return AnimationIntent.SHOW
    return AnimationIntent.NONE


def substitute_variables(markup: str, names: Iterable[str], variables: Mapping[str, str]) -> str:
    """Replace the first literal occurrence of each placeholder name."""
    for name in names:
        if not name:
            continue
        if name not in variables:
            logger.debug("overlay placeholder %s has no resolved value", name)
        markup = markup.replace(name, str(variables.get(name, "")), 1)
    return markup


def merged_variables(
    actions: Optional[Iterable[Any]],
    current_time: float,
    diagnostics: Optional[List[str]] = None,
) -> Dict[str, str]:
    """Variables and timers in one mapping; a timer wins over a variable of the same name."""
    values = resolve_variables(actions, current_time, diagnostics)
    values.update(resolve_timers(actions, current_time, diagnostics))
    return values


def resolve_overlays(
    actions: Optional[Iterable[Any]],
    current_time: float,
    variables: Optional[Mapping[str, str]] = None,
    svgs: Optional[Mapping[str, str]] = None,
    dispose_timeout: float = DISPOSE_TIMEOUT,
    diagnostics: Optional[List[str]] = None,
) -> Dict[str, ActiveOverlay]:
    """Identity key -> active overlay as of ``current_time`` (seconds).

    ``variables`` defaults to the values resolved from ``actions`` themselves.
    ``svgs`` maps identity key (or svg_url) to preloaded markup; an overlay
    without markup still gets its animation state.
    """
    now = normalize_time(current_time)
    active: Dict[str, ActiveOverlay] = {}
    typed = coerce_actions(actions, diagnostics)

    for action in effective_actions(typed, now, OVERLAY_ACTION_TYPES):
        key = action.identity_key
        data = action.data
        start = action.offset_seconds

        if data.duration and start + data.duration / 1000 + dispose_timeout < now:
            # visible window and its exit animation are both over
            active.pop(key, None)
            continue

        if action.type == "hide_overlay":
            hide_window = (data.animateout_duration or 0) / 1000
            if start + hide_window + dispose_timeout < now:
                active.pop(key, None)
                continue
            entry = active.get(key)
            if entry is not None:
                entry.animations.hide = _hide_animation(data)
            continue

        animations = OverlayAnimations(
            show=ShowAnimation(
                animatein_type=data.animatein_type,
                animatein_duration=data.animatein_duration,
            )
        )
        if start + dispose_timeout <= now and animations.show.animatein_duration:
            animations.show.animatein_duration = None
        if data.duration and start + data.duration / 1000 <= now:
            animations.hide = _hide_animation(data)

        active[key] = ActiveOverlay(
            key=key,
            custom_id=data.custom_id,
            svg_url=data.svg_url,
            position=data.position.model_copy() if data.position else None,
            size=data.size.model_copy() if data.size else None,
            variable_positions=list(data.variable_positions),
            animations=animations,
        )

    if not active:
        return active

    if variables is None:
        variables = merged_variables(typed, now, diagnostics)
    svgs = svgs or {}

    for key, entry in active.items():
        entry.intent = animation_intent(entry.animations)
        markup = svgs.get(key)
        if markup is None and entry.svg_url:
            markup = svgs.get(entry.svg_url)
        entry.svg = substitute_variables(markup or "", entry.variable_positions, variables)

    return active
