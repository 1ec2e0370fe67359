"""Pixel geometry and enter/leave keyframes for an overlay on a given stage."""
from __future__ import annotations

import re
from typing import Optional, Tuple

from engines.annotations.models import (
    FrameState,
    OverlayAnimations,
    OverlayPosition,
    OverlaySize,
    TransitionPlan,
)

VIEWBOX_PATTERN = re.compile(r'<svg.*viewBox="([0-9. ]+)".*>')


def svg_ratio(markup: Optional[str]) -> float:
    """width / height from the root viewBox, 0 when unknown."""
    if not markup:
        return 0.0
    match = VIEWBOX_PATTERN.search(markup)
    if not match:
        return 0.0
    parts = match.group(1).split()
    try:
        width = float(parts[2]) if len(parts) > 2 else 0.0
        height = float(parts[3]) if len(parts) > 3 else 0.0
    except ValueError:
        return 0.0
    return width / height if height else 0.0


def overlay_size(
    size: Optional[OverlaySize],
    stage_width: float,
    stage_height: float,
    ratio: float = 0.0,
) -> Tuple[float, float]:
    """(width, height) in px. A missing side follows the other through the SVG ratio."""
    ratio = ratio or 1.0
    width_pct = (size.width if size else None) or 0
    height_pct = (size.height if size else None) or 0

    width = width_pct * stage_width / 100 or (height_pct * stage_height / 100) * ratio
    height = height_pct * stage_height / 100 or (width_pct * stage_width / 100) / ratio
    return width, height


def overlay_position(
    position: Optional[OverlayPosition],
    stage_width: float,
    stage_height: float,
    overlay_width: float,
    overlay_height: float,
) -> Tuple[float, float]:
    """(top, left) in px. Later anchors win: bottom over top, vcenter over both."""
    top = 0.0
    left = 0.0
    if position is None or not stage_height or not stage_width:
        return top, left

    if position.top:
        top = position.top * stage_height / 100
    if position.bottom:
        top = stage_height - position.bottom * stage_height / 100 - overlay_height
    if position.vcenter is not None:
        top = stage_height * 0.5 - overlay_height * 0.5 + position.vcenter * stage_height / 100

    if position.left:
        left = position.left * stage_width / 100
    if position.right:
        left = stage_width - position.right * stage_width / 100 - overlay_width
    if position.hcenter is not None:
        left = stage_width * 0.5 - overlay_width * 0.5 + position.hcenter * stage_width / 100

    return top, left


def transition_plan(
    animations: OverlayAnimations,
    top: float,
    left: float,
    stage_width: float,
    stage_height: float,
) -> TransitionPlan:
    """Where an overlay enters from, where it leaves to, and how long that takes."""
    plan = TransitionPlan(
        from_state=FrameState(left=0.0, top=0.0, opacity=0.0),
        leave=FrameState(left=left, top=top, opacity=1.0),
        duration_ms=(animations.show.animatein_duration if animations.show else None) or 0.0,
    )

    if animations.show is not None:
        kind = animations.show.animatein_type
        if kind == "fade_in":
            plan.from_state = FrameState(left=left, top=top, opacity=0.0)
        elif kind == "slide_from_left":
            plan.from_state = FrameState(left=-stage_width, top=top)
        elif kind == "slide_from_top":
            plan.from_state = FrameState(left=left, top=-stage_height)
        elif kind == "slide_from_bottom":
            plan.from_state = FrameState(left=left, top=stage_height)
        elif kind == "slide_from_right":
            plan.from_state = FrameState(left=stage_width, top=top)
        else:
            plan.from_state = FrameState(left=left, top=top)

    if animations.hide is not None:
        kind = animations.hide.animateout_type
        if kind == "fade_out":
            plan.leave = FrameState(left=left, top=top, opacity=0.0)
        elif kind == "slide_to_left":
            plan.leave = FrameState(left=-stage_width, top=top)
        elif kind == "slide_to_top":
            plan.leave = FrameState(left=left, top=-stage_height)
        elif kind == "slide_to_bottom":
            plan.leave = FrameState(left=left, top=stage_height)
        elif kind == "slide_to_right":
            plan.leave = FrameState(left=stage_width, top=top)
        else:
            plan.leave = FrameState(left=left, top=top, opacity=0.0)
        animate_out = kind != "none" and animations.hide.animateout_duration
        plan.duration_ms = animate_out or 0.0

    return plan
