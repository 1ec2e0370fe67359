"""
Annotation Service.

Evaluates a timeline's action log at one playback time and assembles what the
player needs to draw: counters, overlays with geometry and animation intent,
and merged progress-bar markers. Every call starts from the raw log; nothing
folded is kept between calls.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from engines.annotations.action_log import AnnotationLog, normalize_time
from engines.annotations.geometry import overlay_position, overlay_size, svg_ratio, transition_plan
from engines.annotations.markers import cluster_markers
from engines.annotations.models import (
    ActiveOverlay,
    AnnotationSnapshot,
    ClusterRequest,
    EvaluationRequest,
    MergedMarker,
    RenderedOverlay,
)
from engines.annotations.overlays import resolve_overlays
from engines.annotations.priority import ACTION_PRIORITIES
from engines.annotations.timers import resolve_timers
from engines.annotations.variables import resolve_variables
from engines.config import runtime_config

logger = logging.getLogger(__name__)


class AnnotationService:
    """Stateless evaluator over action logs supplied per call."""

    def __init__(
        self,
        dispose_timeout: Optional[float] = None,
        marker_margin: Optional[float] = None,
        include_diagnostics: Optional[bool] = None,
    ):
        self.dispose_timeout = dispose_timeout or runtime_config.get_annotations_dispose_timeout()
        self.marker_margin = marker_margin or runtime_config.get_annotations_marker_margin()
        if include_diagnostics is None:
            include_diagnostics = runtime_config.annotations_diagnostics_enabled()
        self.include_diagnostics = include_diagnostics

    def evaluate(self, req: EvaluationRequest) -> AnnotationSnapshot:
        """Derived state of the whole log at ``req.current_time``."""
        now = normalize_time(req.current_time)
        log = AnnotationLog.from_actions(req.actions)
        diagnostics: List[str] = list(log.diagnostics)

        variables = resolve_variables(log.variables, now, diagnostics)
        timers = resolve_timers(log.timers, now, diagnostics)

        merged = dict(variables)
        merged.update(timers)
        active = resolve_overlays(
            log.overlays,
            now,
            variables=merged,
            svgs=req.svgs,
            dispose_timeout=self.dispose_timeout,
            diagnostics=diagnostics,
        )
        overlays = [
            self.render_overlay(entry, req.svgs, req.stage_width, req.stage_height)
            for entry in active.values()
        ]

        markers: List[MergedMarker] = []
        if req.duration:
            markers = cluster_markers(
                list(log.markers) + list(req.markers),
                req.duration,
                req.timeline_width,
                margin=self.marker_margin,
            )
        else:
            logger.debug("duration unknown at t=%s, skipping markers", now)

        return AnnotationSnapshot(
            current_time=now,
            variables=variables,
            timers=timers,
            overlays=overlays,
            markers=markers,
            diagnostics=diagnostics if self.include_diagnostics else [],
        )

    def render_overlay(
        self,
        entry: ActiveOverlay,
        svgs: Dict[str, str],
        stage_width: float,
        stage_height: float,
    ) -> RenderedOverlay:
        raw = svgs.get(entry.key)
        if raw is None and entry.svg_url:
            raw = svgs.get(entry.svg_url)
        ratio = svg_ratio(raw)
        width, height = overlay_size(entry.size, stage_width, stage_height, ratio)
        top, left = overlay_position(entry.position, stage_width, stage_height, width, height)
        return RenderedOverlay(
            key=entry.key,
            svg=entry.svg,
            top=top,
            left=left,
            width=width,
            height=height,
            intent=entry.intent,
            animations=entry.animations,
            transition=transition_plan(entry.animations, top, left, stage_width, stage_height),
        )

    def cluster(self, req: ClusterRequest) -> List[MergedMarker]:
        return cluster_markers(req.markers, req.duration, req.timeline_width, margin=self.marker_margin)

    def priorities(self) -> Dict[str, int]:
        return dict(ACTION_PRIORITIES)


_default_service: Optional[AnnotationService] = None


def get_annotation_service() -> AnnotationService:
    global _default_service
    if _default_service is None:
        _default_service = AnnotationService()
    return _default_service


def set_annotation_service(service: Optional[AnnotationService]) -> None:
    global _default_service
    _default_service = service
