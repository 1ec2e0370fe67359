"""Marker clustering for the progress bar.

Markers that would render within MARKER_PIXEL_MARGIN of each other are
snapped to the same bucket and merged into one indicator.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

from engines.annotations.models import Marker, MergedMarker

MARKER_PIXEL_MARGIN = 44


def position_percent(offset_ms: float, duration_seconds: float) -> float:
    """Horizontal position of an offset as a percent of the bar; 0 when undefined."""
    if not duration_seconds:
        return 0.0
    percent = offset_ms / (duration_seconds * 1000) * 100
    return percent if math.isfinite(percent) else 0.0


def bucket_for(offset_ms: float, duration_seconds: float, timeline_width: float, margin: float) -> int:
    pixel = position_percent(offset_ms, duration_seconds) * timeline_width / 100
    return int(math.floor(pixel / margin + 0.5) * margin)


def merge_markers(group: List[Marker], duration_seconds: float) -> MergedMarker:
    """Collapse one bucket: last key, common color, earliest offset/time."""
    earliest = group[0]
    for marker in group[1:]:
        if marker.offset <= earliest.offset:
            earliest = marker

    colors = {marker.color for marker in group}
    color = group[0].color if len(colors) == 1 else ""

    return MergedMarker(
        key=group[-1].key,
        label=group[-1].label,
        offset=earliest.offset,
        seek_offset=earliest.seek_offset,
        time=min(marker.time for marker in group),
        color=color,
        position=position_percent(earliest.offset, duration_seconds),
        count=len(group),
    )


def cluster_markers(
    markers: Optional[Iterable[Marker]],
    video_duration: float,
    timeline_width: float,
    margin: float = MARKER_PIXEL_MARGIN,
) -> List[MergedMarker]:
    """Merged markers ordered by bucket. Markers landing at position 0 are dropped."""
    if not video_duration or not markers:
        return []
    margin = margin or MARKER_PIXEL_MARGIN

    buckets: Dict[int, List[Marker]] = {}
    for marker in markers:
        if marker is None:
            continue
        if isinstance(marker, dict):
            marker = Marker.model_validate(marker)
        bucket = bucket_for(marker.offset, video_duration, timeline_width, margin)
        buckets.setdefault(bucket, []).append(marker)

    merged = [merge_markers(buckets[bucket], video_duration) for bucket in sorted(buckets)]
    return [marker for marker in merged if marker.position]
