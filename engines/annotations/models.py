"""
Annotation Models.

Typed action log entries (a tagged union discriminated by ``type``) and the
derived records produced when the log is evaluated at a playback time.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# --- Payloads ---

class VariableData(BaseModel):
    """Payload of set_variable / increment_variable."""
    name: str
    type: Literal["double", "long", "string"] = "long"
    value: Union[int, float, str] = 0
    double_precision: Optional[int] = None
    amount: Optional[Union[int, float]] = None

    model_config = ConfigDict(extra="allow")


class TimerData(BaseModel):
    """Payload shared by every timer action. All durations are milliseconds."""
    name: str
    format: Literal["ms", "s"] = "s"
    direction: Literal["up", "down"] = "up"
    start_value: float = 0
    step: Optional[float] = None
    cap_value: Optional[float] = None
    value: Optional[float] = None

    model_config = ConfigDict(extra="allow")


class OverlayPosition(BaseModel):
    """Percent offsets relative to the stage."""
    top: Optional[float] = None
    bottom: Optional[float] = None
    vcenter: Optional[float] = None
    left: Optional[float] = None
    right: Optional[float] = None
    hcenter: Optional[float] = None


class OverlaySize(BaseModel):
    """Percent of the stage; a missing side is derived from the SVG ratio."""
    width: Optional[float] = None
    height: Optional[float] = None


class OverlayData(BaseModel):
    """Payload of show_overlay / hide_overlay."""
    custom_id: Optional[str] = None
    svg_url: Optional[str] = None
    position: Optional[OverlayPosition] = None
    size: Optional[OverlaySize] = None
    variable_positions: List[str] = Field(default_factory=list)
    duration: Optional[float] = None  # ms
    animatein_type: Optional[str] = None
    animatein_duration: Optional[float] = None  # ms
    animateout_type: Optional[str] = None
    animateout_duration: Optional[float] = None  # ms

    model_config = ConfigDict(extra="allow")


class MarkerData(BaseModel):
    """Payload of show_timeline_marker."""
    label: str = ""
    color: str = ""
    seek_offset: Optional[float] = None

    model_config = ConfigDict(extra="allow")


# --- Actions ---

class BaseAction(BaseModel):
    """Common envelope: every action takes effect ``offset`` ms after stream start."""
    id: str
    offset: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="ignore")

    @property
    def offset_seconds(self) -> float:
        return self.offset / 1000


class SetVariableAction(BaseAction):
    type: Literal["set_variable"] = "set_variable"
    data: VariableData


class IncrementVariableAction(BaseAction):
    type: Literal["increment_variable"] = "increment_variable"
    data: VariableData


class CreateTimerAction(BaseAction):
    type: Literal["create_timer"] = "create_timer"
    data: TimerData


class StartTimerAction(BaseAction):
    type: Literal["start_timer"] = "start_timer"
    data: TimerData


class PauseTimerAction(BaseAction):
    type: Literal["pause_timer"] = "pause_timer"
    data: TimerData


class AdjustTimerAction(BaseAction):
    type: Literal["adjust_timer"] = "adjust_timer"
    data: TimerData


class SkipTimerAction(BaseAction):
    type: Literal["skip_timer"] = "skip_timer"
    data: TimerData


class _OverlayAction(BaseAction):
    data: OverlayData = Field(default_factory=OverlayData)

    @property
    def identity_key(self) -> str:
        return self.data.custom_id or self.id


class ShowOverlayAction(_OverlayAction):
    type: Literal["show_overlay"] = "show_overlay"


class HideOverlayAction(_OverlayAction):
    type: Literal["hide_overlay"] = "hide_overlay"


class ShowTimelineMarkerAction(BaseAction):
    type: Literal["show_timeline_marker"] = "show_timeline_marker"
    data: MarkerData = Field(default_factory=MarkerData)


VariableAction = Union[SetVariableAction, IncrementVariableAction]
TimerAction = Union[
    CreateTimerAction,
    StartTimerAction,
    PauseTimerAction,
    AdjustTimerAction,
    SkipTimerAction,
]
OverlayAction = Union[ShowOverlayAction, HideOverlayAction]

Action = Annotated[
    Union[
        SetVariableAction,
        IncrementVariableAction,
        CreateTimerAction,
        StartTimerAction,
        PauseTimerAction,
        AdjustTimerAction,
        SkipTimerAction,
        ShowOverlayAction,
        HideOverlayAction,
        ShowTimelineMarkerAction,
    ],
    Field(discriminator="type"),
]

ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)

VARIABLE_ACTION_TYPES = frozenset({"set_variable", "increment_variable"})
TIMER_ACTION_TYPES = frozenset({
    "create_timer",
    "start_timer",
    "pause_timer",
    "adjust_timer",
    "skip_timer",
})
OVERLAY_ACTION_TYPES = frozenset({"show_overlay", "hide_overlay"})
MARKER_ACTION_TYPES = frozenset({"show_timeline_marker"})


# --- Markers ---

class Marker(BaseModel):
    """A point-in-time indicator on the progress bar."""
    key: str = ""
    label: str = ""
    offset: float = 0  # ms
    seek_offset: Optional[float] = Field(default=None, alias="seekOffset")
    time: float = 0
    color: str = ""

    model_config = ConfigDict(populate_by_name=True)


class MergedMarker(Marker):
    """A cluster of markers collapsed onto one pixel bucket."""
    position: float  # percent of the bar
    count: int = 1


# --- Derived overlay state ---

class AnimationIntent(str, Enum):
    """What the renderer should do with an overlay on this evaluation."""
    NONE = "none"
    SHOW = "show"
    HIDE = "hide"


class ShowAnimation(BaseModel):
    animatein_type: Optional[str] = None
    animatein_duration: Optional[float] = None


class HideAnimation(BaseModel):
    animateout_type: Optional[str] = None
    animateout_duration: Optional[float] = None


class OverlayAnimations(BaseModel):
    show: Optional[ShowAnimation] = None
    hide: Optional[HideAnimation] = None


class ActiveOverlay(BaseModel):
    """An overlay that is visible (or animating out) at the evaluated time."""
    key: str
    custom_id: Optional[str] = None
    svg_url: Optional[str] = None
    position: Optional[OverlayPosition] = None
    size: Optional[OverlaySize] = None
    variable_positions: List[str] = Field(default_factory=list)
    animations: OverlayAnimations = Field(default_factory=OverlayAnimations)
    intent: AnimationIntent = AnimationIntent.NONE
    svg: str = ""


class FrameState(BaseModel):
    left: float = 0.0
    top: float = 0.0
    opacity: float = 1.0


class TransitionPlan(BaseModel):
    """Enter/leave keyframes for the renderer; nothing here runs an animation."""
    from_state: FrameState = Field(default_factory=lambda: FrameState(opacity=0.0))
    leave: FrameState = Field(default_factory=FrameState)
    duration_ms: float = 0.0


class RenderedOverlay(BaseModel):
    """Overlay ready for mounting: markup plus pixel geometry and intent."""
    key: str
    svg: str = ""
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0
    intent: AnimationIntent = AnimationIntent.NONE
    animations: OverlayAnimations = Field(default_factory=OverlayAnimations)
    transition: TransitionPlan = Field(default_factory=TransitionPlan)


# --- Service request / response ---

class EvaluationRequest(BaseModel):
    """Everything needed to evaluate the annotation log at one playback time."""
    actions: List[Dict[str, Any]] = Field(default_factory=list)
    current_time: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    stage_width: float = Field(default=0.0, ge=0)
    stage_height: float = Field(default=0.0, ge=0)
    timeline_width: float = Field(default=0.0, ge=0)
    svgs: Dict[str, str] = Field(default_factory=dict)
    markers: List[Marker] = Field(default_factory=list)


class ClusterRequest(BaseModel):
    markers: List[Marker] = Field(default_factory=list)
    duration: float = Field(default=0.0, ge=0)
    timeline_width: float = Field(default=0.0, ge=0)


class AnnotationSnapshot(BaseModel):
    """Derived state of the whole log at ``current_time``."""
    current_time: float
    variables: Dict[str, str] = Field(default_factory=dict)
    timers: Dict[str, str] = Field(default_factory=dict)
    overlays: List[RenderedOverlay] = Field(default_factory=list)
    markers: List[MergedMarker] = Field(default_factory=list)
    diagnostics: List[str] = Field(default_factory=list)
