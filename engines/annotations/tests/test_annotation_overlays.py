"""
Tests for overlay visibility, animation intent and text substitution.
"""

import pytest

from engines.annotations.models import AnimationIntent
from engines.annotations.overlays import resolve_overlays, substitute_variables
from engines.annotations.tests.helpers import (
    create_timer,
    hide_overlay,
    set_variable,
    show_overlay,
    timer_action,
)


def test_overlay_with_duration_disposes_after_grace_window():
    actions = [show_overlay("o1", 0, duration=2000)]

    assert "o1" in resolve_overlays(actions, 3.9)
    assert resolve_overlays(actions, 4.1) == {}


def test_duration_elapsed_attaches_hide_intent():
    actions = [show_overlay("o1", 0, duration=2000, animateout_type="fade_out", animateout_duration=500)]

    during = resolve_overlays(actions, 1)["o1"]
    assert during.intent == AnimationIntent.NONE
    assert during.animations.hide is None

    after = resolve_overlays(actions, 3)["o1"]
    assert after.intent == AnimationIntent.HIDE
    assert after.animations.hide.animateout_type == "fade_out"
    assert after.animations.hide.animateout_duration == 500


def test_overlay_not_shown_before_offset():
    actions = [show_overlay("o1", 1000, animatein_type="fade_in", animatein_duration=500)]
    assert resolve_overlays(actions, 0.5) == {}


def test_enter_animation_only_inside_dispose_window():
    actions = [show_overlay("o1", 1000, animatein_type="fade_in", animatein_duration=500)]

    entering = resolve_overlays(actions, 1.5)["o1"]
    assert entering.intent == AnimationIntent.SHOW
    assert entering.animations.show.animatein_duration == 500

    settled = resolve_overlays(actions, 3.5)["o1"]
    assert settled.intent == AnimationIntent.NONE
    assert settled.animations.show.animatein_type == "fade_in"
    assert settled.animations.show.animatein_duration is None


def test_hide_action_animates_then_removes():
    actions = [
        show_overlay("show-1", 0, custom_id="score"),
        hide_overlay("hide-1", 5000, custom_id="score", animateout_type="slide_to_left", animateout_duration=1000),
    ]

    assert resolve_overlays(actions, 4)["score"].intent == AnimationIntent.NONE

    hiding = resolve_overlays(actions, 5.5)["score"]
    assert hiding.intent == AnimationIntent.HIDE
    assert hiding.animations.hide.animateout_type == "slide_to_left"

    assert "score" in resolve_overlays(actions, 7.9)
    assert resolve_overlays(actions, 8.1) == {}


def test_hide_without_show_is_noop():
    actions = [hide_overlay("h", 0, custom_id="nothing")]
    assert resolve_overlays(actions, 0.5) == {}


def test_show_after_hide_brings_overlay_back():
    actions = [
        show_overlay("s1", 0, custom_id="bug"),
        hide_overlay("h1", 1000, custom_id="bug"),
        show_overlay("s2", 10000, custom_id="bug", svg_url="again.svg"),
    ]
    assert resolve_overlays(actions, 5) == {}
    back = resolve_overlays(actions, 11)
    assert back["bug"].svg_url == "again.svg"
    assert back["bug"].intent == AnimationIntent.NONE


def test_later_show_replaces_entry_wholesale():
    actions = [
        show_overlay("s1", 0, custom_id="a", svg_url="one.svg", position={"top": 10}, variable_positions=["X"]),
        show_overlay("s2", 1000, custom_id="a", svg_url="two.svg"),
    ]
    entry = resolve_overlays(actions, 2)["a"]
    assert entry.svg_url == "two.svg"
    assert entry.position is None
    assert entry.variable_positions == []


def test_identity_key_falls_back_to_action_id():
    actions = [show_overlay("action-7", 0, svg_url="x.svg")]
    result = resolve_overlays(actions, 1)
    assert list(result) == ["action-7"]
    assert result["action-7"].custom_id is None


def test_expired_show_does_not_resurrect_older_show():
    actions = [
        show_overlay("s1", 0, custom_id="a", svg_url="old.svg"),
        show_overlay("s2", 1000, custom_id="a", svg_url="timed.svg", duration=1000),
    ]
    assert resolve_overlays(actions, 2)["a"].svg_url == "timed.svg"
    assert resolve_overlays(actions, 10) == {}


def test_variables_substituted_into_markup():
    actions = [
        set_variable("HOME_SCORE", 2),
        set_variable("AWAY_SCORE", 1),
        show_overlay("s", 0, custom_id="board", variable_positions=["HOME_SCORE", "AWAY_SCORE"]),
    ]
    svgs = {"board": "<svg><text>HOME_SCORE - AWAY_SCORE</text></svg>"}
    entry = resolve_overlays(actions, 1, svgs=svgs)["board"]
    assert entry.svg == "<svg><text>2 - 1</text></svg>"


def test_timers_substituted_into_markup():
    actions = [
        create_timer("CLOCK", 0, format="ms"),
        timer_action("start_timer", "CLOCK", 0),
        show_overlay("s", 0, custom_id="clock", variable_positions=["CLOCK"]),
    ]
    svgs = {"clock": "<svg>CLOCK</svg>"}
    assert resolve_overlays(actions, 75, svgs=svgs)["clock"].svg == "<svg>01:15</svg>"


def test_explicit_variables_and_svg_url_lookup():
    actions = [show_overlay("s", 0, svg_url="https://cdn/score.svg", variable_positions=["NAME", "MISSING"])]
    svgs = {"https://cdn/score.svg": "<svg>NAME|MISSING</svg>"}
    entry = resolve_overlays(actions, 1, variables={"NAME": "Ajax"}, svgs=svgs)["s"]
    assert entry.svg == "<svg>Ajax|</svg>"


def test_missing_markup_still_resolves_state():
    actions = [show_overlay("s", 0, animatein_type="fade_in", animatein_duration=300)]
    entry = resolve_overlays(actions, 0.1)["s"]
    assert entry.svg == ""
    assert entry.intent == AnimationIntent.SHOW


def test_set_variable_and_show_at_same_offset():
    actions = [
        show_overlay("s", 1000, custom_id="o", variable_positions=["V"]),
        set_variable("V", 9, offset=1000),
    ]
    entry = resolve_overlays(actions, 1, svgs={"o": "V"})["o"]
    assert entry.svg == "9"


def test_bad_entry_does_not_block_other_overlays():
    diagnostics = []
    actions = [
        {"id": "broken", "offset": "soon", "type": "show_overlay", "data": {}},
        show_overlay("ok", 0),
    ]
    result = resolve_overlays(actions, 1, diagnostics=diagnostics)
    assert list(result) == ["ok"]
    assert len(diagnostics) == 1


def test_seek_safety():
    actions = [
        show_overlay("a", 0, custom_id="a", animatein_duration=500),
        hide_overlay("ha", 10000, custom_id="a"),
        show_overlay("b", 5000, duration=3000, animateout_type="fade_out"),
    ]
    first = {k: v.model_dump() for k, v in resolve_overlays(actions, 7).items()}
    resolve_overlays(actions, 1)
    resolve_overlays(actions, 30)
    again = {k: v.model_dump() for k, v in resolve_overlays(actions, 7).items()}
    assert first == again
    assert set(first) == {"a", "b"}


@pytest.mark.parametrize("actions", [None, []])
def test_empty_input(actions):
    assert resolve_overlays(actions, 5) == {}


def test_substitute_replaces_first_occurrence_only():
    assert substitute_variables("A A", ["A"], {"A": "1"}) == "1 A"
