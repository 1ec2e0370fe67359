"""Fold order for actions sharing an offset.

Offset ascending is the primary key; when two actions share an offset the one
with the higher priority is folded first, so state exists before it is
mutated and mutated before it is shown.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

ACTION_PRIORITIES: Dict[str, int] = {
    "set_variable": 1000,
    "create_timer": 1000,
    "increment_variable": 500,
    "start_timer": 500,
    "pause_timer": 400,
    "adjust_timer": 300,
    "skip_timer": 200,
    "show_overlay": 100,
    "hide_overlay": 50,
}


def _field(action: Any, name: str) -> Any:
    if isinstance(action, dict):
        return action.get(name)
    return getattr(action, name, None)


def action_priority(action_type: Any) -> int:
    return ACTION_PRIORITIES.get(action_type, 0)


def compare_actions(a: Any, b: Any) -> int:
    """cmp-style comparator; use with functools.cmp_to_key."""
    a_offset = _field(a, "offset") or 0
    b_offset = _field(b, "offset") or 0
    if a_offset != b_offset:
        return -1 if a_offset < b_offset else 1
    a_priority = action_priority(_field(a, "type"))
    b_priority = action_priority(_field(b, "type"))
    if a_priority != b_priority:
        return -1 if a_priority > b_priority else 1
    return 0


def sort_key(action: Any) -> tuple:
    return (_field(action, "offset") or 0, -action_priority(_field(action, "type")))


def sort_actions(actions: Iterable[Any]) -> List[Any]:
    """Return a new list ordered by offset, then priority. Stable for ties."""
    return sorted(actions, key=sort_key)
