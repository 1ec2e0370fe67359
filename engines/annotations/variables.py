"""Variable resolver: folds set/increment actions into display strings."""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from engines.annotations.action_log import effective_actions, record_diagnostic
from engines.annotations.models import VARIABLE_ACTION_TYPES


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_variable(value: Any, precision: int = 0) -> str:
    """Render a variable the way the overlay text expects it.

    With a precision the value is rounded half-up and fixed to that many
    decimals; otherwise it is printed as-is (integral floats drop ``.0``).
    """
    if _is_number(value):
        if not math.isfinite(value):
            return "0"
        if precision and precision > 0:
            scale = 10 ** precision
            rounded = math.floor(value * scale + 0.5) / scale
            return f"{rounded:.{precision}f}"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
    return str(value)


def resolve_variables(
    actions: Optional[Iterable[Any]],
    current_time: float,
    diagnostics: Optional[List[str]] = None,
) -> Dict[str, str]:
    """Variable name -> formatted value as of ``current_time`` (seconds)."""
    state: Dict[str, Dict[str, Any]] = {}

    for action in effective_actions(actions, current_time, VARIABLE_ACTION_TYPES, diagnostics):
        data = action.data
        if action.type == "set_variable":
            state[data.name] = {"value": data.value, "precision": data.double_precision or 0}
            continue

        current = state.get(data.name)
        if current is None:
            record_diagnostic(
                diagnostics,
                "increment_variable %s at offset %s has no prior set_variable",
                data.name,
                action.offset,
            )
            continue
        if not _is_number(current["value"]):
            record_diagnostic(
                diagnostics,
                "increment_variable %s at offset %s targets a non-numeric value",
                data.name,
                action.offset,
            )
            continue
        current["value"] = current["value"] + (data.amount or 0)

    return {name: format_variable(entry["value"], entry["precision"]) for name, entry in state.items()}
