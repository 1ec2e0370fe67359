from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.testclient import TestClient

from engines.annotations.routes import get_service, router
from engines.annotations.service import AnnotationService


def action(action_id: str, offset: int, action_type: str, **data: Any) -> Dict[str, Any]:
    return {"id": action_id, "offset": offset, "type": action_type, "data": data}


def set_variable(name: str, value: Any, offset: int = 0, precision: Optional[int] = None, action_id: Optional[str] = None):
    data: Dict[str, Any] = {"name": name, "type": "long", "value": value}
    if precision is not None:
        data["double_precision"] = precision
    return action(action_id or f"set-{name}-{offset}", offset, "set_variable", **data)


def increment_variable(name: str, amount: Any, offset: int = 0, action_id: Optional[str] = None):
    return action(action_id or f"inc-{name}-{offset}", offset, "increment_variable", name=name, amount=amount)


def create_timer(name: str, offset: int = 0, **data: Any):
    payload = {"name": name, "format": "s", "direction": "up", "start_value": 0}
    payload.update(data)
    return action(f"create-{name}-{offset}", offset, "create_timer", **payload)


def timer_action(action_type: str, name: str, offset: int, **data: Any):
    return action(f"{action_type}-{name}-{offset}", offset, action_type, name=name, **data)


def show_overlay(action_id: str, offset: int = 0, **data: Any):
    return action(action_id, offset, "show_overlay", **data)


def hide_overlay(action_id: str, offset: int, **data: Any):
    return action(action_id, offset, "hide_overlay", **data)


def make_annotations_client(service: Optional[AnnotationService] = None) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    svc = service or AnnotationService(include_diagnostics=True)
    app.dependency_overrides[get_service] = lambda: svc
    return TestClient(app)
