"""Health Probe for K8s/GCP."""
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel, Field

from engines.config import runtime_config

router = APIRouter(tags=["system"])

class HealthStatus(BaseModel):
    status: str
    version: str = "0.1.0"
    config: Dict[str, Any] = Field(default_factory=dict)

@router.get("/health", response_model=HealthStatus)
def health_check():
    return HealthStatus(status="ok")

@router.get("/ready", response_model=HealthStatus)
def readiness_check():
    # annotation evaluation has no backing store; ready once config resolves
    return HealthStatus(status="ok", config=runtime_config.config_snapshot())
