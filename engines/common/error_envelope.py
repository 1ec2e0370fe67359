"""Canonical error envelope for all Engines responses.

Standardized structure:
{
  "error": {
    "code": "string",
    "message": "string",
    "http_status": 400,
    "resource_kind": "string | null",
    "details": {}
  }
}
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Canonical error detail structure."""
    code: str
    message: str
    http_status: int
    resource_kind: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    """Top-level error envelope returned by all Engines endpoints."""
    error: ErrorDetail


def build_error_envelope(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ErrorEnvelope:
    """Construct an ErrorEnvelope (without raising).

    Args mirror error_response; http_status mirrors status_code.
    """
    error_detail = ErrorDetail(
        code=code,
        message=message,
        http_status=status_code,
        resource_kind=resource_kind,
        details=details or {},
    )
    return ErrorEnvelope(error=error_detail)


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    """Construct and raise a standardized error response.

    Args:
        code: Machine-readable error code (e.g., "annotations.evaluation_failed")
        message: Human-readable error message
        status_code: HTTP status code (default 400)
        resource_kind: The resource type (annotations, markers, etc.)
        details: Additional context dict

    Returns:
        HTTPException with canonical error envelope body
    """
    envelope = build_error_envelope(
        code=code,
        message=message,
        status_code=status_code,
        resource_kind=resource_kind,
        details=details,
    )
    raise HTTPException(status_code=status_code, detail=envelope.model_dump())
