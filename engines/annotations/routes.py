from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends

from engines.annotations.models import AnnotationSnapshot, ClusterRequest, EvaluationRequest, MergedMarker
from engines.annotations.service import AnnotationService, get_annotation_service
from engines.common.error_envelope import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/annotations", tags=["annotations"])


def get_service() -> AnnotationService:
    return get_annotation_service()


@router.post("/evaluate", response_model=AnnotationSnapshot)
def evaluate_annotations(req: EvaluationRequest, service: AnnotationService = Depends(get_service)):
    try:
        return service.evaluate(req)
    except Exception as exc:
        logger.exception("annotation evaluation failed at t=%s", req.current_time)
        error_response(
            code="annotations.evaluation_failed",
            message=str(exc),
            status_code=400,
            resource_kind="annotations",
            details={"current_time": req.current_time, "action_count": len(req.actions)},
        )


@router.post("/markers/cluster", response_model=List[MergedMarker])
def cluster_markers(req: ClusterRequest, service: AnnotationService = Depends(get_service)):
    try:
        return service.cluster(req)
    except Exception as exc:
        logger.exception("marker clustering failed")
        error_response(
            code="annotations.cluster_failed",
            message=str(exc),
            status_code=400,
            resource_kind="markers",
            details={"marker_count": len(req.markers)},
        )


@router.get("/priorities", response_model=Dict[str, int])
def list_priorities(service: AnnotationService = Depends(get_service)):
    return service.priorities()
