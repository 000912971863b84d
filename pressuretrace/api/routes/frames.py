import logging

from fastapi import APIRouter, HTTPException, status

from pressuretrace.api.deps import AnalysisConfigDep, DbDep
from pressuretrace.core.errors import BatchRejectedError, FrameParseError
from pressuretrace.schemas.frames import (
    BatchUploadRequest,
    BatchUploadResult,
    FrameResponse,
    FrameUpload,
    RawFrameResponse,
)
from pressuretrace.services.batch_service import process_batch
from pressuretrace.services.frame_store import get_alert_for_frame, get_frame, to_raw_response, to_response
from pressuretrace.services.ingestion_service import process_frame

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/patients/{patient_id}/frames", response_model=FrameResponse)
def upload_frame(patient_id: str, payload: FrameUpload, db: DbDep, config: AnalysisConfigDep):
    try:
        frame = process_frame(db, patient_id, payload.raw_text, payload.timestamp, config=config)
    except FrameParseError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    return to_response(frame, get_alert_for_frame(db, frame.id))


@router.post("/patients/{patient_id}/uploads", response_model=BatchUploadResult)
def upload_file(patient_id: str, payload: BatchUploadRequest, db: DbDep, config: AnalysisConfigDep):
    try:
        return process_batch(db, patient_id, payload.file_name, payload.content, config=config)
    except BatchRejectedError as exc:
        logger.info("Rejected upload %s for patient %s: %s", payload.file_name, patient_id, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/frames/{frame_id}/raw", response_model=RawFrameResponse)
def get_raw_frame(frame_id: str, db: DbDep):
    frame = get_frame(db, frame_id)
    if not frame:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Frame not found.")
    return to_raw_response(frame, get_alert_for_frame(db, frame.id))
