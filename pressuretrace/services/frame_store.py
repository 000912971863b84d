from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pressuretrace.core.errors import PersistError
from pressuretrace.models.alert import PressureAlert
from pressuretrace.models.frame import PressureFrame
from pressuretrace.schemas.frames import FrameResponse, RawFrameResponse

logger = logging.getLogger(__name__)


@dataclass
class FrameEffects:
    """
    Pending writes for one ingested frame: the frame and, when it is flagged, its alert.
    Nothing here touches the database until save_frame() commits it.
    """

    frame: PressureFrame
    alert: PressureAlert | None = None


def save_frame(db: Session, effects: FrameEffects) -> PressureFrame:
    """Commit the frame and its optional alert in one transaction."""
    db.add(effects.frame)
    if effects.alert is not None:
        db.add(effects.alert)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to persist frame for patient %s: %s", effects.frame.patient_id, exc)
        raise PersistError("Failed to persist frame.") from exc

    db.refresh(effects.frame)
    if effects.alert is not None:
        db.refresh(effects.alert)
    return effects.frame


def get_frame(db: Session, frame_id: str) -> PressureFrame | None:
    return db.query(PressureFrame).filter(PressureFrame.id == frame_id).first()


def get_alert_for_frame(db: Session, frame_id: str) -> PressureAlert | None:
    return db.query(PressureAlert).filter(PressureAlert.frame_id == frame_id).first()


def to_response(frame: PressureFrame, alert: PressureAlert | None = None) -> FrameResponse:
    return FrameResponse(
        id=str(frame.id),
        patient_id=str(frame.patient_id),
        timestamp=frame.timestamp.isoformat(),
        peak_pressure_index=float(frame.peak_pressure_index),
        contact_area_percent=float(frame.contact_area_percent),
        risk_level=frame.risk_level.label,
        is_flagged_for_review=bool(frame.is_flagged_for_review),
        alert_id=str(alert.id) if alert else None,
    )


def to_raw_response(frame: PressureFrame, alert: PressureAlert | None = None) -> RawFrameResponse:
    return RawFrameResponse(**to_response(frame, alert).model_dump(), raw_text=frame.raw_text)
