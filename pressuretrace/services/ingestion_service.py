from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from pressuretrace.core.clock import Clock, to_naive_utc, utc_now
from pressuretrace.core.config import AnalysisConfig, settings
from pressuretrace.models.alert import PressureAlert
from pressuretrace.models.enums import AlertStatus
from pressuretrace.models.frame import PressureFrame
from pressuretrace.services.frame_store import FrameEffects, save_frame
from pressuretrace.services.matrix_parser import parse_matrix
from pressuretrace.services.pressure_analysis import analyze_grid

logger = logging.getLogger(__name__)


def alert_reason(peak_pressure_index: float) -> str:
    # Whole-number peaks read as "80", not "80.0".
    peak = int(peak_pressure_index) if float(peak_pressure_index).is_integer() else peak_pressure_index
    return f"Peak pressure index {peak} exceeded threshold."


def build_frame_effects(
    patient_id: str,
    raw_text: str,
    timestamp: datetime,
    config: AnalysisConfig,
) -> FrameEffects:
    """
    Parse and analyse one payload into unsaved records.
    Raises MalformedGridError before anything is built if the grid has the wrong shape.
    """
    grid = parse_matrix(raw_text, config.grid_size)
    metrics = analyze_grid(grid, config)

    frame = PressureFrame(
        patient_id=patient_id,
        timestamp=to_naive_utc(timestamp),
        raw_text=raw_text,
        peak_pressure_index=metrics.peak_pressure_index,
        contact_area_percent=metrics.contact_area_percent,
        risk_level=metrics.risk_level,
        is_flagged_for_review=metrics.is_flagged_for_review,
    )

    alert = None
    if metrics.is_flagged_for_review:
        alert = PressureAlert(
            frame=frame,
            patient_id=patient_id,
            risk_level=metrics.risk_level,
            status=AlertStatus.NEW,
            reason=alert_reason(metrics.peak_pressure_index),
        )

    return FrameEffects(frame=frame, alert=alert)


def process_frame(
    db: Session,
    patient_id: str,
    raw_text: str,
    timestamp: datetime | None = None,
    *,
    config: AnalysisConfig | None = None,
    clock: Clock = utc_now,
) -> PressureFrame:
    if config is None:
        config = settings.analysis
    effects = build_frame_effects(patient_id, raw_text, timestamp or clock(), config)
    frame = save_frame(db, effects)

    logger.info(
        "Processed frame %s for patient %s (risk=%s, peak=%g)",
        frame.id,
        patient_id,
        frame.risk_level.label,
        frame.peak_pressure_index,
    )
    return frame
