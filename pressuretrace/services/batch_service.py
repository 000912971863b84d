from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timedelta, timezone
from pathlib import PureWindowsPath

from sqlalchemy.orm import Session

from pressuretrace.core.clock import Clock, utc_now
from pressuretrace.core.config import AnalysisConfig, settings
from pressuretrace.core.errors import EmptyUploadError, FrameParseError, NoFramesDetectedError, PersistError
from pressuretrace.models.enums import BatchStatus
from pressuretrace.schemas.frames import BatchUploadResult
from pressuretrace.services.ingestion_service import process_frame

logger = logging.getLogger(__name__)

# Most precise first; each format consumes exactly this many leading digits.
TIMESTAMP_FORMATS = (
    ("%Y%m%d%H%M%S", 14),
    ("%Y%m%d%H%M", 12),
    ("%Y%m%d", 8),
)

_NON_DIGITS = re.compile(r"\D")


def split_frames(content: str, size: int) -> list[str]:
    """
    Split a multi-frame upload into size-line frame payloads.

    Non-blank lines accumulate until `size` of them are collected. A blank line
    ends the current block; blocks shorter than `size` are dropped.
    """
    frames: list[str] = []
    buffer: list[str] = []

    def flush() -> None:
        if len(buffer) == size:
            frames.append("\n".join(buffer))
        buffer.clear()

    for line in content.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if not line.strip():
            flush()
            continue

        buffer.append(line.strip())
        if len(buffer) == size:
            flush()

    flush()
    return frames


def _file_stem(file_name: str) -> str:
    # Windows path rules accept both separators, so client-side paths are stripped too.
    return PureWindowsPath(file_name).stem


def infer_base_timestamp(file_name: str) -> datetime | None:
    """
    Read a UTC timestamp from the digits in a file name, e.g. frame_20240115120000.csv.
    Returns None when no supported pattern matches.
    """
    digits = _NON_DIGITS.sub("", _file_stem(file_name))
    if not digits:
        return None

    for fmt, length in TIMESTAMP_FORMATS:
        if len(digits) < length:
            continue
        candidate = digits[:length]
        try:
            parsed = datetime.strptime(candidate, fmt)
        except ValueError:
            continue
        # strptime accepts single-digit fields; require an exact fixed-width match.
        if parsed.strftime(fmt) != candidate:
            continue
        return parsed.replace(tzinfo=timezone.utc)

    return None


def _batch_status(processed: int, errors: list[str]) -> BatchStatus:
    if processed == 0:
        return BatchStatus.FAILED
    if errors:
        return BatchStatus.COMPLETED_WITH_ERRORS
    return BatchStatus.COMPLETED


def process_batch(
    db: Session,
    patient_id: str,
    file_name: str,
    raw_text: str,
    *,
    config: AnalysisConfig | None = None,
    clock: Clock = utc_now,
    cancel_event: threading.Event | None = None,
) -> BatchUploadResult:
    """
    Ingest every complete frame in an uploaded file, in order.

    Frames that fail to parse or to save are reported in the result and skipped.
    Only whole-upload problems (empty file, no complete frame) are raised.
    Frames already saved stay saved if the batch stops early.
    """
    if config is None:
        config = settings.analysis

    if not raw_text or not raw_text.strip():
        raise EmptyUploadError()

    frames = split_frames(raw_text, config.grid_size)
    if not frames:
        raise NoFramesDetectedError(config.grid_size)

    base_timestamp = infer_base_timestamp(file_name) or clock()
    logger.info("Processing %d frame(s) from %s for patient %s", len(frames), file_name, patient_id)

    errors: list[str] = []
    processed = 0
    alerts = 0

    for index, payload in enumerate(frames):
        if cancel_event is not None and cancel_event.is_set():
            logger.warning("Batch %s cancelled before frame %d", file_name, index + 1)
            errors.append(f"Batch cancelled before frame {index + 1}.")
            break

        timestamp = base_timestamp + timedelta(seconds=index * config.frame_spacing_seconds)
        try:
            frame = process_frame(db, patient_id, payload, timestamp, config=config, clock=clock)
        except (FrameParseError, PersistError) as exc:
            # save_frame has already rolled back, so the session is usable for the next frame.
            logger.warning("Failed to process frame %d inside %s: %s", index + 1, file_name, exc)
            errors.append(f"Frame {index + 1}: {exc}")
            continue

        processed += 1
        if frame.is_flagged_for_review:
            alerts += 1

    result = BatchUploadResult(
        file_name=file_name,
        frames_processed=processed,
        alerts_raised=alerts,
        status=_batch_status(processed, errors),
        uploaded_at=clock(),
        errors=errors,
    )
    logger.info(
        "Batch %s finished: status=%s processed=%d alerts=%d errors=%d",
        file_name,
        result.status.value,
        processed,
        alerts,
        len(errors),
    )
    return result
