from datetime import datetime

from pydantic import BaseModel, Field

from pressuretrace.models.enums import BatchStatus


class FrameUpload(BaseModel):
    raw_text: str = Field(..., min_length=1)
    timestamp: datetime | None = None  # defaults to ingestion time


class FrameResponse(BaseModel):
    id: str
    patient_id: str
    timestamp: str
    peak_pressure_index: float
    contact_area_percent: float
    risk_level: str  # Low | Medium | High | Critical
    is_flagged_for_review: bool
    alert_id: str | None = None


class RawFrameResponse(FrameResponse):
    raw_text: str


class BatchUploadRequest(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    content: str


class BatchUploadResult(BaseModel):
    file_name: str
    frames_processed: int = 0
    alerts_raised: int = 0
    status: BatchStatus
    uploaded_at: datetime
    errors: list[str] = Field(default_factory=list)
