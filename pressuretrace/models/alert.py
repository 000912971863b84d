import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pressuretrace.models.base import Base
from pressuretrace.models.enums import AlertStatus, RiskLevel
from pressuretrace.models.frame import PressureFrame


class PressureAlert(Base):
    __tablename__ = "pressure_alerts"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    frame_id: Mapped[str] = mapped_column(String, ForeignKey("pressure_frames.id"), index=True, nullable=False)
    patient_id: Mapped[str] = mapped_column(String, index=True, nullable=False)

    # Copied from the frame when raised; never recomputed.
    risk_level: Mapped[RiskLevel] = mapped_column(Enum(RiskLevel, native_enum=False, length=16), nullable=False)
    status: Mapped[AlertStatus] = mapped_column(
        Enum(AlertStatus, native_enum=False, length=16), nullable=False, default=AlertStatus.NEW
    )
    reason: Mapped[str] = mapped_column(String, nullable=False)

    # Clinician review workflow owns these; the ingestion engine leaves them empty.
    clinician_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    # One-way: the alert points at its frame, the frame carries no alert collection.
    frame: Mapped[PressureFrame] = relationship()
