import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pressuretrace.models.base import Base
from pressuretrace.models.enums import RiskLevel


class PressureFrame(Base):
    """
    One analysed sensor reading. Written once by the ingestion pipeline, never updated.
    """

    __tablename__ = "pressure_frames"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # Opaque owner reference; the user store lives outside this service.
    patient_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)  # naive UTC

    raw_text: Mapped[str] = mapped_column(Text, nullable=False)

    peak_pressure_index: Mapped[float] = mapped_column(Float, nullable=False)
    contact_area_percent: Mapped[float] = mapped_column(Float, nullable=False)  # 0-100
    risk_level: Mapped[RiskLevel] = mapped_column(Enum(RiskLevel, native_enum=False, length=16), nullable=False)
    is_flagged_for_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
