from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from pressuretrace.core.config import AnalysisConfig, settings
from pressuretrace.database.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DbDep = Annotated[Session, Depends(get_db)]


def get_analysis_config() -> AnalysisConfig:
    # Overridable in tests or by a deployment that loads thresholds from elsewhere.
    return settings.analysis


AnalysisConfigDep = Annotated[AnalysisConfig, Depends(get_analysis_config)]
