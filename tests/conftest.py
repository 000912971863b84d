"""
Pytest fixtures shared by the test suite.

- Analysis tests use a 4x4 grid config so payloads stay readable.
- Database tests use an in-memory SQLite engine (StaticPool keeps one connection
  so the TestClient threadpool sees the same tables).
"""

from collections.abc import Callable, Generator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pressuretrace.core.config import AnalysisConfig
from pressuretrace.models import alert, frame  # noqa: F401
from pressuretrace.models.base import Base

Cells = dict[tuple[int, int], int]

FIXED_NOW = datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc)


def build_grid(size: int, cells: Cells | None = None) -> list[list[int]]:
    grid = [[0] * size for _ in range(size)]
    for (r, c), value in (cells or {}).items():
        grid[r][c] = value
    return grid


def grid_to_text(grid: list[list[int]]) -> str:
    return "\n".join(",".join(str(v) for v in row) for row in grid)


@pytest.fixture
def small_config() -> AnalysisConfig:
    return AnalysisConfig(
        grid_size=4,
        zero_force_value=5,
        high_threshold=60,
        critical_threshold=75,
        min_pixel_area_for_alert=3,
    )


@pytest.fixture
def default_config() -> AnalysisConfig:
    return AnalysisConfig()


@pytest.fixture
def make_grid() -> Callable[..., list[list[int]]]:
    return build_grid


@pytest.fixture
def to_text() -> Callable[[list[list[int]]], str]:
    return grid_to_text


@pytest.fixture
def frame_text() -> Callable[..., str]:
    """4x4 payload with a horizontal three-cell cluster on row 1 peaking at `peak`."""

    def _frame_text(peak: int) -> str:
        return grid_to_text(build_grid(4, {(1, 0): 10, (1, 1): 10, (1, 2): peak}))

    return _frame_text


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def db() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db: Session, small_config: AnalysisConfig) -> Generator[TestClient, None, None]:
    from pressuretrace.api.deps import get_analysis_config, get_db
    from pressuretrace.main import app

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_analysis_config] = lambda: small_config
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
