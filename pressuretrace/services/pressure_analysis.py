"""
Per-frame pressure metrics.

Peak pressure is noise filtered: loaded cells are grouped into 4-connected
components and components smaller than the configured minimum area are
ignored. Contact area is measured on the raw grid, so small clusters still
count as loaded surface even when they cannot drive the peak.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from pressuretrace.core.config import AnalysisConfig
from pressuretrace.models.enums import RiskLevel
from pressuretrace.services.matrix_parser import Grid
from pressuretrace.services.risk_classifier import classify_risk

_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Component:
    max_value: int
    area: int


@dataclass(frozen=True)
class FrameMetrics:
    peak_pressure_index: float
    contact_area_percent: float
    risk_level: RiskLevel

    @property
    def is_flagged_for_review(self) -> bool:
        return self.risk_level >= RiskLevel.HIGH


def find_components(grid: Grid) -> list[Component]:
    """Label strictly positive cells into 4-connected components, in row-major discovery order."""
    rows = len(grid)
    visited = [[False] * len(row) for row in grid]
    components: list[Component] = []

    for r in range(rows):
        for c in range(len(grid[r])):
            if visited[r][c] or grid[r][c] <= 0:
                continue

            visited[r][c] = True
            queue = deque([(r, c)])
            area = 0
            max_value = grid[r][c]

            while queue:
                y, x = queue.popleft()
                area += 1
                max_value = max(max_value, grid[y][x])

                for dy, dx in _NEIGHBOURS:
                    ny, nx = y + dy, x + dx
                    if 0 <= ny < rows and 0 <= nx < len(grid[ny]) and not visited[ny][nx] and grid[ny][nx] > 0:
                        visited[ny][nx] = True
                        queue.append((ny, nx))

            components.append(Component(max_value=max_value, area=area))

    return components


def calculate_peak_pressure_index(grid: Grid, min_area: int) -> float:
    candidates = [comp.max_value for comp in find_components(grid) if comp.area >= min_area]
    return float(max(candidates, default=0))


def calculate_contact_area_percent(grid: Grid, zero_force_value: float) -> float:
    total = sum(len(row) for row in grid)
    if total == 0:
        return 0.0
    contact = sum(1 for row in grid for value in row if value > zero_force_value)
    return round(contact / total * 100, 2)


def analyze_grid(grid: Grid, config: AnalysisConfig) -> FrameMetrics:
    peak = calculate_peak_pressure_index(grid, config.min_pixel_area_for_alert)
    return FrameMetrics(
        peak_pressure_index=peak,
        contact_area_percent=calculate_contact_area_percent(grid, config.zero_force_value),
        risk_level=classify_risk(peak, config),
    )
