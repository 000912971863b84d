from pressuretrace.core.config import AnalysisConfig
from pressuretrace.models.enums import RiskLevel


def classify_risk(peak_pressure_index: float, config: AnalysisConfig) -> RiskLevel:
    # Highest band first; a value equal to a threshold belongs to the higher band.
    if peak_pressure_index >= config.critical_threshold:
        return RiskLevel.CRITICAL
    if peak_pressure_index >= config.high_threshold:
        return RiskLevel.HIGH
    if peak_pressure_index >= config.medium_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
