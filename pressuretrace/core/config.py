from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalysisConfig(BaseModel):
    """
    Tunables for frame analysis.
    Injected into the peak calculator, classifier and batch splitter so thresholds stay adjustable.
    """

    model_config = ConfigDict(frozen=True)

    grid_size: int = Field(32, ge=1)
    zero_force_value: float = Field(5, ge=0)
    high_threshold: float = Field(60, gt=0)
    critical_threshold: float = Field(75, gt=0)
    medium_fraction: float = Field(0.75, gt=0, le=1)
    min_pixel_area_for_alert: int = Field(10, ge=1)
    frame_spacing_seconds: int = Field(5, ge=0)

    @model_validator(mode="after")
    def _check_bands(self) -> "AnalysisConfig":
        if self.critical_threshold < self.high_threshold:
            raise ValueError("critical_threshold must be >= high_threshold")
        return self

    @property
    def medium_threshold(self) -> float:
        return self.high_threshold * self.medium_fraction


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_nested_delimiter="__")

    app_name: str = "PressureTrace"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./pressuretrace.db"

    frontend_origin: str = "http://localhost:3000"

    # ANALYSIS__CRITICAL_THRESHOLD=80 etc.
    analysis: AnalysisConfig = AnalysisConfig()


settings = Settings()
