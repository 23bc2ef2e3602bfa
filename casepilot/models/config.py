"""Configuration data models."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from casepilot.utils.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME, DEFAULT_OUTPUT_DIR


class RecommendationConfig(BaseModel):
    """Strategy recommendation configuration."""

    performance_threshold: int = Field(
        default=50, ge=0, description="Total complexity above which PerformanceBasic is primary"
    )
    comprehensive_threshold: int = Field(
        default=20, ge=0, description="Total complexity above which FunctionalComprehensive is primary"
    )
    load_threshold: int = Field(
        default=30, ge=0, description="Total complexity above which PerformanceLoad is added"
    )
    base_confidence: float = Field(default=0.8, ge=0.0, le=1.0, description="Starting confidence")
    fallback_confidence: float = Field(default=0.5, ge=0.0, le=1.0, description="Confidence of the fallback")
    cache_enabled: bool = Field(default=True, description="Cache recommendations per endpoint")
    cache_ttl: int = Field(default=3600, ge=0, description="Cache entry lifetime in seconds")

    @model_validator(mode="after")
    def check_threshold_order(self) -> "RecommendationConfig":
        """The performance threshold must not sit below the comprehensive one."""
        if self.performance_threshold < self.comprehensive_threshold:
            raise ValueError(
                "performance_threshold must be greater than or equal to comprehensive_threshold"
            )
        return self


class ProcessingConfig(BaseModel):
    """Processing configuration."""

    workers: int = Field(default=4, ge=1, description="Number of concurrent workers")
    timeout: float = Field(default=0, ge=0, description="Batch deadline in seconds (0 = none)")


class OutputConfig(BaseModel):
    """Output configuration."""

    directory: str = Field(default=DEFAULT_OUTPUT_DIR, description="Output directory")
    filename_template: str = Field(
        default="{method}_{path_slug}.json",
        description="Template for output filenames"
    )
    include_timestamp: bool = Field(default=False, description="Include timestamp in filenames")
    timestamp_format: str = Field(default="%Y%m%d_%H%M%S", description="Timestamp format for filenames")
    indent: int = Field(default=2, ge=0, description="JSON indentation")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    structured: bool = Field(default=False, description="Emit JSON log lines")


class CasePilotConfig(BaseModel):
    """Main CasePilot configuration."""

    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def get_config_path() -> Path:
        """Default location of the user configuration file."""
        return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME
