from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class IntakeConfig(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 5027
    read_size: int = 4096
    max_buffer_size: int = 64 * 1024
    idle_timeout_s: float = 300.0

    class Config:
        env_prefix = "intake_"


class DecoderConfig(BaseSettings):
    drop_on_checksum_mismatch: bool = True
    drop_on_record_count_mismatch: bool = True

    class Config:
        env_prefix = "decoder_"


class OutputConfig(BaseSettings):
    path: Path | None = None      # None - stdout

    class Config:
        env_prefix = "output_"


class LoggingConfig(BaseSettings):
    level: str = "INFO"
    format: str = "structured"

    class Config:
        env_prefix = "log_"


class MetricsConfig(BaseSettings):
    enabled: bool = True
    port: int = 9091

    class Config:
        env_prefix = "metrics_"


class Settings(BaseSettings):
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    class Config:
        env_nested_delimiter = "__"


def get_settings() -> Settings:
    return Settings()
