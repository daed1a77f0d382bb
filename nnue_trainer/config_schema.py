"""
config_schema.py: Pydantic configuration models for nnue_trainer.

Defaults here mirror default_config.yaml; load_config() in
nnue_trainer.utils.utils merges user YAML and CLI overrides over them.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FeaturesConfig(BaseModel):
    """Which input feature types to train and how to factorize them."""

    model_config = ConfigDict(extra="forbid")

    feature_set: List[str] = Field(
        default_factory=lambda: ["HalfKP"],
        description="Ordered feature type names, e.g. ['HalfKP'] or ['K', 'P'].",
    )
    factorize: bool = Field(True, description="Expand features into training factors.")
    half_k_factor: bool = Field(True, description="Add the HalfK factor to HalfKP.")
    p_factor: bool = Field(True, description="Add the P factor to HalfKP.")

    @field_validator("feature_set")
    @classmethod
    def feature_set_not_empty(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("feature_set must name at least one feature type")
        return v


class TrainingConfig(BaseModel):
    """Sample ingestion settings."""

    model_config = ConfigDict(extra="forbid")

    batch_size: int = Field(1000, description="Examples per collated batch.")
    device: str = Field("cpu", description="Device for collated tensors.")
    collapse_duplicates: bool = Field(
        True, description="Merge training features sharing an index within a perspective."
    )

    @field_validator("batch_size")
    @classmethod
    def batch_size_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("batch_size must be positive")
        return v


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_file: Optional[str] = Field(None, description="Optional log file path.")
    log_level: str = Field("INFO", description="Root logging level.")

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = v.upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}")
        return level


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
