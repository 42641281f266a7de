# src/costinsights/config/settings.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from enum import Enum
from dotenv import load_dotenv


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class AzureSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AZURE_")

    subscription_id: Optional[str] = Field(None, description="Azure subscription ID")
    tenant_id: Optional[str] = Field(None, description="Azure tenant ID")
    client_id: Optional[str] = Field(None, description="Azure client ID for service principal")
    client_secret: Optional[str] = Field(None, description="Azure client secret")
    budget_name: str = Field("COE-Overall-Budget", description="Consumption budget to evaluate")

    @property
    def scope(self) -> str:
        return f"/subscriptions/{self.subscription_id}"


class BenchmarkSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLOUD_BENCHMARK_")

    api_key: Optional[str] = Field(None, description="Benchmark feed API key; fallback table when absent")
    api_url: str = Field("https://api.cloudbenchmarking.com/v1/azure", description="Industry benchmark endpoint")
    region: str = Field("south-asia", description="Benchmark region")
    industry: str = Field("IT", description="Benchmark industry segment")
    tier: str = Field("production", description="Benchmark workload tier")
    multicloud_api_url: Optional[str] = Field(None, description="Multi-cloud estimate endpoint")
    timeout_seconds: float = Field(20.0, description="HTTP timeout for benchmark calls")


class AnalyticsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    currency: str = Field("INR", description="Billing currency code")
    currency_symbol: str = Field("₹", description="Symbol used in formatted descriptors")
    spike_percentage_threshold: float = Field(5.0, description="Day-over-day increase (%) that counts as a spike")
    spike_absolute_threshold: float = Field(50.0, description="Day-over-day increase (currency) that counts as a spike")
    strict_spike_percentage_threshold: float = Field(10.0, description="Percentage threshold for the coarse summary pass")
    strict_spike_absolute_threshold: float = Field(500.0, description="Absolute threshold for the coarse summary pass")
    seasonality_threshold_ratio: float = Field(1.2, description="Bucket/average ratio above which a pattern is reported")
    top_services: int = Field(5, description="Number of services listed in the report head")
    historical_increase_threshold: float = Field(20.0, description="Increase (%) over moving average flagged per service")
    traffic_spike_threshold: float = Field(30.0, description="Network traffic increase (%) flagged as a spike")


class PipelineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PIPELINE_")

    max_concurrency: int = Field(5, description="Concurrent external fetches")
    timeout_seconds: int = Field(120, description="Timeout for a single external fetch")
    retry_attempts: int = Field(3, description="Number of retry attempts")
    retry_backoff_factor: float = Field(1.5, description="Backoff factor for retries")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(Environment.DEVELOPMENT, description="Environment")
    debug: bool = Field(False, description="Debug mode")
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: LogFormat = Field(LogFormat.JSON, description="Log format (json or text)")

    azure: AzureSettings = Field(default_factory=lambda: AzureSettings())
    benchmark: BenchmarkSettings = Field(default_factory=lambda: BenchmarkSettings())
    analytics: AnalyticsSettings = Field(default_factory=lambda: AnalyticsSettings())
    pipeline: PipelineSettings = Field(default_factory=lambda: PipelineSettings())

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        if isinstance(v, str):
            return LogFormat(v.lower())
        return v

    @classmethod
    def create_from_env(cls, env_file: Optional[str] = ".env") -> "Settings":
        """Create settings instance from environment variables and an optional .env file."""
        if env_file:
            # Sub-settings read os.environ only, so the file has to be loaded first
            load_dotenv(env_file)
        return cls()
