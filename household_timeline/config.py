"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HOUSEHOLD_",
        extra="ignore",
    )

    # Service
    service_name: str = "household-timeline"
    log_level: str = "INFO"

    # Debt payoff simulation
    debt_max_months: int = 600
    debt_epsilon: float = 0.0001
    minimum_payment_percent: float = 2.0  # Applied when a card has no rule
    minimum_payment_floor: float = 5.0

    # Payday mode
    default_cycle_days: int = 28

    # Planning
    savings_horizon_months: int = 120
    drift_min_delta: float = 25.0
    drift_min_percent: float = 15.0
    drift_max_alerts: int = 5


settings = Settings()
