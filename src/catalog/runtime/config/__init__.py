from .config_data import (
    AppConfig,
    ConfigData,
    CORSConfig,
    DatabaseConfig,
    LoggingConfig,
    PricingConfig,
)

__all__ = [
    "AppConfig",
    "ConfigData",
    "CORSConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "PricingConfig",
]
