"""Configuration loading and validation."""

from .models import (
    # Enums
    EntityKind,
    DetailKind,
    PassengerType,
    DocumentType,
    # Config models
    AppConfig,
    NormalizationConfig,
    MatchingConfig,
    HotelWeights,
    ServicioWeights,
    ProgramaWeights,
    LoggingConfig,
)
from .loader import ConfigError, dump_app_config, load_app_config

__all__ = [
    # Enums
    "EntityKind",
    "DetailKind",
    "PassengerType",
    "DocumentType",
    # Config models
    "AppConfig",
    "NormalizationConfig",
    "MatchingConfig",
    "HotelWeights",
    "ServicioWeights",
    "ProgramaWeights",
    "LoggingConfig",
    # Loaders
    "ConfigError",
    "load_app_config",
    "dump_app_config",
]
