"""
Pydantic configuration models for TravelSync.

These models provide type-safe configuration with validation for:
- Normalization behavior (date ambiguity, header defaults)
- Entity matching weights and threshold
- Logging
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class EntityKind(str, Enum):
    """Catalog entity kinds with their own scoring rubric."""

    HOTEL = "hotel"
    SERVICIO = "servicio"
    PROGRAMA = "programa"


class DetailKind(str, Enum):
    """Kinds of bookable line items sharing the BookableDetail shape."""

    HOTEL = "hotel"
    SERVICIO = "servicio"
    EVENTUAL = "eventual"
    PROGRAMA = "programa"


class PassengerType(str, Enum):
    """Passenger age category codes."""

    ADULT = "ADU"
    CHILD = "CHD"
    INFANT = "INF"


class DocumentType(str, Enum):
    """Identity document codes accepted by the booking application."""

    DNI = "DNI"
    PASSPORT = "PAS"
    CEDULA = "CI"
    LIBRETA_ENROLAMIENTO = "LE"
    LIBRETA_CIVICA = "LC"


# =============================================================================
# Normalization Configuration
# =============================================================================


class NormalizationConfig(BaseModel):
    """Settings for turning extracted JSON into a canonical reservation."""

    prefer_day_first: bool = Field(
        default=True,
        description="Read ambiguous slash dates (both parts <= 12) as DD/MM/YYYY",
    )
    date_languages: list[str] = Field(
        default_factory=lambda: ["es", "en", "pt"],
        description="Languages tried by the generic date parser",
    )
    default_reservation_type: str | None = Field(
        default="AGENCIAS [COAG]",
        description="Reservation type used when none was extracted",
    )
    default_status: str | None = Field(
        default="PENDIENTE DE CONFIRMACION [PC]",
        description="Reservation status used when none was extracted",
    )
    default_client: str | None = Field(
        default=None,
        description="Client used when none was extracted",
    )
    default_seller: str | None = Field(
        default=None,
        description="Seller used when none was extracted",
    )
    default_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Confidence used when the extraction reports none",
    )
    default_detail_estado: str | None = Field(
        default=None,
        description="Estado code applied to details with a missing/invalid estado",
    )


# =============================================================================
# Matching Configuration
# =============================================================================


class HotelWeights(BaseModel):
    """Points awarded per attribute when scoring hotel rows."""

    name: float = Field(default=40, ge=0)
    name_partial: float = Field(
        default=20,
        ge=0,
        description="Points when only a single significant word matches",
    )
    room_type: float = Field(default=30, ge=0)
    city: float = Field(default=20, ge=0)
    category: float = Field(default=10, ge=0)
    min_word_length: int = Field(
        default=3,
        ge=0,
        description="Words must be longer than this to earn partial name credit",
    )


class ServicioWeights(BaseModel):
    """Points awarded per attribute when scoring service rows."""

    name: float = Field(default=50, ge=0)
    city: float = Field(default=30, ge=0)
    provider: float = Field(default=20, ge=0)


class ProgramaWeights(BaseModel):
    """Points awarded per attribute when scoring package rows."""

    code: float = Field(default=40, ge=0)
    name: float = Field(default=40, ge=0)
    city: float = Field(default=20, ge=0)


class MatchingConfig(BaseModel):
    """Entity matching weights and selection threshold."""

    threshold: float = Field(
        default=30.0,
        ge=0.0,
        le=100.0,
        description="Best score must be strictly above this to count as a match",
    )
    option_fuzzy_threshold: int = Field(
        default=85,
        ge=0,
        le=100,
        description="Minimum token-set ratio for master-data option lookups",
    )
    hotel: HotelWeights = Field(default_factory=HotelWeights)
    servicio: ServicioWeights = Field(default_factory=ServicioWeights)
    programa: ProgramaWeights = Field(default_factory=ProgramaWeights)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is one the logging module knows."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
