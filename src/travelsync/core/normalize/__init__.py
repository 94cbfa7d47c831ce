"""Normalization of extracted reservation data and change detection."""

from .parsing import (
    normalize_string,
    normalize_whitespace,
    normalize_date,
    normalize_time,
    normalize_iata,
    normalize_email,
    normalize_enum,
    normalize_number,
    normalize_count,
    normalize_confidence,
    normalize_nationality,
    normalize_document_type,
    normalize_sex,
    normalize_passenger_type,
    to_ui_date,
    days_between,
)
from .detail import BookableDetail, normalize_detail
from .canonical import (
    Flight,
    Passenger,
    RejectedEntity,
    Reservation,
    assemble_reservation,
)
from .diff import ChangeSet, diff_passengers, diff_reservations

__all__ = [
    # Parsing
    "normalize_string",
    "normalize_whitespace",
    "normalize_date",
    "normalize_time",
    "normalize_iata",
    "normalize_email",
    "normalize_enum",
    "normalize_number",
    "normalize_count",
    "normalize_confidence",
    "normalize_nationality",
    "normalize_document_type",
    "normalize_sex",
    "normalize_passenger_type",
    "to_ui_date",
    "days_between",
    # Detail
    "BookableDetail",
    "normalize_detail",
    # Canonical
    "Flight",
    "Passenger",
    "RejectedEntity",
    "Reservation",
    "assemble_reservation",
    # Diff
    "ChangeSet",
    "diff_passengers",
    "diff_reservations",
]
