"""
Canonical reservation model for normalized data.

Provides a clean interface between raw AI extraction and the browser
automation that types the reservation into the booking application.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import Any

import orjson

from ..config.models import DetailKind, NormalizationConfig
from ..logging import get_logger
from ..match.options import FUZZY_OPTION_THRESHOLD, MasterData, resolve_option
from .detail import BookableDetail, normalize_detail
from .parsing import (
    normalize_confidence,
    normalize_count,
    normalize_date,
    normalize_document_type,
    normalize_email,
    normalize_iata,
    normalize_nationality,
    normalize_number,
    normalize_passenger_type,
    normalize_sex,
    normalize_string,
    normalize_time,
)

logger = get_logger("normalize.canonical")


# Reservation header attribute -> wire key
HEADER_FIELDS: dict[str, str] = {
    "codigo": "codigo",
    "reservation_type": "reservationType",
    "status": "status",
    "estado_deuda": "estadoDeuda",
    "client": "client",
    "seller": "seller",
    "reservation_date": "reservationDate",
    "travel_date": "travelDate",
    "tour_end_date": "tourEndDate",
    "due_date": "dueDate",
    "contact": "contact",
    "contact_email": "contactEmail",
    "contact_phone": "contactPhone",
    "currency": "currency",
    "exchange_rate": "exchangeRate",
    "commission": "commission",
    "net_amount": "netAmount",
    "gross_amount": "grossAmount",
    "trip_name": "tripName",
    "product_code": "productCode",
    "adults": "adults",
    "children": "children",
    "infants": "infants",
    "provider": "provider",
    "reservation_code": "reservationCode",
}

# Header attributes that can be resolved against master-data option lists
MASTER_DATA_FIELDS = ("reservation_type", "status", "client", "seller")

# Legacy single-object detail fields, appended after the services array
LEGACY_DETAIL_FIELDS: list[tuple[str, DetailKind]] = [
    ("servicio", DetailKind.SERVICIO),
    ("eventual", DetailKind.EVENTUAL),
    ("programa", DetailKind.PROGRAMA),
]


# =============================================================================
# Records
# =============================================================================


@dataclass
class Passenger:
    """A normalized passenger."""

    first_name: str | None = None
    last_name: str | None = None
    document_type: str | None = None
    document_number: str | None = None
    nationality: str | None = None
    date_of_birth: str | None = None
    sex: str | None = None
    passenger_type: str = "ADU"
    cuil_cuit: str | None = None
    address: str | None = None
    phone_number: str | None = None

    def to_dict(self, legacy_aliases: bool = False) -> dict[str, Any]:
        data = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "documentType": self.document_type,
            "documentNumber": self.document_number,
            "nationality": self.nationality,
            "dateOfBirth": self.date_of_birth,
            "sex": self.sex,
            "passengerType": self.passenger_type,
            "cuilCuit": self.cuil_cuit,
            "address": self.address,
            "phoneNumber": self.phone_number,
        }
        if legacy_aliases:
            data["birthDate"] = self.date_of_birth
            data["paxType"] = self.passenger_type
            data["direccion"] = self.address
        return data


@dataclass
class Flight:
    """A normalized flight segment."""

    flight_number: str
    origin: str
    destination: str
    airline: str | None = None
    departure_date: str | None = None
    departure_time: str | None = None
    arrival_date: str | None = None
    arrival_time: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "flightNumber": self.flight_number,
            "airline": self.airline,
            "origin": self.origin,
            "destination": self.destination,
            "departureDate": self.departure_date,
            "departureTime": self.departure_time,
            "arrivalDate": self.arrival_date,
            "arrivalTime": self.arrival_time,
        }


@dataclass
class RejectedEntity:
    """An extracted entity dropped during assembly, with the reason."""

    collection: str
    index: int | None
    reason: str
    raw: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection": self.collection,
            "index": self.index,
            "reason": self.reason,
            "raw": self.raw,
        }


@dataclass
class Reservation:
    """Normalized reservation ready for the booking automation.

    This is the clean, validated representation of a reservation after
    extraction and normalization. ``rejected`` and ``warnings`` record what
    was dropped or could not be resolved on the way.
    """

    codigo: str | None = None
    reservation_type: str | None = None
    status: str | None = None
    estado_deuda: str | None = None
    client: str | None = None
    seller: str | None = None

    # Dates (ISO strings)
    reservation_date: str | None = None
    travel_date: str | None = None
    tour_end_date: str | None = None
    due_date: str | None = None

    # Contact
    contact: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None

    # Financial
    currency: str | None = None
    exchange_rate: float | int = 0
    commission: float | int = 0
    net_amount: float | int = 0
    gross_amount: float | int = 0

    # Trip
    trip_name: str | None = None
    product_code: str | None = None
    adults: int = 0
    children: int = 0
    infants: int = 0

    # Legacy identifiers
    provider: str | None = None
    reservation_code: str | None = None

    # Collections
    passengers: list[Passenger] = field(default_factory=list)
    flights: list[Flight] = field(default_factory=list)
    hotel: BookableDetail | None = None
    services: list[BookableDetail] = field(default_factory=list)

    # Metadata
    confidence: float = 0.5
    rejected: list[RejectedEntity] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self, legacy_aliases: bool = False) -> dict[str, Any]:
        """Convert to the camelCase wire shape.

        Args:
            legacy_aliases: Also emit the older key names (checkIn/checkOut,
                birthDate, paxType, direccion) still read by some flows
        """
        data: dict[str, Any] = {
            wire: getattr(self, attr) for attr, wire in HEADER_FIELDS.items()
        }
        data["passengers"] = [p.to_dict(legacy_aliases) for p in self.passengers]
        data["flights"] = [f.to_dict() for f in self.flights]
        data["hotel"] = self.hotel.to_dict() if self.hotel else None
        data["services"] = [s.to_dict() for s in self.services]
        data["confidence"] = self.confidence
        data["rejected"] = [r.to_dict() for r in self.rejected]
        data["warnings"] = list(self.warnings)

        if legacy_aliases:
            data["checkIn"] = self.hotel.date_in if self.hotel else None
            data["checkOut"] = self.hotel.date_out if self.hotel else None

        return data

    def quality_score(self) -> float:
        """Completeness of the extraction, normalized to 0-1."""
        score = 0.0
        max_score = 0.0

        # Passengers (most important)
        max_score += 30
        if self.passengers:
            score += 20
            complete = [
                p for p in self.passengers
                if p.first_name and p.last_name and p.document_number
            ]
            score += len(complete) / len(self.passengers) * 10

        max_score += 15
        if self.provider:
            score += 15

        max_score += 10
        if self.hotel:
            score += 10

        max_score += 15
        if self.hotel and self.hotel.date_in:
            score += 7.5
        if self.hotel and self.hotel.date_out:
            score += 7.5

        max_score += 15
        if self.flights:
            score += 15

        max_score += 10
        if self.services:
            score += 10

        max_score += 5
        if self.contact_email:
            score += 5

        return round(score / max_score, 2)


# =============================================================================
# Assembly
# =============================================================================


def assemble_reservation(
    raw: Any,
    *,
    config: NormalizationConfig | None = None,
    today: date | str | None = None,
    master_data: MasterData | None = None,
    fuzzy_threshold: int = FUZZY_OPTION_THRESHOLD,
) -> Reservation:
    """Normalize raw extracted data to a canonical Reservation.

    Args:
        raw: Raw extraction result (decoded JSON object)
        config: Normalization settings (defaults when None)
        today: Date used for the reservationDate default
        master_data: Option lists used to resolve header labels
        fuzzy_threshold: Minimum fuzzy score for master-data resolution

    Returns:
        Reservation with normalized data, rejected entities and warnings
    """
    config = config or NormalizationConfig()
    warnings: list[str] = []
    rejected: list[RejectedEntity] = []

    if not isinstance(raw, Mapping):
        warnings.append(f"Extraction result is not an object ({type(raw).__name__})")
        raw = {}

    parse_date = partial(
        normalize_date,
        prefer_day_first=config.prefer_day_first,
        languages=config.date_languages,
    )

    passengers = _assemble_passengers(raw.get("passengers"), parse_date, rejected, warnings)
    flights = _assemble_flights(raw.get("flights"), parse_date, rejected, warnings)
    hotel = _assemble_hotel(raw, config, rejected)
    services = _assemble_services(raw, config, rejected, warnings)

    # One-way date defaults, in this order
    reservation_date = parse_date(raw.get("reservationDate"))
    if reservation_date is None:
        reservation_date = _iso_today(today)

    travel_date = parse_date(raw.get("travelDate"))
    if travel_date is None:
        travel_date = (hotel.date_in if hotel else None) or parse_date(raw.get("checkIn"))

    tour_end_date = parse_date(raw.get("tourEndDate"))
    if tour_end_date is None:
        tour_end_date = (hotel.date_out if hotel else None) or parse_date(raw.get("checkOut"))

    reservation = Reservation(
        codigo=_text(raw.get("codigo")),
        reservation_type=normalize_string(raw.get("reservationType")) or config.default_reservation_type,
        status=normalize_string(raw.get("status")) or config.default_status,
        estado_deuda=normalize_string(raw.get("estadoDeuda")),
        client=normalize_string(raw.get("client")) or config.default_client,
        seller=normalize_string(raw.get("seller")) or config.default_seller,
        reservation_date=reservation_date,
        travel_date=travel_date,
        tour_end_date=tour_end_date,
        due_date=parse_date(raw.get("dueDate")),
        contact=normalize_string(raw.get("contact")),
        contact_email=normalize_email(raw.get("contactEmail")),
        contact_phone=_text(raw.get("contactPhone")),
        currency=normalize_string(raw.get("currency")),
        exchange_rate=normalize_number(raw.get("exchangeRate")),
        commission=normalize_number(raw.get("commission")),
        net_amount=normalize_number(raw.get("netAmount")),
        gross_amount=normalize_number(raw.get("grossAmount")),
        trip_name=normalize_string(raw.get("tripName")),
        product_code=_text(raw.get("productCode")),
        adults=normalize_count(raw.get("adults")),
        children=normalize_count(raw.get("children")),
        infants=normalize_count(raw.get("infants")),
        provider=normalize_string(raw.get("provider")),
        reservation_code=_text(raw.get("reservationCode")),
        passengers=passengers,
        flights=flights,
        hotel=hotel,
        services=services,
        confidence=normalize_confidence(raw.get("confidence"), default=config.default_confidence),
        rejected=rejected,
        warnings=warnings,
    )

    if master_data is not None:
        _resolve_master_data(reservation, master_data, fuzzy_threshold)

    logger.debug(
        "Assembled reservation: %d passengers, %d flights, %d services, %d rejected",
        len(passengers),
        len(flights),
        len(services),
        len(rejected),
        extra={"reservation": reservation.codigo or "new"},
    )
    return reservation


def _assemble_passengers(
    items: Any,
    parse_date: Callable[[Any], str | None],
    rejected: list[RejectedEntity],
    warnings: list[str],
) -> list[Passenger]:
    passengers: list[Passenger] = []

    for index, item in enumerate(_as_list(items, "passengers", warnings)):
        if not isinstance(item, Mapping):
            _reject(rejected, "passengers", index, "not an object", item)
            continue

        first_name = normalize_string(_get_first(item, ["firstName", "first_name"]))
        last_name = normalize_string(_get_first(item, ["lastName", "last_name"]))
        if not first_name and not last_name:
            _reject(rejected, "passengers", index, "missing first and last name", item)
            continue

        passengers.append(Passenger(
            first_name=first_name,
            last_name=last_name,
            document_type=normalize_document_type(_get_first(item, ["documentType", "document_type"])),
            document_number=_text(_get_first(item, ["documentNumber", "document_number"])),
            nationality=normalize_nationality(item.get("nationality")),
            date_of_birth=parse_date(_get_first(item, ["dateOfBirth", "birthDate", "date_of_birth"])),
            sex=normalize_sex(item.get("sex")),
            passenger_type=normalize_passenger_type(_get_first(item, ["passengerType", "paxType"])),
            cuil_cuit=_text(_get_first(item, ["cuilCuit", "cuil_cuit"])),
            address=normalize_string(_get_first(item, ["address", "direccion"])),
            phone_number=_text(_get_first(item, ["phoneNumber", "phone_number"])),
        ))

    return passengers


def _assemble_flights(
    items: Any,
    parse_date: Callable[[Any], str | None],
    rejected: list[RejectedEntity],
    warnings: list[str],
) -> list[Flight]:
    flights: list[Flight] = []

    for index, item in enumerate(_as_list(items, "flights", warnings)):
        if not isinstance(item, Mapping):
            _reject(rejected, "flights", index, "not an object", item)
            continue

        flight_number = _text(item.get("flightNumber"))
        origin = normalize_iata(item.get("origin"))
        destination = normalize_iata(item.get("destination"))

        missing = [
            name for name, value in (
                ("flightNumber", flight_number),
                ("origin", origin),
                ("destination", destination),
            )
            if value is None
        ]
        if missing:
            _reject(rejected, "flights", index, f"missing or invalid {', '.join(missing)}", item)
            continue

        flights.append(Flight(
            flight_number=flight_number.upper(),
            origin=origin,
            destination=destination,
            airline=normalize_string(item.get("airline")),
            departure_date=parse_date(item.get("departureDate")),
            departure_time=normalize_time(item.get("departureTime")),
            arrival_date=parse_date(item.get("arrivalDate")),
            arrival_time=normalize_time(item.get("arrivalTime")),
        ))

    return flights


def _assemble_hotel(
    raw: Mapping[str, Any],
    config: NormalizationConfig,
    rejected: list[RejectedEntity],
) -> BookableDetail | None:
    value = raw.get("hotel")
    if value is None or value == "":
        return None

    if isinstance(value, str):
        value = _decode_hotel_string(value)

    if isinstance(value, BookableDetail):
        value = value.to_dict()
    if not isinstance(value, Mapping):
        _reject(rejected, "hotel", None, "not an object", raw.get("hotel"))
        return None

    # Legacy top-level check-in/check-out fill the hotel's dates
    value = dict(value)
    for key, legacy_key in (("in", "checkIn"), ("out", "checkOut")):
        if _get_first(value, [key]) is None and _get_first(raw, [legacy_key]) is not None:
            value[key] = raw.get(legacy_key)

    return normalize_detail(
        value,
        prefer_day_first=config.prefer_day_first,
        languages=config.date_languages,
        default_estado=config.default_detail_estado,
        kind=DetailKind.HOTEL,
    )


def _decode_hotel_string(value: str) -> Any:
    """A hotel string is either serialized JSON or a bare hotel name."""
    text = value.strip()
    if text.startswith("{"):
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError:
            logger.debug("Hotel string is not valid JSON: %r", text)
            return None
    if text == "[object Object]":
        return None
    return {"nombre_hotel": text}


def _assemble_services(
    raw: Mapping[str, Any],
    config: NormalizationConfig,
    rejected: list[RejectedEntity],
    warnings: list[str],
) -> list[BookableDetail]:
    sources: list[tuple[int | None, Any, DetailKind | None]] = [
        (index, item, None)
        for index, item in enumerate(_as_list(raw.get("services"), "services", warnings))
    ]
    for key, kind in LEGACY_DETAIL_FIELDS:
        if raw.get(key) is not None:
            sources.append((None, raw.get(key), kind))

    services: list[BookableDetail] = []
    for index, item, kind in sources:
        detail = normalize_detail(
            item,
            prefer_day_first=config.prefer_day_first,
            languages=config.date_languages,
            default_estado=config.default_detail_estado,
            kind=kind,
        )
        if detail is None:
            _reject(rejected, "services", index, "not an object", item)
            continue
        if not (detail.display_name or detail.destino or detail.date_in):
            _reject(rejected, "services", index, "no service name, destination or date", item)
            continue
        services.append(detail)

    return services


def _resolve_master_data(
    reservation: Reservation,
    master_data: MasterData,
    fuzzy_threshold: int,
) -> None:
    """Replace header labels with their master-data option spelling."""
    for attr in MASTER_DATA_FIELDS:
        value = getattr(reservation, attr)
        options = master_data.options_for(attr)
        if not value or not options:
            continue

        match = resolve_option(value, options, fuzzy_threshold=fuzzy_threshold)
        if match is None:
            reservation.warnings.append(
                f"{HEADER_FIELDS[attr]} '{value}' does not match any master-data option"
            )
            continue

        if match.value != value:
            logger.debug("Resolved %s %r -> %r (%s)", attr, value, match.value, match.method)
        setattr(reservation, attr, match.value)


# =============================================================================
# Helpers
# =============================================================================


def _as_list(value: Any, name: str, warnings: list[str]) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    warnings.append(f"{name} is not a list ({type(value).__name__}), ignored")
    return []


def _reject(
    rejected: list[RejectedEntity],
    collection: str,
    index: int | None,
    reason: str,
    raw: Any,
) -> None:
    logger.debug("Dropped %s[%s]: %s", collection, index, reason)
    rejected.append(RejectedEntity(collection=collection, index=index, reason=reason, raw=raw))


def _text(value: Any) -> str | None:
    """String field that may arrive as a bare number (document, phone, code)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return normalize_string(value)


def _iso_today(today: date | str | None) -> str:
    if today is None:
        return date.today().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return normalize_date(today) or date.today().isoformat()


def _get_first(data: Mapping[str, Any], keys: list[str]) -> Any | None:
    """Get the first non-blank value from a list of keys."""
    for key in keys:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None
