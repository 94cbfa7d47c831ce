"""
Bookable detail normalization.

Hotels, services, eventual events and packages all share one record shape.
This module builds that shape from loosely-typed extracted objects.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any

from ..config.models import DetailKind
from ..config.synonyms import ESTADO_CODES
from .parsing import (
    DEFAULT_DATE_LANGUAGES,
    days_between,
    normalize_count,
    normalize_date,
    normalize_enum,
    normalize_string,
)


# Accepted input keys per canonical field, first non-empty wins
DETAIL_FIELD_ALIASES: dict[str, list[str]] = {
    "destino": ["destino", "ciudad", "Ciudad", "location"],
    "in": ["in", "checkIn", "fechaDesde", "fecha_desde", "date"],
    "out": ["out", "checkOut", "fechaHasta", "fecha_hasta"],
    "servicio": ["servicio", "nombre", "name"],
    "descripcion": ["descripcion", "description"],
    "nombre_hotel": ["nombre_hotel", "hotel"],
    "tipo_habitacion": ["tipo_habitacion", "roomType"],
    "categoria": ["categoria", "Categoria"],
    "proveedor": ["proveedor", "provider"],
    "codigo": ["codigo", "code"],
}


@dataclass
class BookableDetail:
    """A hotel, service, eventual or package line item."""

    destino: str | None = None
    date_in: str | None = None
    date_out: str | None = None
    nts: int = 0
    base_pax: int = 0
    servicio: str | None = None
    descripcion: str | None = None
    estado: str | None = None

    # Attributes used when picking the matching catalog row
    kind: str | None = None
    nombre_hotel: str | None = None
    tipo_habitacion: str | None = None
    categoria: str | None = None
    proveedor: str | None = None
    codigo: str | None = None

    @property
    def display_name(self) -> str | None:
        """Name used to search the catalog for this item."""
        return self.nombre_hotel or self.servicio or self.codigo or self.descripcion

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape used by the automation collaborator."""
        return {
            "destino": self.destino,
            "in": self.date_in,
            "out": self.date_out,
            "nts": self.nts,
            "basePax": self.base_pax,
            "servicio": self.servicio,
            "descripcion": self.descripcion,
            "estado": self.estado,
            "kind": self.kind,
            "nombre_hotel": self.nombre_hotel,
            "tipo_habitacion": self.tipo_habitacion,
            "categoria": self.categoria,
            "proveedor": self.proveedor,
            "codigo": self.codigo,
        }


def normalize_detail(
    raw: Any,
    *,
    prefer_day_first: bool = True,
    languages: Iterable[str] | None = DEFAULT_DATE_LANGUAGES,
    default_estado: str | None = None,
    kind: DetailKind | str | None = None,
) -> BookableDetail | None:
    """Normalize a raw hotel/service/eventual/package object.

    Re-normalizing the output (or its ``to_dict()``) yields an equal record.

    Args:
        raw: Extracted object (mapping) or an existing BookableDetail
        prefer_day_first: Ambiguity rule for slash dates
        languages: Languages handed to the generic date parser
        default_estado: Estado code used when the extracted one is missing
            or not one of the known codes
        kind: Detail kind, overrides any ``kind`` in the raw object

    Returns:
        BookableDetail, or None when raw is not an object
    """
    if isinstance(raw, BookableDetail):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return None

    parse_date = partial(normalize_date, prefer_day_first=prefer_day_first, languages=languages)
    date_in = parse_date(_get_first(raw, DETAIL_FIELD_ALIASES["in"]))
    date_out = parse_date(_get_first(raw, DETAIL_FIELD_ALIASES["out"]))

    nts = days_between(date_in, date_out)
    if nts is None:
        nts = normalize_count(raw.get("nts"), default=0)

    fallback_estado = normalize_enum(default_estado, ESTADO_CODES.keys())
    estado = normalize_enum(raw.get("estado"), ESTADO_CODES.keys(), fallback_estado)

    kind_value = normalize_enum(kind if kind is not None else raw.get("kind"), DetailKind)

    return BookableDetail(
        destino=_get_text(raw, "destino"),
        date_in=date_in,
        date_out=date_out,
        nts=nts,
        base_pax=normalize_count(raw.get("basePax", raw.get("base_pax")), default=0),
        servicio=_get_text(raw, "servicio"),
        descripcion=_get_text(raw, "descripcion"),
        estado=estado,
        kind=kind_value,
        nombre_hotel=_get_text(raw, "nombre_hotel"),
        tipo_habitacion=_get_text(raw, "tipo_habitacion"),
        categoria=_get_text(raw, "categoria"),
        proveedor=_get_text(raw, "proveedor"),
        codigo=_get_text(raw, "codigo"),
    )


def _get_text(raw: Mapping[str, Any], field: str) -> str | None:
    value = _get_first(raw, DETAIL_FIELD_ALIASES[field])
    # Catalog codes sometimes arrive as bare numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return normalize_string(value)


def _get_first(data: Mapping[str, Any], keys: list[str]) -> Any | None:
    """Get the first non-blank value from a list of keys."""
    for key in keys:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None
