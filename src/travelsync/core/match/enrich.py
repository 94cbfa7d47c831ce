"""
Catalog enrichment.

Once a search-index row has been selected for an extracted service, the
row's canonical name, city and dates replace the extracted guesses while
fields the catalog does not know (base pax, estado) are kept.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..config.synonyms import DEFAULT_ESTADO
from ..normalize.detail import BookableDetail, normalize_detail
from ..normalize.parsing import days_between, normalize_date, normalize_string

_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def build_description(candidate: Mapping[str, Any]) -> str | None:
    """Description line from a catalog row, e.g. "Categoría: 4* | Proveedor: ACME"."""
    parts = []
    categoria = normalize_string(candidate.get("categoria"))
    if categoria:
        parts.append(f"Categoría: {categoria}")
    proveedor = normalize_string(candidate.get("proveedor"))
    if proveedor:
        parts.append(f"Proveedor: {proveedor}")
    return " | ".join(parts) if parts else None


def detail_from_candidate(
    candidate: Mapping[str, Any],
    original: BookableDetail | Mapping[str, Any],
    *,
    default_estado: str = DEFAULT_ESTADO,
    prefer_day_first: bool = True,
) -> BookableDetail:
    """Merge a selected catalog row into the extracted detail.

    Args:
        candidate: Search-index row (servicio, ciudad, fecha_desde,
            fecha_hasta, categoria, proveedor)
        original: The extracted detail the row was matched for
        default_estado: Estado used when the original has none
        prefer_day_first: Ambiguity rule for slash dates in the row

    Returns:
        Enriched BookableDetail
    """
    base = normalize_detail(original, prefer_day_first=prefer_day_first) or BookableDetail()

    date_in = _catalog_date(candidate.get("fecha_desde"), prefer_day_first)
    date_out = _catalog_date(candidate.get("fecha_hasta"), prefer_day_first)

    nights = days_between(date_in, date_out) or 0

    return BookableDetail(
        destino=normalize_string(candidate.get("ciudad")) or base.destino,
        date_in=date_in or base.date_in,
        date_out=date_out or base.date_out,
        nts=nights or base.nts,
        base_pax=base.base_pax,
        servicio=normalize_string(candidate.get("servicio")) or base.servicio,
        descripcion=build_description(candidate) or base.descripcion,
        estado=base.estado or default_estado,
        kind=base.kind,
        nombre_hotel=base.nombre_hotel,
        tipo_habitacion=base.tipo_habitacion,
        categoria=normalize_string(candidate.get("categoria")) or base.categoria,
        proveedor=normalize_string(candidate.get("proveedor")) or base.proveedor,
        codigo=base.codigo,
    )


def _catalog_date(value: Any, prefer_day_first: bool) -> str | None:
    text = normalize_string(value)
    if text is None:
        return None
    # Index timestamps ("2026-01-10T00:00:00Z") keep only the day
    if _ISO_PREFIX.match(text):
        return normalize_date(text[:10])
    return normalize_date(text, prefer_day_first=prefer_day_first)
