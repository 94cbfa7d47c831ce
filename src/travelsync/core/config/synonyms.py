"""
Alias tables for normalizing extracted reservation values.

Maps the many spellings an email (Spanish, Portuguese or English) can use
for a nationality, document type or passenger attribute onto the codes the
booking application accepts.
"""

from __future__ import annotations

# =============================================================================
# Booking Line Status (estado) Codes
# =============================================================================

ESTADO_CODES: dict[str, str] = {
    "OK": "CONFIRMADO",
    "RQ": "REQUERIDO",
    "CX": "CANCELADO",
    "WL": "LISTA DE ESPERA",
    "NO": "NEGADO",
    "PE": "PENDIENTE",
    "PC": "PENDIENTE DE CONFIRMACION",
    "FI": "CONFIRMACION",
    "LI": "LIBERADO",
    "AN": "ANULADO",
    "CA": "CANCELADO POR AGENCIA",
    "CL": "CANCELADO POR CLIENTE",
    "HK": "CONFIRMADO EN SISTEMA",
    "HL": "EN ESPERA EN SISTEMA",
    "HX": "CANCELADO EN SISTEMA",
    "KK": "CONFIRMANDO",
    "KL": "CONFIRMADO DESDE ESPERA",
    "NN": "SOLICITADO",
    "RR": "RECONFIRMADO",
    "SS": "VENDIDO",
    "TK": "CAMBIO DE HORARIO",
    "UC": "NO CONFIRMABLE",
    "UN": "NO OPERA",
    "US": "SIN DISPONIBILIDAD",
    "XX": "CANCELADO SIN CARGO",
    "VO": "VOUCHER EMITIDO",
    "FA": "FACTURADO",
    "PG": "PAGADO",
}

DEFAULT_ESTADO = "RQ"


# =============================================================================
# Passenger Attributes
# =============================================================================

DOCUMENT_TYPE_SYNONYMS: dict[str, list[str]] = {
    "DNI": [
        "documento nacional de identidad",
        "documento",
        "doc",
    ],
    "PAS": [
        "pasaporte",
        "passport",
        "passaporte",
    ],
    "CI": [
        "cedula",
        "cédula",
        "cedula de identidad",
        "cédula de identidad",
    ],
    "LE": [
        "libreta de enrolamiento",
        "libreta enrolamiento",
    ],
    "LC": [
        "libreta civica",
        "libreta cívica",
    ],
}

PASSENGER_TYPE_ALIASES: dict[str, str] = {
    "ADT": "ADU",
    "ADULT": "ADU",
    "ADULTO": "ADU",
    "CHILD": "CHD",
    "CHD": "CHD",
    "MENOR": "CHD",
    "NIÑO": "CHD",
    "INFANT": "INF",
    "INFANTE": "INF",
    "BEBE": "INF",
}

DEFAULT_PASSENGER_TYPE = "ADU"

SEX_CODES = ("M", "F")

SEX_ALIASES: dict[str, str] = {
    "MASCULINO": "M",
    "MALE": "M",
    "HOMBRE": "M",
    "FEMENINO": "F",
    "FEMALE": "F",
    "MUJER": "F",
}

NATIONALITY_SYNONYMS: dict[str, list[str]] = {
    "ARGENTINA": ["argentino", "argentina", "arg", "ar"],
    "BRASIL": ["brazil", "brasileño", "brasilera", "brasilero", "brasileiro", "bra", "br"],
    "CHILE": ["chileno", "chilena", "chl", "cl"],
    "URUGUAY": ["uruguayo", "uruguaya", "ury", "uy"],
    "PARAGUAY": ["paraguayo", "paraguaya", "pry", "py"],
    "BOLIVIA": ["boliviano", "boliviana", "bol", "bo"],
    "PERU": ["perú", "peruano", "peruana", "per", "pe"],
    "COLOMBIA": ["colombiano", "colombiana", "col", "co"],
    "VENEZUELA": ["venezolano", "venezolana", "ven", "ve"],
    "ECUADOR": ["ecuatoriano", "ecuatoriana", "ecu", "ec"],
    "MEXICO": ["méxico", "mexicano", "mexicana", "mex", "mx"],
    "ESPAÑA": ["espana", "spain", "español", "española", "esp", "es"],
    "ESTADOS UNIDOS": [
        "eeuu",
        "usa",
        "us",
        "united states",
        "estadounidense",
        "americano",
        "americana",
    ],
}


# =============================================================================
# Master-data Keyword Mapping
# =============================================================================

# Keyword found in the extracted label -> stem expected in the option label
STATUS_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("CONFIRMAD", "CONFIRM"), "CONFIRMAD"),
    (("PENDIENTE", "PENDING"), "PENDIENTE"),
    (("CANCELAD", "CANCEL"), "CANCELAD"),
]


def find_canonical(value: str, synonyms: dict[str, list[str]]) -> str | None:
    """Find the canonical key for a raw value in a synonym table.

    Args:
        value: Raw text (any case)
        synonyms: Canonical key -> list of lowercase spellings

    Returns:
        Canonical key if found, None otherwise
    """
    normalized = " ".join(value.lower().split())

    for canonical, spellings in synonyms.items():
        if normalized == canonical.lower() or normalized in spellings:
            return canonical

    return None
