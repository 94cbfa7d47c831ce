"""Tests for master-data option resolution and catalog enrichment."""

from travelsync.core.match.enrich import build_description, detail_from_candidate
from travelsync.core.match.options import MasterData, resolve_option
from travelsync.core.normalize.detail import BookableDetail

STATUSES = [
    "PENDIENTE DE CONFIRMACION [PC]",
    "CONFIRMADA [FI]",
    "CANCELADA [CX]",
]


# =============================================================================
# Option Resolution
# =============================================================================


def test_exact_match_ignores_case():
    match = resolve_option("  confirmada [fi] ", STATUSES)

    assert match.value == "CONFIRMADA [FI]"
    assert match.method == "exact"
    assert match.score == 100.0


def test_partial_match():
    """An extracted label contained in an option resolves to it."""
    match = resolve_option("Cancelada", STATUSES)

    assert match.value == "CANCELADA [CX]"
    assert match.method == "partial"


def test_keyword_match():
    """English or inflected labels map through keywords."""
    confirmed = resolve_option("Confirmed", STATUSES)
    pending = resolve_option("Pending", STATUSES)

    assert confirmed.value == "CONFIRMADA [FI]"
    assert confirmed.method == "keyword"
    assert pending.value == "PENDIENTE DE CONFIRMACION [PC]"
    assert pending.method == "keyword"


def test_fuzzy_match():
    """Reordered words resolve through the token-set ratio."""
    match = resolve_option("Juan Perez", ["PEREZ, JUAN", "GOMEZ, MARIA"])

    assert match.value == "PEREZ, JUAN"
    assert match.method == "fuzzy"
    assert match.score >= 85


def test_no_match():
    assert resolve_option("Zzz", STATUSES) is None
    assert resolve_option("", STATUSES) is None
    assert resolve_option(None, STATUSES) is None
    assert resolve_option("CONFIRMADA", []) is None


def test_fuzzy_threshold_is_configurable():
    """A misspelling scores about 70: below the default, above a lowered threshold."""
    options = ["AGENCIAS [COAG]"]

    assert resolve_option("Agncias", options) is None
    assert resolve_option("Agncias", options, fuzzy_threshold=60).value == "AGENCIAS [COAG]"


def test_master_data_options_for():
    master_data = MasterData(statuses=STATUSES, sellers=["ANA"])

    assert master_data.options_for("status") == STATUSES
    assert master_data.options_for("seller") == ["ANA"]
    assert master_data.options_for("client") == []
    assert master_data.options_for("currency") == []


# =============================================================================
# Catalog Enrichment
# =============================================================================


SEARCH_ROW = {
    "servicio": "City Tour Mendoza",
    "ciudad": "Mendoza",
    "fecha_desde": "2026-01-10T00:00:00Z",
    "fecha_hasta": "2026-01-12T00:00:00Z",
    "categoria": "Regular",
    "proveedor": "Andes Receptivo",
}


def test_detail_from_candidate():
    """The selected row's name, city and dates replace the extracted guesses."""
    original = {"servicio": "tour por la ciudad", "basePax": 2, "destino": "MDZ"}
    detail = detail_from_candidate(SEARCH_ROW, original)

    assert detail.servicio == "City Tour Mendoza"
    assert detail.destino == "Mendoza"
    assert detail.date_in == "2026-01-10"
    assert detail.date_out == "2026-01-12"
    assert detail.nts == 2
    assert detail.base_pax == 2
    assert detail.descripcion == "Categoría: Regular | Proveedor: Andes Receptivo"
    assert detail.estado == "RQ"


def test_detail_from_candidate_keeps_original_values():
    """Fields the row lacks fall back to the original detail."""
    original = BookableDetail(
        servicio="Transfer",
        destino="Mendoza",
        date_in="2026-01-10",
        date_out="2026-01-11",
        nts=1,
        descripcion="Aeropuerto - hotel",
        estado="OK",
    )
    detail = detail_from_candidate({"servicio": "Transfer In"}, original)

    assert detail.servicio == "Transfer In"
    assert detail.destino == "Mendoza"
    assert detail.date_in == "2026-01-10"
    assert detail.nts == 1
    assert detail.descripcion == "Aeropuerto - hotel"
    assert detail.estado == "OK"


def test_build_description():
    assert build_description({"categoria": "4*"}) == "Categoría: 4*"
    assert build_description({"proveedor": "ACME"}) == "Proveedor: ACME"
    assert build_description({}) is None
