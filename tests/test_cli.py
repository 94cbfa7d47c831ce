"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from travelsync import __version__
from travelsync.cli.main import app
from travelsync.core.config.loader import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command from an empty directory with no configured file."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


# =============================================================================
# reservation
# =============================================================================


def test_normalize_json(tmp_path):
    path = write_json(tmp_path / "extraction.json", {
        "codigo": "R-1",
        "contactEmail": "Ventas@Acme.com",
        "passengers": [{"firstName": "Juan", "lastName": "Perez", "paxType": "ADT"}],
        "hotel": {"nombre_hotel": "Plaza", "in": "10/01/2026", "out": "12/01/2026"},
    })

    result = runner.invoke(
        app, ["reservation", "normalize", path, "--format", "json", "--today", "2026-01-05"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["codigo"] == "R-1"
    assert data["contactEmail"] == "ventas@acme.com"
    assert data["reservationDate"] == "2026-01-05"
    assert data["travelDate"] == "2026-01-10"
    assert data["hotel"]["nts"] == 2
    assert data["passengers"][0]["passengerType"] == "ADU"
    assert 0.0 <= data["qualityScore"] <= 1.0


def test_normalize_table(tmp_path):
    path = write_json(tmp_path / "extraction.json", {"codigo": "R-1", "flights": [{"flightNumber": "AR1"}]})

    result = runner.invoke(app, ["reservation", "normalize", path])

    assert result.exit_code == 0
    assert "R-1" in result.stdout
    assert "Dropped flights[0]" in result.stdout


def test_normalize_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["reservation", "normalize", str(path)])

    assert result.exit_code == 1


def test_normalize_missing_file(tmp_path):
    result = runner.invoke(app, ["reservation", "normalize", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_diff_json(tmp_path):
    old = write_json(tmp_path / "old.json", {
        "status": "CONFIRMADA [FI]",
        "passengers": [{"firstName": "Juan", "documentNumber": "1"}],
    })
    new = write_json(tmp_path / "new.json", {
        "status": "CANCELADA [CX]",
        "passengers": [
            {"firstName": "Juan", "documentNumber": "1"},
            {"firstName": "Ana", "documentNumber": "2"},
        ],
    })

    result = runner.invoke(app, ["reservation", "diff", new, old, "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["changes"]["status"] is True
    assert data["changes"]["passengers"] is True
    assert data["changes"]["client"] is False
    assert [p["firstName"] for p in data["changedPassengers"]] == ["Ana"]


def test_diff_without_changes(tmp_path):
    path = write_json(tmp_path / "same.json", {"status": "CONFIRMADA [FI]"})

    result = runner.invoke(app, ["reservation", "diff", path, path])

    assert result.exit_code == 0
    assert "No changes" in result.stdout


def test_diff_new_reservation(tmp_path):
    path = write_json(tmp_path / "new.json", {"status": "CONFIRMADA [FI]"})

    result = runner.invoke(app, ["reservation", "diff", path, "--format", "json"])

    assert result.exit_code == 0
    assert all(json.loads(result.stdout)["changes"].values())


# =============================================================================
# catalog
# =============================================================================


def test_catalog_match_json(tmp_path):
    path = write_json(tmp_path / "search.json", {
        "target": {"nombre_hotel": "Hotel Plaza", "ciudad": "Mendoza"},
        "candidates": [
            {"nombre_hotel": "Hotel Sol", "ciudad": "Salta"},
            {"nombre_hotel": "Hotel Plaza Suites", "ciudad": "Mendoza"},
        ],
    })

    result = runner.invoke(app, ["catalog", "match", path, "--kind", "hotel", "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert len(data["scores"]) == 2
    assert data["match"]["index"] == 1
    assert data["enriched"] is None


def test_catalog_match_enrich(tmp_path):
    path = write_json(tmp_path / "search.json", {
        "target": {"servicio": "City Tour", "destino": "MDZ"},
        "candidates": [{"servicio": "City Tour", "ciudad": "Mendoza"}],
    })

    result = runner.invoke(
        app, ["catalog", "match", path, "-k", "servicio", "--enrich", "--format", "json"]
    )

    assert result.exit_code == 0
    enriched = json.loads(result.stdout)["enriched"]
    assert enriched["destino"] == "Mendoza"
    assert enriched["estado"] == "RQ"


def test_catalog_match_no_match(tmp_path):
    path = write_json(tmp_path / "search.json", {
        "target": {"nombre_hotel": "Sheraton"},
        "candidates": [{"nombre_hotel": "Hotel Sol"}],
    })

    result = runner.invoke(app, ["catalog", "match", path, "--kind", "hotel"])

    assert result.exit_code == 0
    assert "No confident match" in result.stdout


def test_catalog_match_bad_shape(tmp_path):
    path = write_json(tmp_path / "search.json", [{"nombre_hotel": "Hotel Sol"}])

    result = runner.invoke(app, ["catalog", "match", path])

    assert result.exit_code == 1


def test_resolve():
    result = runner.invoke(
        app, ["catalog", "resolve", "Confirmed", "-o", "CONFIRMADA [FI]", "-o", "CANCELADA [CX]"]
    )

    assert result.exit_code == 0
    assert "CONFIRMADA [FI]" in result.stdout
    assert "keyword" in result.stdout


def test_resolve_no_match():
    result = runner.invoke(app, ["catalog", "resolve", "Zzz", "-o", "CONFIRMADA [FI]"])
    assert result.exit_code == 1


def test_resolve_requires_options():
    result = runner.invoke(app, ["catalog", "resolve", "Confirmada"])
    assert result.exit_code == 1


# =============================================================================
# init and configuration
# =============================================================================


def test_init(tmp_path):
    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0
    assert (tmp_path / DEFAULT_CONFIG_PATH).exists()
    assert (tmp_path / "logs").is_dir()

    assert runner.invoke(app, ["init"]).exit_code == 1
    assert runner.invoke(app, ["init", "--force"]).exit_code == 0


def test_config_option_applies(tmp_path):
    """A configured threshold of 100 rejects even a perfect score."""
    config = tmp_path / "app.yaml"
    config.write_text("matching:\n  threshold: 100\n", encoding="utf-8")
    path = write_json(tmp_path / "search.json", {
        "target": {"servicio": "City Tour"},
        "candidates": [{"servicio": "City Tour"}],
    })

    result = runner.invoke(
        app, ["--config", str(config), "catalog", "match", path, "-k", "servicio", "--format", "json"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["match"] is None


def test_invalid_config_exits(tmp_path):
    config = tmp_path / "app.yaml"
    config.write_text("matching:\n  threshold: 150\n", encoding="utf-8")

    result = runner.invoke(app, ["--config", str(config), "catalog", "resolve", "x", "-o", "x"])

    assert result.exit_code == 1
