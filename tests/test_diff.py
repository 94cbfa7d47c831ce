"""Tests for change detection between reservation versions."""

from datetime import date

import pytest

from travelsync.core.normalize.canonical import Passenger, assemble_reservation
from travelsync.core.normalize.diff import ChangeSet, diff_passengers, diff_reservations

TODAY = date(2026, 1, 5)

RAW = {
    "codigo": "R-1001",
    "status": "CONFIRMADA [FI]",
    "client": "ACME TRAVEL",
    "adults": 2,
    "passengers": [
        {"firstName": "Juan", "lastName": "Perez", "documentNumber": "30123456"},
        {"firstName": "Maria", "lastName": "Gomez", "documentNumber": "AB123456"},
    ],
    "hotel": {"nombre_hotel": "Hotel Mendoza Plaza", "in": "2026-01-10", "out": "2026-01-15"},
    "services": [{"servicio": "Transfer aeropuerto"}],
}


@pytest.fixture
def reservation():
    return assemble_reservation(RAW, today=TODAY)


# =============================================================================
# Reservation Diff
# =============================================================================


def test_create_marks_everything_changed(reservation):
    """Without a stored version every section must be filled."""
    changes = diff_reservations(reservation, None)

    assert changes == ChangeSet.all_changed()
    assert all(changes.to_dict().values())


def test_identical_reservations_have_no_changes(reservation):
    changes = diff_reservations(reservation, assemble_reservation(RAW, today=TODAY))

    assert not changes.has_changes
    assert changes.changed_fields() == []


def test_non_object_input_counts_as_create():
    assert diff_reservations(["x"], {"status": "OK"}).has_changes
    assert diff_reservations({"status": "OK"}, "old") == ChangeSet.all_changed()


def test_header_change_is_flagged():
    changes = diff_reservations({"status": "CANCELADA [CX]"}, {"status": "CONFIRMADA [FI]"})

    assert changes.status
    assert changes.changed_fields() == ["status"]


@pytest.mark.parametrize("new,old", [
    ("5", 5),
    (2.0, 2),
    ("", None),
    ("   ", None),
    (" ACME ", "ACME"),
])
def test_loose_scalar_equality(new, old):
    """Numbers compare by value, blank compares equal to absent."""
    assert not diff_reservations({"adults": new}, {"adults": old}).adults


def test_empty_versus_value_is_a_change():
    assert diff_reservations({"client": ""}, {"client": "ACME"}).client


def test_hotel_on_one_side_only():
    hotel = {"nombre_hotel": "Plaza", "in": "2026-01-10"}

    assert diff_reservations({"hotel": hotel}, {}).hotel
    assert diff_reservations({}, {"hotel": hotel}).hotel
    assert not diff_reservations({"hotel": None}, {}).hotel


def test_hotel_key_union():
    """A key present on one side only is compared against absent."""
    old = {"nombre_hotel": "Plaza"}

    assert not diff_reservations({"hotel": {"nombre_hotel": "Plaza", "nts": None}}, {"hotel": old}).hotel
    assert diff_reservations({"hotel": {"nombre_hotel": "Plaza", "nts": 2}}, {"hotel": old}).hotel


def test_hotel_that_is_not_an_object_is_a_change():
    assert diff_reservations({"hotel": "Plaza"}, {"hotel": {"nombre_hotel": "Plaza"}}).hotel


def test_services_length_change():
    old = {"services": [{"servicio": "Transfer"}]}
    new = {"services": [{"servicio": "Transfer"}, {"servicio": "City Tour"}]}

    changes = diff_reservations(new, old)

    assert changes.services
    assert not changes.flights
    assert not changes.passengers


def test_missing_collection_equals_empty():
    assert not diff_reservations({"flights": []}, {}).flights


def test_non_list_collection_is_a_change():
    assert diff_reservations({"services": {"servicio": "Transfer"}}, {"services": []}).services


def test_reordered_passengers_are_paired_by_document(reservation):
    """Passengers carrying a document are matched regardless of order."""
    reordered = dict(RAW, passengers=list(reversed(RAW["passengers"])))

    changes = diff_reservations(assemble_reservation(reordered, today=TODAY), reservation)

    assert not changes.passengers


def test_replaced_passenger_document_is_a_change(reservation):
    passengers = [dict(RAW["passengers"][0]), dict(RAW["passengers"][1], documentNumber="ZZ999")]
    changed = dict(RAW, passengers=passengers)

    assert diff_reservations(assemble_reservation(changed, today=TODAY), reservation).passengers


def test_passengers_without_documents_compare_by_position():
    old = {"passengers": [{"firstName": "Juan"}, {"firstName": "Maria"}]}
    new = {"passengers": [{"firstName": "Maria"}, {"firstName": "Juan"}]}

    assert diff_reservations(new, old).passengers


# =============================================================================
# Passenger Diff
# =============================================================================


def test_phone_only_change_is_ignored():
    old = [{"firstName": "Juan", "documentNumber": "1", "phoneNumber": "111"}]
    new = [{"firstName": "Juan", "documentNumber": "1", "phoneNumber": "222"}]

    assert diff_passengers(new, old) == []


def test_passenger_without_document_is_new():
    result = diff_passengers([{"firstName": "Juan"}], [{"firstName": "Juan"}])

    assert result == [{"firstName": "Juan", "isNew": True}]


def test_unknown_document_is_new():
    result = diff_passengers([{"firstName": "Ana", "documentNumber": "2"}], [{"documentNumber": "1"}])

    assert result[0]["isNew"] is True


def test_changed_name_is_modified():
    old = [{"firstName": "Juan", "lastName": "Perez", "documentNumber": 30123456}]
    new = [{"firstName": "Juan Carlos", "lastName": "Perez", "documentNumber": "30123456"}]

    result = diff_passengers(new, old)

    assert len(result) == 1
    assert result[0]["isModified"] is True
    assert "isNew" not in result[0]


def test_empty_old_list_makes_all_new():
    new = [Passenger(first_name="Juan", document_number="1"), Passenger(first_name="Ana")]
    result = diff_passengers(new, [])

    assert [p["firstName"] for p in result] == ["Juan", "Ana"]
    assert all(p["isNew"] for p in result)


def test_legacy_keys_compare_equal():
    """birthDate and paxType are read as dateOfBirth and passengerType."""
    old = [{"documentNumber": "1", "dateOfBirth": "1985-03-15", "passengerType": "ADU"}]
    new = [{"documentNumber": "1", "birthDate": "1985-03-15", "paxType": "ADU"}]

    assert diff_passengers(new, old) == []


def test_passenger_records_accepted():
    old = [Passenger(first_name="Juan", document_number="1")]
    new = [{"firstName": "Juan", "documentNumber": "1", "passengerType": "ADU"}]

    assert diff_passengers(new, old) == []


def test_no_passengers():
    assert diff_passengers(None, None) == []


# =============================================================================
# ChangeSet
# =============================================================================


def test_changeset_wire_keys():
    data = ChangeSet(hotel=True, contact_email=True).to_dict()

    assert len(data) == 25
    assert data["contactEmail"] is True
    assert data["reservationType"] is False
    assert ChangeSet(hotel=True, contact_email=True).changed_fields() == ["contactEmail", "hotel"]


def test_duplicated_document_is_a_change():
    """Two new passengers cannot both pair with the same stored one."""
    old = {"passengers": [{"firstName": "Juan", "documentNumber": "1"}, {"firstName": "Ana", "documentNumber": "2"}]}
    new = {"passengers": [{"firstName": "Juan", "documentNumber": "1"}, {"firstName": "Juan", "documentNumber": "1"}]}

    assert diff_reservations(new, old).passengers


def test_matching_duplicates_are_equal():
    passengers = [{"firstName": "Juan", "documentNumber": "1"}, {"firstName": "Juan", "documentNumber": "1"}]

    assert not diff_reservations({"passengers": passengers}, {"passengers": list(passengers)}).passengers


def test_blank_legacy_key_falls_back():
    old = [{"documentNumber": "1", "dateOfBirth": "1985-03-15"}]
    new = [{"documentNumber": "1", "dateOfBirth": " ", "birthDate": "1985-03-15"}]

    assert diff_passengers(new, old) == []
