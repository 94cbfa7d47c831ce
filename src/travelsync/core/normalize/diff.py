"""
Change detection between reservation versions.

When an existing reservation is edited, only the sections that actually
changed are touched in the booking application. The ChangeSet computed
here tells the automation which header fields and collections differ.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from typing import Any

from ..logging import get_logger
from .canonical import HEADER_FIELDS, Passenger, Reservation
from .detail import BookableDetail

logger = get_logger("normalize.diff")


# Header attributes tracked for edits, in form order
TRACKED_HEADER_FIELDS = (
    "reservation_type",
    "status",
    "client",
    "travel_date",
    "seller",
    "reservation_date",
    "tour_end_date",
    "due_date",
    "contact",
    "contact_email",
    "contact_phone",
    "currency",
    "exchange_rate",
    "commission",
    "net_amount",
    "gross_amount",
    "trip_name",
    "product_code",
    "adults",
    "children",
    "infants",
)

# Passenger fields compared by diff_passengers, with accepted legacy keys.
# phoneNumber is not compared.
PASSENGER_COMPARE_FIELDS: dict[str, tuple[str, ...]] = {
    "firstName": ("firstName",),
    "lastName": ("lastName",),
    "documentNumber": ("documentNumber",),
    "documentType": ("documentType",),
    "dateOfBirth": ("dateOfBirth", "birthDate"),
    "nationality": ("nationality",),
    "sex": ("sex",),
    "passengerType": ("passengerType", "paxType"),
    "cuilCuit": ("cuilCuit",),
    "address": ("address", "direccion"),
}


@dataclass
class ChangeSet:
    """Which parts of a reservation differ between two versions."""

    reservation_type: bool = False
    status: bool = False
    client: bool = False
    travel_date: bool = False
    seller: bool = False
    reservation_date: bool = False
    tour_end_date: bool = False
    due_date: bool = False
    contact: bool = False
    contact_email: bool = False
    contact_phone: bool = False
    currency: bool = False
    exchange_rate: bool = False
    commission: bool = False
    net_amount: bool = False
    gross_amount: bool = False
    trip_name: bool = False
    product_code: bool = False
    adults: bool = False
    children: bool = False
    infants: bool = False

    # Collections
    hotel: bool = False
    services: bool = False
    flights: bool = False
    passengers: bool = False

    @classmethod
    def all_changed(cls) -> "ChangeSet":
        """Full-create semantics: every section must be filled."""
        return cls(**{f.name: True for f in fields(cls)})

    @property
    def has_changes(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def changed_fields(self) -> list[str]:
        """Wire names of the sections that differ."""
        return [key for key, changed in self.to_dict().items() if changed]

    def to_dict(self) -> dict[str, bool]:
        """Convert to camelCase flags."""
        return {HEADER_FIELDS.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}


# =============================================================================
# Reservation Diff
# =============================================================================


def diff_reservations(
    new: Reservation | Mapping[str, Any],
    old: Reservation | Mapping[str, Any] | None,
) -> ChangeSet:
    """Compute which sections changed between two reservation versions.

    Args:
        new: Reservation the user wants to save
        old: Stored reservation (None when creating)

    Returns:
        ChangeSet; all flags set when old is None
    """
    if old is None:
        return ChangeSet.all_changed()

    new_dict = _as_dict(new)
    old_dict = _as_dict(old)
    if new_dict is None or old_dict is None:
        logger.debug("Reservation is not an object, treating everything as changed")
        return ChangeSet.all_changed()

    changes = ChangeSet()
    for attr in TRACKED_HEADER_FIELDS:
        key = HEADER_FIELDS[attr]
        setattr(changes, attr, not _values_equal(new_dict.get(key), old_dict.get(key)))

    changes.hotel = not _objects_equal(new_dict.get("hotel"), old_dict.get("hotel"))
    for key in ("services", "flights", "passengers"):
        setattr(changes, key, not _collections_equal(new_dict.get(key), old_dict.get(key)))

    return changes


def _values_equal(a: Any, b: Any) -> bool:
    """Compare scalars with None, empty and whitespace collapsed to absent."""
    a = _normalize_scalar(a)
    b = _normalize_scalar(b)
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a == b


def _normalize_scalar(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _objects_equal(a: Any, b: Any) -> bool:
    """Compare two objects key by key over the union of their keys."""
    if not a and not b:
        return True
    a_dict = _as_dict(a) if a else None
    b_dict = _as_dict(b) if b else None
    if a_dict is None or b_dict is None:
        return False
    return all(_values_equal(a_dict.get(key), b_dict.get(key)) for key in set(a_dict) | set(b_dict))


def _collections_equal(a: Any, b: Any) -> bool:
    """Compare two collections, pairing items by documentNumber when both have one.

    Each old item pairs with at most one new item, so duplicated documents
    on the new side count as a difference.
    """
    a = [] if a is None else a
    b = [] if b is None else b
    if not _is_list(a) or not _is_list(b):
        return False
    if len(a) != len(b):
        return False

    old_items = [_as_dict(item) for item in b]
    paired: set[int] = set()
    for index, item in enumerate(a):
        new_item = _as_dict(item)
        old_index: int | None = index
        if new_item is None or old_items[index] is None:
            return False

        document = _normalize_scalar(new_item.get("documentNumber"))
        if document and _normalize_scalar(old_items[index].get("documentNumber")):
            old_index = _index_by_document(old_items, document, skip=paired)

        if old_index is None or old_index in paired:
            return False
        paired.add(old_index)

        if not _objects_equal(new_item, old_items[old_index]):
            return False

    return True


# =============================================================================
# Passenger Diff
# =============================================================================


def diff_passengers(
    new_list: Sequence[Passenger | Mapping[str, Any]] | None,
    old_list: Sequence[Passenger | Mapping[str, Any]] | None,
) -> list[dict[str, Any]]:
    """Classify passengers as new or modified.

    A new passenger with no old passenger sharing its documentNumber is
    tagged ``isNew``. One whose compared fields differ from its old
    counterpart is tagged ``isModified``. Unchanged passengers are omitted.

    Args:
        new_list: Passengers the user wants to save
        old_list: Stored passengers

    Returns:
        Passenger dicts with isNew or isModified set
    """
    old_items = [d for d in (_as_dict(p) for p in (old_list or [])) if d is not None]
    changed: list[dict[str, Any]] = []

    for passenger in new_list or []:
        new_item = _as_dict(passenger)
        if new_item is None:
            continue

        document = _normalize_scalar(new_item.get("documentNumber"))
        old_item = _find_by_document(old_items, document) if document else None

        if old_item is None:
            changed.append({**new_item, "isNew": True})
        elif not _passengers_equal(new_item, old_item):
            changed.append({**new_item, "isModified": True})

    return changed


def _passengers_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    return all(
        _values_equal(_get_first(a, keys), _get_first(b, keys))
        for keys in PASSENGER_COMPARE_FIELDS.values()
    )


# =============================================================================
# Helpers
# =============================================================================


def _as_dict(value: Any) -> dict[str, Any] | None:
    """Records become their wire dict; anything but a mapping becomes None."""
    if isinstance(value, (Reservation, Passenger, BookableDetail)):
        value = value.to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    return None


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _index_by_document(
    items: list[dict[str, Any] | None],
    document: str,
    skip: set[int],
) -> int | None:
    for index, item in enumerate(items):
        if index not in skip and item is not None and _normalize_scalar(item.get("documentNumber")) == document:
            return index
    return None


def _find_by_document(items: list[dict[str, Any] | None], document: str) -> dict[str, Any] | None:
    for item in items:
        if item is not None and _normalize_scalar(item.get("documentNumber")) == document:
            return item
    return None


def _get_first(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any | None:
    for key in keys:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None
