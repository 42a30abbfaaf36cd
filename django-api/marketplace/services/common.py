"""Helpers shared by the services."""

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

from marketplace.domain import BandId, MemberRole, Money, UserId
from marketplace.domain.errors import InvalidIdError, ValidationFailedError
from marketplace.stores.interfaces import BandStore

IdT = TypeVar("IdT")


def parse_id(id_cls: type[IdT], raw: Any, kind: str = "ID") -> IdT:
    """Return raw as an id_cls, raising InvalidIdError when it is malformed."""
    if isinstance(raw, id_cls):
        return raw
    try:
        return id_cls.from_string(raw)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError(kind) from None


def parse_money(value: Any, field: str) -> Money | None:
    """Return value as Money; blank is None. Negative amounts raise ValueError."""
    if value is None or value == "":
        return None
    if isinstance(value, Money):
        return value
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationFailedError(f"Invalid {field}") from None
    return Money(amount)


def index_by(records: Iterable[Any], attr: str = "id") -> dict[Any, Any]:
    return {getattr(record, attr): record for record in records}


def leads_band(bands: BandStore, band_id: BandId, user_id: UserId) -> bool:
    membership = bands.get_membership(band_id, user_id)
    return membership is not None and membership.role == MemberRole.LEADER
