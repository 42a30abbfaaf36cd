"""Profile service - profile setup and editing, and the musician directory."""

import logging
from collections.abc import Mapping
from typing import Any

from marketplace.domain import Money, Profile, ProfileId, ProfileRole, ServiceResult, UserId
from marketplace.domain.errors import (
    DomainError,
    ProfileExistsError,
    ProfileNotFoundError,
    ValidationFailedError,
)
from marketplace.services.common import parse_id, parse_money
from marketplace.stores.interfaces import ProfileStore

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("location", "bio", "youtube_url", "avatar_url")

# Directory price bands offered by the musician search.
PRICE_RANGES = {
    "low": lambda p: p.price_max is not None and p.price_max.amount <= 200,
    "medium": lambda p: (
        p.price_min is not None
        and p.price_max is not None
        and p.price_min.amount <= 500
        and p.price_max.amount <= 1000
    ),
    "high": lambda p: p.price_min is not None and p.price_min.amount > 500,
}


def validate_profile_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a profile payload into writable fields.

    Text is trimmed and blank optional text is stored as None. Blank genre
    entries are dropped.

    Raises:
        ValidationFailedError: If the display name is blank or a price is invalid.
    """
    fields: dict[str, Any] = {}
    if "display_name" in data:
        display_name = str(data["display_name"] or "").strip()
        if not display_name:
            raise ValidationFailedError("Display name is required")
        fields["display_name"] = display_name
    for name in TEXT_FIELDS:
        if name in data:
            fields[name] = str(data[name] or "").strip() or None
    if "genres" in data:
        fields["genres"] = tuple(
            genre.strip() for genre in data["genres"] or () if genre and genre.strip()
        )
    for name in ("price_min", "price_max"):
        if name in data:
            try:
                fields[name] = parse_money(data[name], name)
            except ValueError:
                raise ValidationFailedError("Price cannot be negative") from None
    if "is_band" in data:
        fields["is_band"] = None if data["is_band"] is None else bool(data["is_band"])
    return fields


def _check_price_range(fields: Mapping[str, Any], current: Profile | None = None) -> None:
    def stored(name: str) -> Money | None:
        if name in fields:
            return fields[name]
        return getattr(current, name) if current is not None else None

    price_min, price_max = stored("price_min"), stored("price_max")
    if price_min and price_max and price_min.amount > price_max.amount:
        raise ValidationFailedError("Minimum price cannot be greater than maximum price")


def matches_search(profile: Profile, term: str) -> bool:
    term = term.casefold()
    return any(
        term in (value or "").casefold()
        for value in (profile.display_name, profile.bio, profile.location)
    )


class ProfileService:
    """Service for the caller's own profile and public profile lookups."""

    def __init__(self, profiles: ProfileStore) -> None:
        self._profiles = profiles

    def get_my_profile(self, user_id: UserId) -> ServiceResult[Profile | None]:
        try:
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(profile)

    def get_profile(self, profile_id: str) -> ServiceResult[Profile | None]:
        try:
            profile = self._profiles.get_profile(parse_id(ProfileId, profile_id, "profile ID"))
            if profile is None:
                raise ProfileNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(profile)

    def create_profile(
        self, user_id: UserId, role: ProfileRole | str, data: Mapping[str, Any] | None = None
    ) -> ServiceResult[Profile | None]:
        """Set up the caller's profile. A user has at most one profile.

        ``is_band`` only applies to musicians and is cleared for organizers.
        """
        try:
            try:
                role = ProfileRole(role)
            except ValueError:
                raise ValidationFailedError("Invalid role") from None
            fields = validate_profile_fields(data or {})
            if role != ProfileRole.MUSICIAN:
                fields["is_band"] = None
            _check_price_range(fields)
            if self._profiles.get_profile_for_user(user_id) is not None:
                raise ProfileExistsError()
            profile = self._profiles.create_profile(user_id, role, fields)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Profile %s created for user %s", profile.id, user_id)
        return ServiceResult(profile)

    def update_profile(
        self, user_id: UserId, data: Mapping[str, Any]
    ) -> ServiceResult[Profile | None]:
        """Edit the caller's profile; prices are checked against the stored values."""
        try:
            fields = validate_profile_fields(data)
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            if not fields:
                return ServiceResult(profile)
            if "is_band" in fields and profile.role != ProfileRole.MUSICIAN:
                fields["is_band"] = None
            _check_price_range(fields, profile)
            updated = self._profiles.update_profile(profile.id, fields)
            if updated is None:
                raise ProfileNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(updated)

    def list_musicians(
        self,
        search: str | None = None,
        genre: str | None = None,
        price_range: str | None = None,
    ) -> ServiceResult[list[Profile]]:
        """Return musician profiles filtered by search text, genre and price band.

        The search term matches display name, bio or location ignoring case.
        """
        if price_range and price_range != "all" and price_range not in PRICE_RANGES:
            return ServiceResult([], ValidationFailedError("Invalid price range"))
        try:
            musicians = self._profiles.list_profiles(ProfileRole.MUSICIAN)
        except DomainError as exc:
            return ServiceResult([], exc)

        if search and search.strip():
            musicians = [p for p in musicians if matches_search(p, search.strip())]
        if genre:
            musicians = [p for p in musicians if genre in p.genres]
        if price_range in PRICE_RANGES:
            musicians = [p for p in musicians if PRICE_RANGES[price_range](p)]
        return ServiceResult(musicians)
