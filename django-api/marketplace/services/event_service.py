"""Event service - event listing, aggregation and mutation.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants before touching the backend
- Perform orchestration and client-side joins the backend does not do
- Return ServiceResult pairs; expected failures are never raised
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from marketplace.domain import (
    BandId,
    BookingId,
    BookingStatus,
    Event,
    EventApplication,
    EventId,
    MemberRole,
    Money,
    PostedByType,
    Profile,
    ServiceResult,
    UserId,
)
from marketplace.domain.errors import (
    ApplicationNotFoundError,
    DomainError,
    EventNotFoundError,
    NotAuthorizedError,
    ProfileNotFoundError,
    ValidationFailedError,
)
from marketplace.domain.models import UNKNOWN_MUSICIAN
from marketplace.services.common import index_by, leads_band, parse_id, parse_money
from marketplace.stores.interfaces import BandStore, BookingStore, EventStore, ProfileStore

logger = logging.getLogger(__name__)

EVENT_FIELDS = frozenset(
    {
        "title",
        "description",
        "location",
        "event_type",
        "genres",
        "starts_at",
        "ends_at",
        "budget_min",
        "budget_max",
        "contact_email",
        "contact_phone",
        "requirements",
        "equipment_provided",
        "parking_info",
        "additional_notes",
        "band_id",
        "posted_by_type",
    }
)


def _parse_timestamp(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationFailedError(f"Invalid {field}") from None


def validate_event_fields(data: Mapping[str, Any], creating: bool) -> dict[str, Any]:
    """Check an event payload and return the normalized writable fields.

    Creation requires a title, a start time and an end time strictly after it.
    Updates that touch either timestamp must supply both.

    Raises:
        ValidationFailedError: If the payload breaks an event invariant.
        InvalidIdError: If band_id is malformed.
    """
    fields = {key: value for key, value in data.items() if key in EVENT_FIELDS}

    if creating and not str(fields.get("title") or "").strip():
        raise ValidationFailedError("Title is required")
    if "title" in fields:
        fields["title"] = str(fields["title"]).strip()

    start_value = fields.get("starts_at")
    end_value = fields.get("ends_at")
    if creating:
        if not start_value:
            raise ValidationFailedError("Start time is required")
        start = _parse_timestamp(start_value, "starts_at")
        if not end_value:
            raise ValidationFailedError("End time is required")
        end = _parse_timestamp(end_value, "ends_at")
    elif start_value or end_value:
        if not (start_value and end_value):
            raise ValidationFailedError(
                "Both start and end times are required when updating times"
            )
        start = _parse_timestamp(start_value, "starts_at")
        end = _parse_timestamp(end_value, "ends_at")
    else:
        start = end = None
        fields.pop("starts_at", None)
        fields.pop("ends_at", None)

    if start is not None and end is not None:
        try:
            if end <= start:
                raise ValidationFailedError("End time must be after start time")
        except TypeError:
            raise ValidationFailedError("Invalid date values") from None
        fields["starts_at"] = start
        fields["ends_at"] = end

    for name in ("budget_min", "budget_max"):
        if name in fields:
            try:
                fields[name] = parse_money(fields[name], name)
            except ValueError:
                raise ValidationFailedError("Budget cannot be negative") from None

    if "posted_by_type" in fields:
        try:
            fields["posted_by_type"] = PostedByType(fields["posted_by_type"])
        except ValueError:
            raise ValidationFailedError("Invalid posted_by_type") from None
    if fields.get("band_id"):
        fields["band_id"] = parse_id(BandId, fields["band_id"], "band ID")
    elif "band_id" in fields:
        fields["band_id"] = None
    if creating:
        check_event_consistency(fields)
    else:
        _check_budget_range(fields.get("budget_min"), fields.get("budget_max"))

    if "genres" in fields:
        fields["genres"] = tuple(fields["genres"] or ())
    return fields


def _check_budget_range(budget_min: Money | None, budget_max: Money | None) -> None:
    if budget_min and budget_max and budget_min.amount > budget_max.amount:
        raise ValidationFailedError("Minimum budget cannot be greater than maximum budget")


def check_event_consistency(fields: dict[str, Any], current: Event | None = None) -> None:
    """Check cross-field rules on the event as it will be stored.

    For an update, ``fields`` is read over ``current``. Clearing ``band_id``
    without naming a ``posted_by_type`` turns the event back into an
    individual posting.
    """

    def stored(name: str) -> Any:
        if name in fields:
            return fields[name]
        return getattr(current, name) if current is not None else None

    _check_budget_range(stored("budget_min"), stored("budget_max"))

    if current is not None and "band_id" in fields and fields["band_id"] is None:
        fields.setdefault("posted_by_type", PostedByType.INDIVIDUAL)
    if stored("posted_by_type") == PostedByType.BAND and not stored("band_id"):
        raise ValidationFailedError("Events posted by a band require a band_id")


class EventService:
    """Service for event listing, application aggregation and event mutations."""

    def __init__(
        self,
        events: EventStore,
        bookings: BookingStore,
        profiles: ProfileStore,
        bands: BandStore,
    ) -> None:
        self._events = events
        self._bookings = bookings
        self._profiles = profiles
        self._bands = bands

    def get_events(self) -> ServiceResult[list[Event]]:
        """Return all events ordered by start time with organizer and band attached."""
        try:
            events = self._events.list_events()
        except DomainError as exc:
            return ServiceResult([], exc)
        return ServiceResult(self._attach_details(events))

    def get_user_events(self, user_id: UserId) -> ServiceResult[list[Event]]:
        """Return events the user owns or that a band they lead has posted."""
        try:
            profile = self._profiles.get_profile_for_user(user_id)
            owned = self._events.list_events_for_organizer(profile.id) if profile else []
            led_band_ids = [
                membership.band_id
                for membership in self._bands.list_memberships(user_id, MemberRole.LEADER)
            ]
            band_events = self._events.list_events_for_bands(led_band_ids) if led_band_ids else []
        except DomainError as exc:
            return ServiceResult([], exc)

        union = list(index_by([*owned, *band_events]).values())
        if not union:
            return ServiceResult([])
        union.sort(key=lambda event: event.starts_at)
        return ServiceResult(self._attach_details(union))

    def get_event_applications(
        self, events: list[Event]
    ) -> ServiceResult[list[EventApplication]]:
        """Return the bookings filed against the given events, fully joined.

        Unresolvable musician profiles and events are replaced by placeholders
        rather than failing the aggregation.
        """
        if not events:
            return ServiceResult([])
        try:
            bookings = self._bookings.list_bookings_for_events([event.id for event in events])
        except DomainError as exc:
            return ServiceResult([], exc)

        musicians = self._lookup(
            self._profiles.get_profiles, {b.musician_profile_id for b in bookings}
        )
        bands = self._lookup(self._bands.get_bands, {b.band_id for b in bookings if b.band_id})
        events_by_id = index_by(events)

        applications = []
        for booking in bookings:
            profile = musicians.get(booking.musician_profile_id)
            if profile is None:
                profile = Profile.unknown_musician(booking.musician_profile_id)
            elif not profile.display_name:
                profile = replace(profile, display_name=UNKNOWN_MUSICIAN)
            applications.append(
                EventApplication(
                    booking=booking,
                    musician_profile=profile,
                    event=events_by_id.get(booking.event_id) or Event.unknown(booking.event_id),
                    band=bands.get(booking.band_id) if booking.band_id else None,
                )
            )
        return ServiceResult(applications)

    def create_event(self, user_id: UserId, data: Mapping[str, Any]) -> ServiceResult[Event | None]:
        try:
            fields = validate_event_fields(data, creating=True)
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            self._check_band_posting(user_id, fields)
            fields["organizer_profile_id"] = profile.id
            fields.setdefault(
                "posted_by_type",
                PostedByType.BAND if fields.get("band_id") else PostedByType.INDIVIDUAL,
            )
            event = self._events.create_event(fields)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Event %s created by user %s", event.id, user_id)
        return ServiceResult(event)

    def update_event(
        self, user_id: UserId, event_id: str, data: Mapping[str, Any]
    ) -> ServiceResult[Event | None]:
        try:
            fields = validate_event_fields(data, creating=False)
            event = self._get_managed_event(user_id, parse_id(EventId, event_id, "event ID"))
            if not fields:
                return ServiceResult(event)
            check_event_consistency(fields, event)
            self._check_band_posting(user_id, fields)
            updated = self._events.update_event(event.id, fields)
            if updated is None:
                raise EventNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(updated)

    def delete_event(self, user_id: UserId, event_id: str) -> ServiceResult[None]:
        try:
            event = self._get_managed_event(user_id, parse_id(EventId, event_id, "event ID"))
            self._events.delete_event(event.id)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Event %s deleted by user %s", event.id, user_id)
        return ServiceResult(None)

    def update_application_status(
        self,
        user_id: UserId,
        application_id: str,
        status: BookingStatus | str,
        scheduled_start: datetime | None = None,
        scheduled_end: datetime | None = None,
    ) -> ServiceResult[None]:
        """Set an application's status in a single write.

        Only the event's manager or the applicant may change it; which
        transitions are allowed is left to the backend.
        """
        try:
            try:
                status = BookingStatus(status)
            except ValueError:
                raise ValidationFailedError("Invalid application status") from None
            booking_id = parse_id(BookingId, application_id, "application ID")
            booking = self._bookings.get_booking(booking_id)
            if booking is None:
                raise ApplicationNotFoundError()
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None or profile.id != booking.musician_profile_id:
                self._get_managed_event(user_id, booking.event_id)

            fields: dict[str, Any] = {"status": status}
            if scheduled_start:
                fields["scheduled_start"] = scheduled_start
            if scheduled_end:
                fields["scheduled_end"] = scheduled_end
            self._bookings.update_booking(booking_id, fields)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def _attach_details(self, events: list[Event]) -> list[Event]:
        organizers = self._lookup(
            self._profiles.get_profiles, {event.organizer_profile_id for event in events}
        )
        band_ids = {event.band_id for event in events if event.band_id}
        bands = self._lookup(self._bands.get_bands, band_ids) if band_ids else {}
        return [
            replace(
                event,
                organizer=organizers.get(event.organizer_profile_id),
                band=bands.get(event.band_id) if event.band_id else None,
            )
            for event in events
        ]

    def _lookup(
        self, fetch: Callable[[set[Any]], Iterable[Any]], ids: Iterable[Any]
    ) -> dict[Any, Any]:
        """Bulk-fetch records by id; a failed lookup degrades to no matches."""
        ids = set(ids)
        if not ids:
            return {}
        try:
            return index_by(fetch(ids))
        except DomainError as exc:
            logger.warning("Bulk lookup failed, continuing without matches: %s", exc)
            return {}

    def _get_managed_event(self, user_id: UserId, event_id: EventId) -> Event:
        """Return the event if the user owns it or leads the band that posted it."""
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError()
        profile = self._profiles.get_profile_for_user(user_id)
        if profile is not None and profile.id == event.organizer_profile_id:
            return event
        if event.band_id and leads_band(self._bands, event.band_id, user_id):
            return event
        raise NotAuthorizedError("Only the event owner can manage this event")

    def _check_band_posting(self, user_id: UserId, fields: Mapping[str, Any]) -> None:
        band_id = fields.get("band_id")
        if band_id and not leads_band(self._bands, band_id, user_id):
            raise NotAuthorizedError("Only band leaders can post events for their band")
