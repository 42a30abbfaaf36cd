"""Application service - a musician applying to, listing and withdrawing gigs."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from marketplace.domain import (
    BandId,
    Booking,
    BookingId,
    BookingStatus,
    Event,
    EventId,
    Money,
    PostedByType,
    Profile,
    ServiceResult,
    UserId,
)
from marketplace.domain.errors import (
    AlreadyAppliedError,
    ApplicationNotFoundError,
    DomainError,
    EventNotFoundError,
    NotAuthorizedError,
    ProfileNotFoundError,
    ValidationFailedError,
)
from marketplace.services.common import leads_band, parse_id
from marketplace.stores.interfaces import (
    BandStore,
    BookingStore,
    EventStore,
    MessageStore,
    ProfileStore,
)

logger = logging.getLogger(__name__)

APPLICATION_EXTENSION = "job_application"


def _parse_quotation(value: Any) -> Money | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationFailedError("Invalid quotation") from None
    if amount <= 0:
        raise ValidationFailedError("Quotation must be greater than zero")
    return Money(amount)


def create_application_message(
    musician: Profile, event: Event, quotation: Money | None = None
) -> str:
    """Render the note sent to an organizer when a musician applies."""
    starts_at = event.starts_at
    when = f"{starts_at:%A}, {starts_at:%B} {starts_at.day}, {starts_at.year} at {starts_at:%I:%M %p}"
    lines = [f'Hi! I\'m interested in your event "{event.title}" on {when}.', ""]
    if event.location:
        lines.append(f"📍 Location: {event.location}")
    if quotation:
        lines.append(f"💰 My quotation: ₹{quotation}")
    elif musician.price_min and musician.price_max:
        lines.append(f"💰 My rate range: ₹{musician.price_min} - ₹{musician.price_max}")
    lines += [
        "",
        "I'd love to discuss the details and see if we're a good fit for your event. "
        "Please let me know if you have any questions!",
        "",
        "Best regards,",
        musician.display_name or "Musician",
    ]
    return "\n".join(lines)


class ApplicationService:
    """Service for the musician side of event applications."""

    def __init__(
        self,
        events: EventStore,
        bookings: BookingStore,
        profiles: ProfileStore,
        bands: BandStore,
        messages: MessageStore,
    ) -> None:
        self._events = events
        self._bookings = bookings
        self._profiles = profiles
        self._bands = bands
        self._messages = messages

    def apply_for_event(
        self,
        user_id: UserId,
        event_id: str,
        quotation: Any = None,
        additional_requirements: str | None = None,
        band_id: str | None = None,
    ) -> ServiceResult[Booking | None]:
        """File a pending application and notify the organizer.

        A failure to send the notification is logged and does not undo the
        application.
        """
        try:
            event_key = parse_id(EventId, event_id, "event ID")
            band_key = parse_id(BandId, band_id, "band ID") if band_id else None
            amount = _parse_quotation(quotation)

            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            if self._bookings.find_booking(event_key, profile.id) is not None:
                raise AlreadyAppliedError()
            event = self._events.get_event(event_key)
            if event is None:
                raise EventNotFoundError()
            if band_key and not leads_band(self._bands, band_key, user_id):
                raise NotAuthorizedError("Only band leaders can apply on behalf of a band")

            booking = self._bookings.create_booking(
                {
                    "event_id": event.id,
                    "musician_profile_id": profile.id,
                    "status": BookingStatus.PENDING,
                    "quotation": amount,
                    "additional_requirements": (additional_requirements or "").strip() or None,
                    "band_id": band_key,
                    "applied_by_type": PostedByType.BAND if band_key else PostedByType.INDIVIDUAL,
                }
            )
        except DomainError as exc:
            return ServiceResult(None, exc)

        self._notify_organizer(profile, event, booking)
        return ServiceResult(booking)

    def get_my_applications(self, user_id: UserId) -> ServiceResult[list[Booking]]:
        try:
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            bookings = self._bookings.list_bookings_for_musician(profile.id)
        except DomainError as exc:
            return ServiceResult([], exc)
        return ServiceResult(bookings)

    def withdraw_application(self, user_id: UserId, application_id: str) -> ServiceResult[None]:
        """Delete one of the caller's own applications."""
        try:
            booking_id = parse_id(BookingId, application_id, "application ID")
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            if not self._bookings.delete_booking(booking_id, profile.id):
                raise ApplicationNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def _notify_organizer(self, musician: Profile, event: Event, booking: Booking) -> None:
        try:
            self._messages.create_message(
                sender_profile_id=musician.id,
                recipient_profile_id=event.organizer_profile_id,
                topic=f"Job Application: {event.title}",
                content=create_application_message(musician, event, booking.quotation),
                extension=APPLICATION_EXTENSION,
                event_id=event.id,
                payload={
                    "event_id": str(event.id),
                    "application_id": str(booking.id),
                    "quotation": str(booking.quotation) if booking.quotation else None,
                    "event_title": event.title,
                    "event_date": event.starts_at.isoformat() if event.starts_at else None,
                },
            )
        except DomainError as exc:
            logger.error("Failed to send application message for booking %s: %s", booking.id, exc)
