"""Review service - reviews exchanged between musicians and organizers."""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from marketplace.domain import (
    Booking,
    BookingStatus,
    Event,
    Profile,
    ProfileId,
    Review,
    ReviewSummary,
    ServiceResult,
    UserId,
)
from marketplace.domain.errors import (
    AlreadyReviewedError,
    DomainError,
    ProfileNotFoundError,
    ReviewNotAllowedError,
    ValidationFailedError,
)
from marketplace.services.common import index_by, parse_id
from marketplace.stores.interfaces import BookingStore, EventStore, ProfileStore, ReviewStore

logger = logging.getLogger(__name__)

REVIEWABLE_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CONFIRMED)


def is_reviewable(booking: Booking, event: Event, now: datetime) -> bool:
    """A booking is reviewable once completed, or confirmed and its event is over."""
    if booking.status == BookingStatus.COMPLETED:
        return True
    end = event.effective_end
    return booking.status == BookingStatus.CONFIRMED and end is not None and end <= now


class ReviewService:
    def __init__(
        self,
        reviews: ReviewStore,
        bookings: BookingStore,
        events: EventStore,
        profiles: ProfileStore,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._reviews = reviews
        self._bookings = bookings
        self._events = events
        self._profiles = profiles
        self._clock = clock

    def submit_review(
        self,
        user_id: UserId,
        reviewee_profile_id: str,
        rating: int,
        comment: str | None = None,
    ) -> ServiceResult[Review | None]:
        """Review someone the caller worked with on a finished booking.

        Either side may review the other: the musician reviews the event's
        organizer, or the organizer reviews the musician.
        """
        try:
            if not isinstance(rating, int) or not 1 <= rating <= 5:
                raise ValidationFailedError("Rating must be between 1 and 5")
            reviewee_id = parse_id(ProfileId, reviewee_profile_id, "profile ID")
            reviewer = self._profiles.get_profile_for_user(user_id)
            if reviewer is None:
                raise ProfileNotFoundError()
            if reviewer.id == reviewee_id:
                raise ValidationFailedError("You cannot review yourself")

            booking = self._find_shared_booking(
                musician_id=reviewer.id, organizer_id=reviewee_id
            ) or self._find_shared_booking(musician_id=reviewee_id, organizer_id=reviewer.id)
            if booking is None:
                raise ReviewNotAllowedError()
            if self._reviews.find_review(booking.id, reviewer.id) is not None:
                raise AlreadyReviewedError()

            review = self._reviews.create_review(
                booking_id=booking.id,
                rating=rating,
                comment=(comment or "").strip() or None,
                reviewer_profile_id=reviewer.id,
                reviewee_profile_id=reviewee_id,
            )
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(review)

    def get_reviews(self, profile_id: str) -> ServiceResult[ReviewSummary | None]:
        """Return the reviews a profile received with reviewer and event attached."""
        try:
            reviews = self._reviews.list_reviews_for_reviewee(
                parse_id(ProfileId, profile_id, "profile ID")
            )
        except DomainError as exc:
            return ServiceResult(None, exc)

        reviewers: dict[ProfileId, Profile] = {}
        events_by_booking: dict = {}
        if reviews:
            try:
                reviewers = index_by(
                    self._profiles.get_profiles({r.reviewer_profile_id for r in reviews})
                )
                bookings = self._bookings.get_bookings({r.booking_id for r in reviews})
                events = index_by(self._events.get_events({b.event_id for b in bookings}))
                events_by_booking = {b.id: events.get(b.event_id) for b in bookings}
            except DomainError as exc:
                logger.warning("Could not load review details: %s", exc)

        reviews = tuple(
            replace(
                r,
                reviewer=reviewers.get(r.reviewer_profile_id),
                event=events_by_booking.get(r.booking_id),
            )
            for r in reviews
        )
        total = len(reviews)
        average = sum(r.rating for r in reviews) / total if total else 0.0
        return ServiceResult(ReviewSummary(reviews=reviews, total=total, average_rating=average))

    def _find_shared_booking(self, musician_id: ProfileId, organizer_id: ProfileId) -> Booking | None:
        bookings = self._bookings.list_bookings_for_musician(musician_id, REVIEWABLE_STATUSES)
        if not bookings:
            return None
        events = index_by(self._events.get_events({b.event_id for b in bookings}))
        now = self._clock()
        for booking in bookings:
            event = events.get(booking.event_id)
            if event and event.organizer_profile_id == organizer_id and is_reviewable(booking, event, now):
                return booking
        return None
