"""Domain models representing persisted state and assembled aggregates.

These are pure domain objects with no API input rules.
Django ORM models are in marketplace/models.py (persistence layer).

Nested fields (``organizer``, ``band``, ``members``, ``requester`` ...) are
never persisted; services attach them when stitching records together.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Self

from marketplace.domain.value_objects import (
    BandId,
    BandRequestId,
    BookingId,
    BookingStatus,
    EventId,
    MemberRole,
    Money,
    PostedByType,
    ProfileId,
    ProfileRole,
    RequestStatus,
    RequestType,
    UserId,
)

UNKNOWN_MUSICIAN = "Unknown Musician"
UNKNOWN_USER = "Unknown User"
UNKNOWN_EVENT = "Unknown Event"


@dataclass(frozen=True)
class Profile:
    """Display identity for a user."""

    id: ProfileId | None
    user_id: UserId | None
    role: ProfileRole | None
    display_name: str | None
    bio: str | None = None
    genres: tuple[str, ...] = ()
    location: str | None = None
    avatar_url: str | None = None
    price_min: Money | None = None
    price_max: Money | None = None
    youtube_url: str | None = None
    is_band: bool | None = None

    @classmethod
    def unknown_musician(cls, profile_id: ProfileId) -> Self:
        """Placeholder for a booking whose musician profile cannot be resolved."""
        return cls(
            id=profile_id,
            user_id=None,
            role=ProfileRole.MUSICIAN,
            display_name=UNKNOWN_MUSICIAN,
        )

    @classmethod
    def unknown_user(cls, user_id: UserId) -> Self:
        """Placeholder for a band member without a resolvable profile."""
        return cls(id=None, user_id=user_id, role=None, display_name=UNKNOWN_USER)


@dataclass(frozen=True)
class BandMember:
    id: Any
    band_id: BandId
    user_id: UserId
    role: MemberRole
    joined_at: datetime
    user: Profile | None = None

    @property
    def is_leader(self) -> bool:
        return self.role == MemberRole.LEADER


@dataclass(frozen=True)
class Band:
    """Domain representation of a Band."""

    id: BandId
    name: str
    description: str | None
    created_by: UserId
    is_active: bool
    created_at: datetime
    updated_at: datetime
    member_count: int = 0
    members: tuple[BandMember, ...] = ()


@dataclass(frozen=True)
class BandRequest:
    """Pending invitation or join request between a band and a musician."""

    id: BandRequestId
    band_id: BandId
    requester_id: UserId
    request_type: RequestType
    status: RequestStatus
    message: str | None
    created_at: datetime
    updated_at: datetime
    band: Band | None = None
    requester: Profile | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``starts_at`` is only ever None on the placeholder built by
    :meth:`unknown`; persisted events always carry a start time.
    """

    id: EventId
    title: str
    starts_at: datetime | None
    ends_at: datetime | None
    organizer_profile_id: ProfileId | None
    description: str | None = None
    location: str | None = None
    event_type: str | None = None
    genres: tuple[str, ...] = ()
    budget_min: Money | None = None
    budget_max: Money | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    requirements: str | None = None
    equipment_provided: str | None = None
    parking_info: str | None = None
    additional_notes: str | None = None
    band_id: BandId | None = None
    posted_by_type: PostedByType = PostedByType.INDIVIDUAL
    created_at: datetime | None = None
    organizer: Profile | None = None
    band: Band | None = None

    @classmethod
    def unknown(cls, event_id: EventId) -> Self:
        """Placeholder for a booking whose event is not among those loaded."""
        return cls(
            id=event_id,
            title=UNKNOWN_EVENT,
            starts_at=None,
            ends_at=None,
            organizer_profile_id=None,
        )

    @property
    def effective_end(self) -> datetime | None:
        return self.ends_at or self.starts_at


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking (an application to an event)."""

    id: BookingId
    event_id: EventId
    musician_profile_id: ProfileId
    status: BookingStatus
    created_at: datetime
    band_id: BandId | None = None
    applied_by_type: PostedByType = PostedByType.INDIVIDUAL
    quotation: Money | None = None
    additional_requirements: str | None = None
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None


@dataclass(frozen=True)
class EventApplication:
    """A booking joined with its musician profile, band and event."""

    booking: Booking
    musician_profile: Profile
    event: Event
    band: Band | None = None


@dataclass(frozen=True)
class Message:
    id: Any
    sender_profile_id: ProfileId
    recipient_profile_id: ProfileId
    topic: str
    content: str
    extension: str | None
    event_id: EventId | None
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass(frozen=True)
class Review:
    id: Any
    booking_id: BookingId
    rating: int
    comment: str | None
    reviewer_profile_id: ProfileId
    reviewee_profile_id: ProfileId
    created_at: datetime
    reviewer: Profile | None = None
    event: Event | None = None


@dataclass(frozen=True)
class ReviewSummary:
    """Reviews received by a profile with their aggregates."""

    reviews: tuple[Review, ...]
    total: int
    average_rating: float


@dataclass(frozen=True)
class Conversation:
    """Direct messages between the caller and one other profile."""

    other_profile: Profile
    last_message: Message | None = None
    messages: tuple[Message, ...] = ()
