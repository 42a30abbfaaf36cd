"""Django ORM implementation of the marketplace stores.

Every write runs in its own ``transaction.atomic()`` block so a failing
statement is rolled back on its own; multi-step operations in the services
are therefore not atomic as a whole.
"""

import functools
import logging
from collections.abc import Collection, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from django.db import DatabaseError, transaction
from django.db.models import Count, Q

from marketplace import models
from marketplace.domain import (
    Band,
    BandId,
    BandMember,
    BandRequest,
    BandRequestId,
    Booking,
    BookingId,
    BookingStatus,
    Event,
    EventId,
    MemberRole,
    Message,
    Money,
    PostedByType,
    Profile,
    ProfileId,
    ProfileRole,
    RequestStatus,
    RequestType,
    Review,
    UserId,
)
from marketplace.domain.errors import BackendError
from marketplace.stores.interfaces import (
    BandRequestStore,
    BandStore,
    BookingStore,
    EventStore,
    MessageStore,
    ProfileStore,
    ReviewStore,
)

logger = logging.getLogger(__name__)

_ID_TYPES = (EventId, BookingId, ProfileId, BandId, BandRequestId, UserId)


def backend_call(method):
    """Translate database failures into BackendError."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            logger.warning("Backend call %s failed: %s", method.__qualname__, exc)
            raise BackendError(str(exc) or "Backend request failed") from exc

    return wrapper


def _column(value: Any) -> Any:
    if isinstance(value, _ID_TYPES):
        return value.value
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


def _columns(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _column(value) for name, value in fields.items()}


def _money(value: Decimal | None) -> Money | None:
    return Money(value) if value is not None else None


def _values(ids: Collection) -> list:
    return [_column(i) for i in ids]


def profile_to_domain(row: models.Profile) -> Profile:
    return Profile(
        id=ProfileId(row.id),
        user_id=UserId(row.user_id),
        role=ProfileRole(row.role),
        display_name=row.display_name,
        bio=row.bio,
        genres=tuple(row.genres or ()),
        location=row.location,
        avatar_url=row.avatar_url,
        price_min=_money(row.price_min),
        price_max=_money(row.price_max),
        youtube_url=row.youtube_url,
        is_band=row.is_band,
    )


def band_to_domain(row: models.Band, member_count: int = 0) -> Band:
    return Band(
        id=BandId(row.id),
        name=row.name,
        description=row.description,
        created_by=UserId(row.created_by_id),
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        member_count=member_count,
    )


def member_to_domain(row: models.BandMember) -> BandMember:
    return BandMember(
        id=row.id,
        band_id=BandId(row.band_id),
        user_id=UserId(row.user_id),
        role=MemberRole(row.role),
        joined_at=row.joined_at,
    )


def request_to_domain(row: models.BandRequest) -> BandRequest:
    return BandRequest(
        id=BandRequestId(row.id),
        band_id=BandId(row.band_id),
        requester_id=UserId(row.requester_id),
        request_type=RequestType(row.request_type),
        status=RequestStatus(row.status),
        message=row.message,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        organizer_profile_id=ProfileId(row.organizer_profile_id),
        description=row.description,
        location=row.location,
        event_type=row.event_type,
        genres=tuple(row.genres or ()),
        budget_min=_money(row.budget_min),
        budget_max=_money(row.budget_max),
        contact_email=row.contact_email,
        contact_phone=row.contact_phone,
        requirements=row.requirements,
        equipment_provided=row.equipment_provided,
        parking_info=row.parking_info,
        additional_notes=row.additional_notes,
        band_id=BandId(row.band_id) if row.band_id else None,
        posted_by_type=PostedByType(row.posted_by_type),
        created_at=row.created_at,
    )


def booking_to_domain(row: models.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        event_id=EventId(row.event_id),
        musician_profile_id=ProfileId(row.musician_profile_id),
        status=BookingStatus(row.status),
        created_at=row.created_at,
        band_id=BandId(row.band_id) if row.band_id else None,
        applied_by_type=PostedByType(row.applied_by_type),
        quotation=_money(row.quotation),
        additional_requirements=row.additional_requirements,
        scheduled_start=row.scheduled_start,
        scheduled_end=row.scheduled_end,
    )


def message_to_domain(row: models.Message) -> Message:
    return Message(
        id=row.id,
        sender_profile_id=ProfileId(row.sender_profile_id),
        recipient_profile_id=ProfileId(row.recipient_profile_id),
        topic=row.topic,
        content=row.content,
        extension=row.extension,
        event_id=EventId(row.event_id) if row.event_id else None,
        payload=dict(row.payload or {}),
        created_at=row.created_at,
    )


def review_to_domain(row: models.Review) -> Review:
    return Review(
        id=row.id,
        booking_id=BookingId(row.booking_id),
        rating=row.rating,
        comment=row.comment,
        reviewer_profile_id=ProfileId(row.reviewer_profile_id),
        reviewee_profile_id=ProfileId(row.reviewee_profile_id),
        created_at=row.created_at,
    )


class DjangoProfileStore(ProfileStore):
    """PostgreSQL-backed profile store using Django ORM."""

    @backend_call
    def get_profile(self, profile_id: ProfileId) -> Profile | None:
        row = models.Profile.objects.filter(id=profile_id.value).first()
        return profile_to_domain(row) if row else None

    @backend_call
    def get_profile_for_user(self, user_id: UserId) -> Profile | None:
        row = models.Profile.objects.filter(user_id=user_id.value).first()
        return profile_to_domain(row) if row else None

    @backend_call
    def get_profiles(self, profile_ids: Collection[ProfileId]) -> list[Profile]:
        rows = models.Profile.objects.filter(id__in=_values(profile_ids))
        return [profile_to_domain(row) for row in rows]

    @backend_call
    def get_profiles_for_users(self, user_ids: Collection[UserId]) -> list[Profile]:
        rows = models.Profile.objects.filter(user_id__in=_values(user_ids))
        return [profile_to_domain(row) for row in rows]

    @backend_call
    def list_profiles(self, role: ProfileRole | None = None) -> list[Profile]:
        rows = models.Profile.objects.all()
        if role is not None:
            rows = rows.filter(role=role.value)
        return [profile_to_domain(row) for row in rows.order_by("display_name", "created_at")]

    @backend_call
    def create_profile(
        self, user_id: UserId, role: ProfileRole, fields: Mapping[str, Any]
    ) -> Profile:
        with transaction.atomic():
            row = models.Profile.objects.create(
                user_id=user_id.value, role=role.value, **_columns(fields)
            )
        return profile_to_domain(row)

    @backend_call
    def update_profile(self, profile_id: ProfileId, fields: Mapping[str, Any]) -> Profile | None:
        with transaction.atomic():
            updated = models.Profile.objects.filter(id=profile_id.value).update(**_columns(fields))
        if not updated:
            return None
        return profile_to_domain(models.Profile.objects.get(id=profile_id.value))


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    @backend_call
    def list_events(self) -> list[Event]:
        return [event_to_domain(row) for row in models.Event.objects.order_by("starts_at")]

    @backend_call
    def list_events_for_organizer(self, profile_id: ProfileId) -> list[Event]:
        rows = models.Event.objects.filter(organizer_profile_id=profile_id.value)
        return [event_to_domain(row) for row in rows.order_by("starts_at")]

    @backend_call
    def list_events_for_bands(self, band_ids: Collection[BandId]) -> list[Event]:
        rows = models.Event.objects.filter(band_id__in=_values(band_ids))
        return [event_to_domain(row) for row in rows.order_by("starts_at")]

    @backend_call
    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(id=event_id.value).first()
        return event_to_domain(row) if row else None

    @backend_call
    def get_events(self, event_ids: Collection[EventId]) -> list[Event]:
        rows = models.Event.objects.filter(id__in=_values(event_ids))
        return [event_to_domain(row) for row in rows]

    @backend_call
    def create_event(self, fields: Mapping[str, Any]) -> Event:
        with transaction.atomic():
            row = models.Event.objects.create(**_columns(fields))
        return event_to_domain(row)

    @backend_call
    def update_event(self, event_id: EventId, fields: Mapping[str, Any]) -> Event | None:
        with transaction.atomic():
            updated = models.Event.objects.filter(id=event_id.value).update(**_columns(fields))
        if not updated:
            return None
        return event_to_domain(models.Event.objects.get(id=event_id.value))

    @backend_call
    def delete_event(self, event_id: EventId) -> None:
        with transaction.atomic():
            models.Event.objects.filter(id=event_id.value).delete()


class DjangoBookingStore(BookingStore):
    """PostgreSQL-backed booking store using Django ORM."""

    @backend_call
    def list_bookings_for_events(self, event_ids: Collection[EventId]) -> list[Booking]:
        rows = models.Booking.objects.filter(event_id__in=_values(event_ids))
        return [booking_to_domain(row) for row in rows.order_by("created_at")]

    @backend_call
    def list_bookings_for_musician(
        self,
        profile_id: ProfileId,
        statuses: Collection[BookingStatus] | None = None,
    ) -> list[Booking]:
        rows = models.Booking.objects.filter(musician_profile_id=profile_id.value)
        if statuses is not None:
            rows = rows.filter(status__in=_values(statuses))
        return [booking_to_domain(row) for row in rows.order_by("-created_at")]

    @backend_call
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        row = models.Booking.objects.filter(id=booking_id.value).first()
        return booking_to_domain(row) if row else None

    @backend_call
    def get_bookings(self, booking_ids: Collection[BookingId]) -> list[Booking]:
        rows = models.Booking.objects.filter(id__in=_values(booking_ids))
        return [booking_to_domain(row) for row in rows]

    @backend_call
    def find_booking(self, event_id: EventId, profile_id: ProfileId) -> Booking | None:
        row = models.Booking.objects.filter(
            event_id=event_id.value, musician_profile_id=profile_id.value
        ).first()
        return booking_to_domain(row) if row else None

    @backend_call
    def create_booking(self, fields: Mapping[str, Any]) -> Booking:
        with transaction.atomic():
            row = models.Booking.objects.create(**_columns(fields))
        return booking_to_domain(row)

    @backend_call
    def update_booking(self, booking_id: BookingId, fields: Mapping[str, Any]) -> None:
        with transaction.atomic():
            models.Booking.objects.filter(id=booking_id.value).update(**_columns(fields))

    @backend_call
    def delete_booking(self, booking_id: BookingId, profile_id: ProfileId) -> int:
        with transaction.atomic():
            deleted, _ = models.Booking.objects.filter(
                id=booking_id.value, musician_profile_id=profile_id.value
            ).delete()
        return deleted


class DjangoBandStore(BandStore):
    """PostgreSQL-backed band store using Django ORM."""

    @backend_call
    def list_active_bands(self) -> list[Band]:
        rows = (
            models.Band.objects.filter(is_active=True)
            .annotate(num_members=Count("members"))
            .order_by("-created_at")
        )
        return [band_to_domain(row, member_count=row.num_members) for row in rows]

    @backend_call
    def get_band(self, band_id: BandId, active_only: bool = True) -> Band | None:
        rows = models.Band.objects.filter(id=band_id.value)
        if active_only:
            rows = rows.filter(is_active=True)
        row = rows.first()
        return band_to_domain(row) if row else None

    @backend_call
    def get_bands(self, band_ids: Collection[BandId]) -> list[Band]:
        rows = models.Band.objects.filter(id__in=_values(band_ids), is_active=True)
        return [band_to_domain(row) for row in rows]

    @backend_call
    def create_band(self, name: str, description: str, created_by: UserId) -> Band:
        with transaction.atomic():
            row = models.Band.objects.create(
                name=name,
                description=description,
                created_by_id=created_by.value,
                is_active=True,
            )
        return band_to_domain(row)

    @backend_call
    def delete_band(self, band_id: BandId) -> None:
        with transaction.atomic():
            models.Band.objects.filter(id=band_id.value).delete()

    @backend_call
    def count_members(self, band_id: BandId) -> int:
        return models.BandMember.objects.filter(band_id=band_id.value).count()

    @backend_call
    def list_members(self, band_id: BandId) -> list[BandMember]:
        rows = models.BandMember.objects.filter(band_id=band_id.value).order_by("joined_at")
        return [member_to_domain(row) for row in rows]

    @backend_call
    def get_membership(self, band_id: BandId, user_id: UserId) -> BandMember | None:
        row = models.BandMember.objects.filter(
            band_id=band_id.value, user_id=user_id.value
        ).first()
        return member_to_domain(row) if row else None

    @backend_call
    def list_memberships(
        self, user_id: UserId, role: MemberRole | None = None
    ) -> list[BandMember]:
        rows = models.BandMember.objects.filter(user_id=user_id.value)
        if role is not None:
            rows = rows.filter(role=role.value)
        return [member_to_domain(row) for row in rows.order_by("-joined_at")]

    @backend_call
    def add_member(self, band_id: BandId, user_id: UserId, role: MemberRole) -> BandMember:
        with transaction.atomic():
            row = models.BandMember.objects.create(
                band_id=band_id.value, user_id=user_id.value, role=role.value
            )
        return member_to_domain(row)

    @backend_call
    def update_member_role(self, band_id: BandId, user_id: UserId, role: MemberRole) -> None:
        with transaction.atomic():
            models.BandMember.objects.filter(
                band_id=band_id.value, user_id=user_id.value
            ).update(role=role.value)

    @backend_call
    def delete_member(self, band_id: BandId, user_id: UserId) -> None:
        with transaction.atomic():
            models.BandMember.objects.filter(
                band_id=band_id.value, user_id=user_id.value
            ).delete()

    @backend_call
    def delete_members(self, band_id: BandId) -> None:
        with transaction.atomic():
            models.BandMember.objects.filter(band_id=band_id.value).delete()


class DjangoBandRequestStore(BandRequestStore):
    """PostgreSQL-backed band request store using Django ORM."""

    @backend_call
    def create_request(
        self,
        band_id: BandId,
        requester_id: UserId,
        request_type: RequestType,
        message: str | None,
    ) -> BandRequest:
        with transaction.atomic():
            row = models.BandRequest.objects.create(
                band_id=band_id.value,
                requester_id=requester_id.value,
                request_type=request_type.value,
                message=message,
            )
        return request_to_domain(row)

    @backend_call
    def get_request(self, request_id: BandRequestId) -> BandRequest | None:
        row = models.BandRequest.objects.filter(id=request_id.value).first()
        return request_to_domain(row) if row else None

    @backend_call
    def find_pending_request(self, band_id: BandId, requester_id: UserId) -> BandRequest | None:
        row = models.BandRequest.objects.filter(
            band_id=band_id.value,
            requester_id=requester_id.value,
            status=RequestStatus.PENDING.value,
        ).first()
        return request_to_domain(row) if row else None

    @backend_call
    def list_pending_for_requester(self, user_id: UserId) -> list[BandRequest]:
        rows = models.BandRequest.objects.filter(
            requester_id=user_id.value, status=RequestStatus.PENDING.value
        ).order_by("-created_at")
        return [request_to_domain(row) for row in rows]

    @backend_call
    def list_pending_for_bands(self, band_ids: Collection[BandId]) -> list[BandRequest]:
        rows = models.BandRequest.objects.filter(
            band_id__in=_values(band_ids), status=RequestStatus.PENDING.value
        ).order_by("-created_at")
        return [request_to_domain(row) for row in rows]

    @backend_call
    def update_request_status(self, request_id: BandRequestId, status: RequestStatus) -> None:
        with transaction.atomic():
            row = models.BandRequest.objects.get(id=request_id.value)
            row.status = status.value
            row.save(update_fields=["status", "updated_at"])

    @backend_call
    def delete_requests_for_band(self, band_id: BandId) -> None:
        with transaction.atomic():
            models.BandRequest.objects.filter(band_id=band_id.value).delete()


class DjangoMessageStore(MessageStore):
    """PostgreSQL-backed message store using Django ORM."""

    @backend_call
    def create_message(
        self,
        sender_profile_id: ProfileId,
        recipient_profile_id: ProfileId,
        topic: str,
        content: str,
        extension: str | None = None,
        event_id: EventId | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Message:
        with transaction.atomic():
            row = models.Message.objects.create(
                sender_profile_id=sender_profile_id.value,
                recipient_profile_id=recipient_profile_id.value,
                topic=topic,
                content=content,
                extension=extension,
                event_id=event_id.value if event_id else None,
                payload=dict(payload or {}),
            )
        return message_to_domain(row)

    @backend_call
    def list_messages_for_profile(self, profile_id: ProfileId) -> list[Message]:
        rows = models.Message.objects.filter(
            Q(sender_profile_id=profile_id.value) | Q(recipient_profile_id=profile_id.value)
        )
        return [message_to_domain(row) for row in rows.order_by("-created_at")]

    @backend_call
    def list_conversation(self, profile_id: ProfileId, other_id: ProfileId) -> list[Message]:
        rows = models.Message.objects.filter(
            Q(sender_profile_id=profile_id.value, recipient_profile_id=other_id.value)
            | Q(sender_profile_id=other_id.value, recipient_profile_id=profile_id.value)
        )
        return [message_to_domain(row) for row in rows.order_by("created_at")]


class DjangoReviewStore(ReviewStore):
    """PostgreSQL-backed review store using Django ORM."""

    @backend_call
    def list_reviews_for_reviewee(self, profile_id: ProfileId) -> list[Review]:
        rows = models.Review.objects.filter(reviewee_profile_id=profile_id.value)
        return [review_to_domain(row) for row in rows.order_by("-created_at")]

    @backend_call
    def find_review(self, booking_id: BookingId, reviewer_profile_id: ProfileId) -> Review | None:
        row = models.Review.objects.filter(
            booking_id=booking_id.value, reviewer_profile_id=reviewer_profile_id.value
        ).first()
        return review_to_domain(row) if row else None

    @backend_call
    def create_review(
        self,
        booking_id: BookingId,
        rating: int,
        comment: str | None,
        reviewer_profile_id: ProfileId,
        reviewee_profile_id: ProfileId,
    ) -> Review:
        with transaction.atomic():
            row = models.Review.objects.create(
                booking_id=booking_id.value,
                rating=rating,
                comment=comment,
                reviewer_profile_id=reviewer_profile_id.value,
                reviewee_profile_id=reviewee_profile_id.value,
            )
        return review_to_domain(row)
