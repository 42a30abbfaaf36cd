"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

from marketplace.domain.value_objects import (
    BookingStatus,
    MemberRole,
    PostedByType,
    ProfileRole,
    RequestStatus,
    RequestType,
)


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").title()) for member in enum_cls]


class Profile(models.Model):
    """Persistence model for musician and organizer profiles."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile"
    )
    role = models.CharField(max_length=20, choices=_choices(ProfileRole))
    display_name = models.CharField(max_length=255, blank=True, null=True)
    is_band = models.BooleanField(null=True, blank=True)
    genres = models.JSONField(default=list, blank=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    price_min = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    price_max = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    youtube_url = models.URLField(max_length=500, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.display_name or str(self.id)


class Band(models.Model):
    """Persistence model for bands."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="created_bands"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class BandMember(models.Model):
    """Persistence model for band memberships."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    band = models.ForeignKey(Band, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="band_memberships"
    )
    role = models.CharField(
        max_length=20, choices=_choices(MemberRole), default=MemberRole.MEMBER.value
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["band", "user"], name="unique_band_member"),
        ]
        indexes = [
            models.Index(fields=["user"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} in {self.band_id} ({self.role})"


class BandRequest(models.Model):
    """Persistence model for band join requests and invitations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    band = models.ForeignKey(Band, on_delete=models.CASCADE, related_name="requests")
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="band_requests"
    )
    request_type = models.CharField(max_length=50, choices=_choices(RequestType))
    status = models.CharField(
        max_length=50, choices=_choices(RequestStatus), default=RequestStatus.PENDING.value
    )
    message = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["requester", "status"]),
            models.Index(fields=["band", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.request_type} {self.band_id} ({self.status})"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="events"
    )
    band = models.ForeignKey(
        Band, on_delete=models.SET_NULL, related_name="events", blank=True, null=True
    )
    posted_by_type = models.CharField(
        max_length=20,
        choices=_choices(PostedByType),
        default=PostedByType.INDIVIDUAL.value,
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    event_type = models.CharField(max_length=50, default="gig", blank=True, null=True)
    genres = models.JSONField(default=list, blank=True)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField(blank=True, null=True)
    budget_min = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    budget_max = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    contact_email = models.EmailField(blank=True, null=True)
    contact_phone = models.CharField(max_length=50, blank=True, null=True)
    requirements = models.TextField(blank=True, null=True)
    equipment_provided = models.TextField(blank=True, null=True)
    parking_info = models.TextField(blank=True, null=True)
    additional_notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at"]),
            models.Index(fields=["band"]),
        ]

    def __str__(self) -> str:
        return self.title


class Booking(models.Model):
    """Persistence model for applications to events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookings")
    musician_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="bookings"
    )
    band = models.ForeignKey(
        Band, on_delete=models.SET_NULL, related_name="bookings", blank=True, null=True
    )
    applied_by_type = models.CharField(
        max_length=20,
        choices=_choices(PostedByType),
        default=PostedByType.INDIVIDUAL.value,
    )
    status = models.CharField(
        max_length=20, choices=_choices(BookingStatus), default=BookingStatus.PENDING.value
    )
    quotation = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    additional_requirements = models.TextField(blank=True, null=True)
    scheduled_start = models.DateTimeField(blank=True, null=True)
    scheduled_end = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "musician_profile"], name="unique_booking_per_musician"
            ),
            models.CheckConstraint(
                condition=Q(quotation__isnull=True) | Q(quotation__gt=0),
                name="booking_quotation_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["musician_profile", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.musician_profile_id} -> {self.event_id} ({self.status})"


class Message(models.Model):
    """Persistence model for messages between profiles."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="sent_messages"
    )
    recipient_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="received_messages"
    )
    topic = models.CharField(max_length=255, blank=True, default="")
    content = models.TextField()
    extension = models.CharField(max_length=50, blank=True, null=True)
    event = models.ForeignKey(
        Event, on_delete=models.SET_NULL, related_name="messages", blank=True, null=True
    )
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.topic or str(self.id)


class Review(models.Model):
    """Persistence model for reviews left after a booking."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True, null=True)
    reviewer_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="reviews_given"
    )
    reviewee_profile = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="reviews_received"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking", "reviewer_profile"], name="unique_review_per_booking"
            ),
            models.CheckConstraint(
                condition=Q(rating__gte=1) & Q(rating__lte=5),
                name="review_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rating} for {self.reviewee_profile_id}"
