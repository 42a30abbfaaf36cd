"""Serializers for transforming domain models to API responses and parsing input.

Output serializers read frozen domain dataclasses; input serializers only
check request format. Business rules live in the services.
"""

from rest_framework import serializers

from marketplace.domain import BookingStatus, PostedByType, ProfileRole

UNKNOWN_DATE = "Unknown Date"


class IdField(serializers.Field):
    """Read-only field for typed identifiers."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return str(value)


class MoneyField(IdField):
    pass


class EnumField(IdField):
    def to_representation(self, value):
        return value.value


class ProfileSerializer(serializers.Serializer):
    id = IdField(allow_null=True)
    user_id = IdField(allow_null=True)
    role = EnumField(allow_null=True)
    display_name = serializers.CharField(allow_null=True)
    bio = serializers.CharField(allow_null=True)
    genres = serializers.ListField(child=serializers.CharField())
    avatar_url = serializers.CharField(allow_null=True)
    location = serializers.CharField(allow_null=True)
    price_min = MoneyField(allow_null=True)
    price_max = MoneyField(allow_null=True)
    youtube_url = serializers.CharField(allow_null=True)
    is_band = serializers.BooleanField(allow_null=True)


class BandMemberSerializer(serializers.Serializer):
    id = IdField(allow_null=True)
    band_id = IdField()
    user_id = IdField()
    role = EnumField()
    joined_at = serializers.DateTimeField()
    user = ProfileSerializer(allow_null=True)


class BandSerializer(serializers.Serializer):
    id = IdField()
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    created_by = IdField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    member_count = serializers.IntegerField()


class BandDetailSerializer(BandSerializer):
    members = BandMemberSerializer(many=True)


class BandRequestSerializer(serializers.Serializer):
    id = IdField()
    band_id = IdField()
    requester_id = IdField()
    request_type = EnumField()
    status = EnumField()
    message = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    band = BandSerializer(allow_null=True)
    requester = ProfileSerializer(allow_null=True)


class EventSerializer(serializers.Serializer):
    id = IdField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    location = serializers.CharField(allow_null=True)
    event_type = serializers.CharField(allow_null=True)
    genres = serializers.ListField(child=serializers.CharField())
    starts_at = serializers.SerializerMethodField()
    ends_at = serializers.DateTimeField(allow_null=True)
    budget_min = MoneyField(allow_null=True)
    budget_max = MoneyField(allow_null=True)
    contact_email = serializers.CharField(allow_null=True)
    contact_phone = serializers.CharField(allow_null=True)
    requirements = serializers.CharField(allow_null=True)
    equipment_provided = serializers.CharField(allow_null=True)
    parking_info = serializers.CharField(allow_null=True)
    additional_notes = serializers.CharField(allow_null=True)
    organizer_profile_id = IdField(allow_null=True)
    band_id = IdField(allow_null=True)
    posted_by_type = EnumField()
    created_at = serializers.DateTimeField(allow_null=True)
    organizer = ProfileSerializer(allow_null=True)
    band = BandSerializer(allow_null=True)

    def get_starts_at(self, event) -> str:
        if event.starts_at is None:
            return UNKNOWN_DATE
        return serializers.DateTimeField().to_representation(event.starts_at)


class BookingSerializer(serializers.Serializer):
    id = IdField()
    event_id = IdField()
    musician_profile_id = IdField()
    band_id = IdField(allow_null=True)
    applied_by_type = EnumField()
    status = EnumField()
    quotation = MoneyField(allow_null=True)
    additional_requirements = serializers.CharField(allow_null=True)
    scheduled_start = serializers.DateTimeField(allow_null=True)
    scheduled_end = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class EventApplicationSerializer(serializers.Serializer):
    """Flattens the booking and nests its musician profile, band and event."""

    def to_representation(self, application):
        data = BookingSerializer(application.booking).data
        data["musician_profile"] = ProfileSerializer(application.musician_profile).data
        data["band"] = BandSerializer(application.band).data if application.band else None
        data["event"] = EventSerializer(application.event).data
        return data


class ReviewSerializer(serializers.Serializer):
    id = IdField()
    booking_id = IdField()
    rating = serializers.IntegerField()
    comment = serializers.CharField(allow_null=True)
    reviewer_profile_id = IdField()
    reviewee_profile_id = IdField()
    created_at = serializers.DateTimeField()
    reviewer = ProfileSerializer(allow_null=True)
    event = EventSerializer(allow_null=True)


class ReviewSummarySerializer(serializers.Serializer):
    reviews = ReviewSerializer(many=True)
    total = serializers.IntegerField()
    average_rating = serializers.FloatField()


class MessageSerializer(serializers.Serializer):
    id = IdField()
    sender_profile_id = IdField()
    recipient_profile_id = IdField()
    topic = serializers.CharField()
    content = serializers.CharField()
    extension = serializers.CharField(allow_null=True)
    event_id = IdField(allow_null=True)
    payload = serializers.DictField()
    created_at = serializers.DateTimeField(allow_null=True)


class ConversationSerializer(serializers.Serializer):
    other_profile = ProfileSerializer()
    last_message = MessageSerializer(allow_null=True)


class ConversationDetailSerializer(ConversationSerializer):
    messages = MessageSerializer(many=True)


# Input serializers


class EventWriteSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    event_type = serializers.CharField(required=False, allow_null=True, max_length=50)
    genres = serializers.ListField(child=serializers.CharField(), required=False)
    starts_at = serializers.DateTimeField(required=False, allow_null=True)
    ends_at = serializers.DateTimeField(required=False, allow_null=True)
    budget_min = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    budget_max = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    contact_email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    contact_phone = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    requirements = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    equipment_provided = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    parking_info = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    additional_notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    band_id = serializers.UUIDField(required=False, allow_null=True)
    posted_by_type = serializers.ChoiceField(
        choices=[t.value for t in PostedByType], required=False
    )


class ApplicationCreateSerializer(serializers.Serializer):
    quotation = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    additional_requirements = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    band_id = serializers.UUIDField(required=False, allow_null=True)


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in BookingStatus])
    scheduled_start = serializers.DateTimeField(required=False, allow_null=True)
    scheduled_end = serializers.DateTimeField(required=False, allow_null=True)


class BandCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class JoinRequestSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class InviteSerializer(JoinRequestSerializer):
    musician_user_id = serializers.IntegerField(min_value=1)


class TransferLeadershipSerializer(serializers.Serializer):
    new_leader_user_id = serializers.IntegerField(min_value=1)


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(required=False, max_length=255)
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    bio = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    genres = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False, allow_null=True
    )
    price_min = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    price_max = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    youtube_url = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    avatar_url = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    is_band = serializers.BooleanField(required=False, allow_null=True)


class ProfileCreateSerializer(ProfileUpdateSerializer):
    role = serializers.ChoiceField(choices=[r.value for r in ProfileRole])


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True)
    topic = serializers.CharField(required=False, allow_blank=True, default="")
