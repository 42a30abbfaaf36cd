from django.contrib import admin

from marketplace.models import (
    Band,
    BandMember,
    BandRequest,
    Booking,
    Event,
    Message,
    Profile,
    Review,
)


class BandMemberInline(admin.TabularInline):
    model = BandMember
    extra = 0


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["display_name", "role", "location", "created_at"]
    list_filter = ["role"]
    search_fields = ["display_name", "location"]


@admin.register(Band)
class BandAdmin(admin.ModelAdmin):
    list_display = ["name", "created_by", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name"]
    inlines = [BandMemberInline]


@admin.register(BandRequest)
class BandRequestAdmin(admin.ModelAdmin):
    list_display = ["band", "requester", "request_type", "status", "created_at"]
    list_filter = ["request_type", "status"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "organizer_profile", "location", "starts_at"]
    search_fields = ["title", "location"]
    inlines = [BookingInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["sender_profile", "recipient_profile", "topic", "created_at"]
    list_filter = ["extension"]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ["booking", "reviewer_profile", "reviewee_profile", "rating"]
    list_filter = ["rating"]
