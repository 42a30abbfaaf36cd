from django.urls import path

from marketplace.handlers import (
    ApplicationDetailView,
    BandDetailView,
    BandInviteView,
    BandJoinRequestView,
    BandLeaveView,
    BandListView,
    BandMemberView,
    BandRequestAcceptView,
    BandRequestRejectView,
    BandTransferLeadershipView,
    ConversationView,
    EventApplyView,
    EventDetailView,
    EventListView,
    LedBandRequestListView,
    MusicianListView,
    MyApplicationListView,
    MyBandListView,
    MyBandRequestListView,
    MyConversationListView,
    MyEventApplicationListView,
    MyEventListView,
    MyProfileView,
    ProfileDetailView,
    ProfileReviewListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/applications",
        EventApplyView.as_view(),
        name="event-apply",
    ),
    path("me/events", MyEventListView.as_view(), name="my-events"),
    path(
        "me/events/applications",
        MyEventApplicationListView.as_view(),
        name="my-event-applications",
    ),
    path("me/applications", MyApplicationListView.as_view(), name="my-applications"),
    path(
        "applications/<str:application_id>",
        ApplicationDetailView.as_view(),
        name="application-detail",
    ),
    path("bands", BandListView.as_view(), name="band-list"),
    path("bands/<str:band_id>", BandDetailView.as_view(), name="band-detail"),
    path("me/bands", MyBandListView.as_view(), name="my-bands"),
    path(
        "bands/<str:band_id>/join-requests",
        BandJoinRequestView.as_view(),
        name="band-join-request",
    ),
    path("bands/<str:band_id>/invites", BandInviteView.as_view(), name="band-invite"),
    path("bands/<str:band_id>/leave", BandLeaveView.as_view(), name="band-leave"),
    path(
        "bands/<str:band_id>/transfer-leadership",
        BandTransferLeadershipView.as_view(),
        name="band-transfer-leadership",
    ),
    path(
        "bands/<str:band_id>/members/<int:user_id>",
        BandMemberView.as_view(),
        name="band-member",
    ),
    path("me/band-requests", MyBandRequestListView.as_view(), name="my-band-requests"),
    path(
        "me/led-band-requests",
        LedBandRequestListView.as_view(),
        name="led-band-requests",
    ),
    path(
        "band-requests/<str:request_id>/accept",
        BandRequestAcceptView.as_view(),
        name="band-request-accept",
    ),
    path(
        "band-requests/<str:request_id>/reject",
        BandRequestRejectView.as_view(),
        name="band-request-reject",
    ),
    path("me/profile", MyProfileView.as_view(), name="my-profile"),
    path("musicians", MusicianListView.as_view(), name="musician-list"),
    path("profiles/<str:profile_id>", ProfileDetailView.as_view(), name="profile-detail"),
    path(
        "profiles/<str:profile_id>/reviews",
        ProfileReviewListView.as_view(),
        name="profile-reviews",
    ),
    path("me/messages", MyConversationListView.as_view(), name="my-conversations"),
    path(
        "me/messages/<str:profile_id>",
        ConversationView.as_view(),
        name="conversation",
    ),
]
