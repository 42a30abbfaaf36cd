from marketplace.handlers.views import (
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

__all__ = [
    "ApplicationDetailView",
    "BandDetailView",
    "BandInviteView",
    "BandJoinRequestView",
    "BandLeaveView",
    "BandListView",
    "BandMemberView",
    "BandRequestAcceptView",
    "BandRequestRejectView",
    "BandTransferLeadershipView",
    "ConversationView",
    "EventApplyView",
    "EventDetailView",
    "EventListView",
    "LedBandRequestListView",
    "MusicianListView",
    "MyApplicationListView",
    "MyBandListView",
    "MyBandRequestListView",
    "MyConversationListView",
    "MyEventApplicationListView",
    "MyEventListView",
    "MyProfileView",
    "ProfileDetailView",
    "ProfileReviewListView",
]
