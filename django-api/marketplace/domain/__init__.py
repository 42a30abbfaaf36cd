from marketplace.domain.models import (
    Band,
    BandMember,
    BandRequest,
    Booking,
    Conversation,
    Event,
    EventApplication,
    Message,
    Profile,
    Review,
    ReviewSummary,
)
from marketplace.domain.results import ServiceResult
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

__all__ = [
    "Band",
    "BandMember",
    "BandRequest",
    "Booking",
    "Conversation",
    "Event",
    "EventApplication",
    "Message",
    "Profile",
    "Review",
    "ReviewSummary",
    "ServiceResult",
    "BandId",
    "BandRequestId",
    "BookingId",
    "BookingStatus",
    "EventId",
    "MemberRole",
    "Money",
    "PostedByType",
    "ProfileId",
    "ProfileRole",
    "RequestStatus",
    "RequestType",
    "UserId",
]
