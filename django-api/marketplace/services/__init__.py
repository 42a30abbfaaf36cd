from marketplace.services.application_service import ApplicationService
from marketplace.services.band_service import BandService
from marketplace.services.event_service import EventService
from marketplace.services.message_service import MessageService
from marketplace.services.profile_service import ProfileService
from marketplace.services.review_service import ReviewService

__all__ = [
    "ApplicationService",
    "BandService",
    "EventService",
    "MessageService",
    "ProfileService",
    "ReviewService",
]
