from marketplace.stores.interfaces import (
    BandRequestStore,
    BandStore,
    BookingStore,
    EventStore,
    MessageStore,
    ProfileStore,
    ReviewStore,
)

__all__ = [
    "BandRequestStore",
    "BandStore",
    "BookingStore",
    "EventStore",
    "MessageStore",
    "ProfileStore",
    "ReviewStore",
]
