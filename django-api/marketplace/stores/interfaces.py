"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Each method is one round
trip to the backend and raises BackendError when the backend fails. Writes
are committed individually; no method spans a multi-statement transaction.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from typing import Any

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
    Profile,
    ProfileId,
    ProfileRole,
    RequestStatus,
    RequestType,
    Review,
    UserId,
)


class ProfileStore(ABC):
    """Interface for profile persistence operations."""

    @abstractmethod
    def get_profile(self, profile_id: ProfileId) -> Profile | None:
        ...

    @abstractmethod
    def get_profile_for_user(self, user_id: UserId) -> Profile | None:
        ...

    @abstractmethod
    def get_profiles(self, profile_ids: Collection[ProfileId]) -> list[Profile]:
        """Return the profiles whose id is in profile_ids."""
        ...

    @abstractmethod
    def get_profiles_for_users(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Return the profiles whose user_id is in user_ids."""
        ...

    @abstractmethod
    def list_profiles(self, role: ProfileRole | None = None) -> list[Profile]:
        """Return profiles, optionally only those with the given role, by name."""
        ...

    @abstractmethod
    def create_profile(
        self, user_id: UserId, role: ProfileRole, fields: Mapping[str, Any]
    ) -> Profile:
        ...

    @abstractmethod
    def update_profile(self, profile_id: ProfileId, fields: Mapping[str, Any]) -> Profile | None:
        """Apply fields to a profile and return it, or None when it does not exist."""
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by starts_at ascending."""
        ...

    @abstractmethod
    def list_events_for_organizer(self, profile_id: ProfileId) -> list[Event]:
        """Return events owned by a profile, ordered by starts_at ascending."""
        ...

    @abstractmethod
    def list_events_for_bands(self, band_ids: Collection[BandId]) -> list[Event]:
        """Return events posted by any of the bands, ordered by starts_at ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        ...

    @abstractmethod
    def get_events(self, event_ids: Collection[EventId]) -> list[Event]:
        ...

    @abstractmethod
    def create_event(self, fields: Mapping[str, Any]) -> Event:
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, fields: Mapping[str, Any]) -> Event | None:
        """Apply fields to an event and return it, or None if it does not exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> None:
        ...


class BookingStore(ABC):
    """Interface for booking (application) persistence operations."""

    @abstractmethod
    def list_bookings_for_events(self, event_ids: Collection[EventId]) -> list[Booking]:
        ...

    @abstractmethod
    def list_bookings_for_musician(
        self,
        profile_id: ProfileId,
        statuses: Collection[BookingStatus] | None = None,
    ) -> list[Booking]:
        """Return a musician's bookings, newest first, optionally filtered by status."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        ...

    @abstractmethod
    def get_bookings(self, booking_ids: Collection[BookingId]) -> list[Booking]:
        ...

    @abstractmethod
    def find_booking(self, event_id: EventId, profile_id: ProfileId) -> Booking | None:
        """Return the booking a musician filed for an event, if any."""
        ...

    @abstractmethod
    def create_booking(self, fields: Mapping[str, Any]) -> Booking:
        ...

    @abstractmethod
    def update_booking(self, booking_id: BookingId, fields: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def delete_booking(self, booking_id: BookingId, profile_id: ProfileId) -> int:
        """Delete a booking owned by profile_id. Return the number of rows deleted."""
        ...


class BandStore(ABC):
    """Interface for band and band membership persistence operations."""

    @abstractmethod
    def list_active_bands(self) -> list[Band]:
        """Return active bands, newest first, with member_count populated."""
        ...

    @abstractmethod
    def get_band(self, band_id: BandId, active_only: bool = True) -> Band | None:
        ...

    @abstractmethod
    def get_bands(self, band_ids: Collection[BandId]) -> list[Band]:
        """Return the active bands whose id is in band_ids."""
        ...

    @abstractmethod
    def create_band(self, name: str, description: str, created_by: UserId) -> Band:
        ...

    @abstractmethod
    def delete_band(self, band_id: BandId) -> None:
        ...

    @abstractmethod
    def count_members(self, band_id: BandId) -> int:
        ...

    @abstractmethod
    def list_members(self, band_id: BandId) -> list[BandMember]:
        ...

    @abstractmethod
    def get_membership(self, band_id: BandId, user_id: UserId) -> BandMember | None:
        ...

    @abstractmethod
    def list_memberships(
        self, user_id: UserId, role: MemberRole | None = None
    ) -> list[BandMember]:
        """Return a user's memberships, most recently joined first."""
        ...

    @abstractmethod
    def add_member(self, band_id: BandId, user_id: UserId, role: MemberRole) -> BandMember:
        ...

    @abstractmethod
    def update_member_role(self, band_id: BandId, user_id: UserId, role: MemberRole) -> None:
        ...

    @abstractmethod
    def delete_member(self, band_id: BandId, user_id: UserId) -> None:
        ...

    @abstractmethod
    def delete_members(self, band_id: BandId) -> None:
        """Delete every membership of a band."""
        ...


class BandRequestStore(ABC):
    """Interface for band request persistence operations."""

    @abstractmethod
    def create_request(
        self,
        band_id: BandId,
        requester_id: UserId,
        request_type: RequestType,
        message: str | None,
    ) -> BandRequest:
        ...

    @abstractmethod
    def get_request(self, request_id: BandRequestId) -> BandRequest | None:
        ...

    @abstractmethod
    def find_pending_request(self, band_id: BandId, requester_id: UserId) -> BandRequest | None:
        """Return the pending request of either type between a band and a musician."""
        ...

    @abstractmethod
    def list_pending_for_requester(self, user_id: UserId) -> list[BandRequest]:
        """Return pending requests naming user_id as requester, newest first."""
        ...

    @abstractmethod
    def list_pending_for_bands(self, band_ids: Collection[BandId]) -> list[BandRequest]:
        """Return pending requests addressed to any of the bands, newest first."""
        ...

    @abstractmethod
    def update_request_status(self, request_id: BandRequestId, status: RequestStatus) -> None:
        ...

    @abstractmethod
    def delete_requests_for_band(self, band_id: BandId) -> None:
        ...


class MessageStore(ABC):
    """Interface for message persistence operations."""

    @abstractmethod
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
        ...

    @abstractmethod
    def list_messages_for_profile(self, profile_id: ProfileId) -> list[Message]:
        """Return messages the profile sent or received, newest first."""
        ...

    @abstractmethod
    def list_conversation(self, profile_id: ProfileId, other_id: ProfileId) -> list[Message]:
        """Return the messages exchanged between two profiles, oldest first."""
        ...


class ReviewStore(ABC):
    """Interface for review persistence operations."""

    @abstractmethod
    def list_reviews_for_reviewee(self, profile_id: ProfileId) -> list[Review]:
        """Return reviews received by a profile, newest first."""
        ...

    @abstractmethod
    def find_review(self, booking_id: BookingId, reviewer_profile_id: ProfileId) -> Review | None:
        ...

    @abstractmethod
    def create_review(
        self,
        booking_id: BookingId,
        rating: int,
        comment: str | None,
        reviewer_profile_id: ProfileId,
        reviewee_profile_id: ProfileId,
    ) -> Review:
        ...
