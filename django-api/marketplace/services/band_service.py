"""Band service - bands, memberships, leadership and join/invite requests.

Multi-step mutations issue their writes one after another. Only band
creation compensates a failed second step (by deleting the new band); a
failure halfway through any other sequence leaves the earlier writes in
place and returns the error.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from marketplace.domain import (
    Band,
    BandId,
    BandMember,
    BandRequest,
    BandRequestId,
    MemberRole,
    Profile,
    RequestStatus,
    RequestType,
    ServiceResult,
    UserId,
)
from marketplace.domain.errors import (
    BandNotFoundError,
    BandRequestNotFoundError,
    DomainError,
    NotABandMemberError,
    NotAuthorizedError,
    RequestAlreadyPendingError,
    RequestAlreadyResolvedError,
    ValidationFailedError,
)
from marketplace.services.common import index_by, leads_band, parse_id
from marketplace.stores.interfaces import BandRequestStore, BandStore, ProfileStore

logger = logging.getLogger(__name__)


class BandService:
    """Service for band membership and leadership operations."""

    def __init__(
        self,
        bands: BandStore,
        requests: BandRequestStore,
        profiles: ProfileStore,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._bands = bands
        self._requests = requests
        self._profiles = profiles
        self._clock = clock

    def get_bands(self) -> ServiceResult[list[Band]]:
        """Return all active bands, newest first, with member counts."""
        try:
            return ServiceResult(self._bands.list_active_bands())
        except DomainError as exc:
            return ServiceResult([], exc)

    def get_band(self, band_id: str) -> ServiceResult[Band | None]:
        """Return an active band with its members and their profiles.

        A failed member query yields the band without members; a failed
        profile query yields placeholder profiles.
        """
        try:
            band = self._bands.get_band(parse_id(BandId, band_id, "band ID"))
            if band is None:
                raise BandNotFoundError()
        except DomainError as exc:
            return ServiceResult(None, exc)

        try:
            members = self._bands.list_members(band.id)
        except DomainError as exc:
            logger.error("Error fetching members of band %s: %s", band.id, exc)
            return ServiceResult(replace(band, members=(), member_count=0))

        profiles = {}
        if members:
            try:
                profiles = index_by(
                    self._profiles.get_profiles_for_users({m.user_id for m in members}),
                    "user_id",
                )
            except DomainError as exc:
                logger.error("Error fetching member profiles of band %s: %s", band.id, exc)
        members = tuple(
            replace(m, user=profiles.get(m.user_id) or Profile.unknown_user(m.user_id))
            for m in members
        )
        return ServiceResult(replace(band, members=members, member_count=len(members)))

    def get_user_bands(self, user_id: UserId) -> ServiceResult[list[Band]]:
        """Return the active bands a user belongs to.

        Member counts are fetched with one count query per band.
        """
        try:
            memberships = self._bands.list_memberships(user_id)
            if not memberships:
                return ServiceResult([])
            bands = index_by(self._bands.get_bands([m.band_id for m in memberships]))
        except DomainError as exc:
            return ServiceResult([], exc)

        result = []
        for membership in memberships:
            band = bands.get(membership.band_id)
            if band is None:
                continue
            try:
                count = self._bands.count_members(band.id)
            except DomainError as exc:
                logger.warning("Could not count members of band %s: %s", band.id, exc)
                count = 0
            result.append(replace(band, member_count=count))
        return ServiceResult(result)

    def create_band(
        self, user_id: UserId, name: str, description: str | None = None
    ) -> ServiceResult[Band | None]:
        """Create a band with the caller as its leader.

        If the leader membership cannot be written, the band row is deleted
        again so that no leaderless band remains.
        """
        name = (name or "").strip()
        if not name:
            return ServiceResult(None, ValidationFailedError("Band name is required"))
        try:
            band = self._bands.create_band(name, (description or "").strip(), user_id)
        except DomainError as exc:
            logger.error("Error creating band: %s", exc)
            return ServiceResult(None, exc)

        try:
            self._bands.add_member(band.id, user_id, MemberRole.LEADER)
        except DomainError as exc:
            logger.error("Error adding creator as leader of band %s: %s", band.id, exc)
            try:
                self._bands.delete_band(band.id)
            except DomainError as cleanup_exc:
                logger.error("Could not remove leaderless band %s: %s", band.id, cleanup_exc)
            return ServiceResult(None, exc)

        logger.info("Band %s created by user %s", band.id, user_id)
        complete = self.get_band(str(band.id))
        if complete.ok and complete.data is not None:
            return complete

        logger.warning("Band %s created but could not be reloaded: %s", band.id, complete.error)
        leader = BandMember(
            id=None,
            band_id=band.id,
            user_id=user_id,
            role=MemberRole.LEADER,
            joined_at=self._clock(),
        )
        return ServiceResult(replace(band, member_count=1, members=(leader,)))

    def send_join_request(
        self, user_id: UserId, band_id: str, message: str | None = None
    ) -> ServiceResult[BandRequest | None]:
        """Ask to join a band as the calling musician."""
        try:
            band = self._get_active_band(parse_id(BandId, band_id, "band ID"))
            if self._bands.get_membership(band.id, user_id) is not None:
                raise ValidationFailedError("You are already a member of this band")
            if self._requests.find_pending_request(band.id, user_id) is not None:
                raise RequestAlreadyPendingError()
            request = self._requests.create_request(
                band.id, user_id, RequestType.MUSICIAN_TO_BAND, message
            )
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(request)

    def send_invite_request(
        self,
        user_id: UserId,
        band_id: str,
        musician_user_id: UserId,
        message: str | None = None,
    ) -> ServiceResult[BandRequest | None]:
        """Invite a musician to a band the caller leads."""
        try:
            band = self._get_active_band(parse_id(BandId, band_id, "band ID"))
            self._require_leader(band.id, user_id, "Only band leaders can invite musicians")
            if self._bands.get_membership(band.id, musician_user_id) is not None:
                raise ValidationFailedError("This musician is already a member of the band")
            if self._requests.find_pending_request(band.id, musician_user_id) is not None:
                raise RequestAlreadyPendingError()
            request = self._requests.create_request(
                band.id, musician_user_id, RequestType.BAND_TO_MUSICIAN, message
            )
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(request)

    def get_pending_requests(self, user_id: UserId) -> ServiceResult[list[BandRequest]]:
        """Return pending requests that name the user as requester."""
        try:
            requests = self._requests.list_pending_for_requester(user_id)
        except DomainError as exc:
            return ServiceResult([], exc)
        return ServiceResult(self._attach_request_details(requests))

    def get_band_requests(self, user_id: UserId) -> ServiceResult[list[BandRequest]]:
        """Return pending requests for every band the user leads."""
        try:
            led = self._bands.list_memberships(user_id, MemberRole.LEADER)
            if not led:
                return ServiceResult([])
            requests = self._requests.list_pending_for_bands([m.band_id for m in led])
        except DomainError as exc:
            return ServiceResult([], exc)
        return ServiceResult(self._attach_request_details(requests))

    def accept_request(self, user_id: UserId, request_id: str) -> ServiceResult[None]:
        """Accept a request: mark it accepted, then add the musician as a member."""
        try:
            request = self._get_resolvable_request(user_id, request_id)
            self._requests.update_request_status(request.id, RequestStatus.ACCEPTED)
            self._bands.add_member(request.band_id, request.requester_id, MemberRole.MEMBER)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("User %s joined band %s", request.requester_id, request.band_id)
        return ServiceResult(None)

    def reject_request(self, user_id: UserId, request_id: str) -> ServiceResult[None]:
        try:
            request = self._get_resolvable_request(user_id, request_id)
            self._requests.update_request_status(request.id, RequestStatus.REJECTED)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def leave_band(self, user_id: UserId, band_id: str) -> ServiceResult[None]:
        """Remove the caller from a band. The sole leader cannot leave."""
        try:
            band_key = parse_id(BandId, band_id, "band ID")
            membership = self._bands.get_membership(band_key, user_id)
            if membership is None:
                raise NotABandMemberError("You are not a member of this band")
            if membership.is_leader:
                other_leaders = [
                    m
                    for m in self._bands.list_members(band_key)
                    if m.is_leader and m.user_id != user_id
                ]
                if not other_leaders:
                    raise ValidationFailedError(
                        "Transfer leadership or disband the band before leaving"
                    )
            self._bands.delete_member(band_key, user_id)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def remove_member(
        self, user_id: UserId, band_id: str, member_user_id: UserId
    ) -> ServiceResult[None]:
        """Remove another member from a band the caller leads."""
        try:
            band_key = parse_id(BandId, band_id, "band ID")
            self._require_leader(band_key, user_id, "Only band leaders can remove members")
            if member_user_id == user_id:
                raise ValidationFailedError("Leave the band instead of removing yourself")
            if self._bands.get_membership(band_key, member_user_id) is None:
                raise NotABandMemberError()
            self._bands.delete_member(band_key, member_user_id)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def transfer_leadership(
        self, user_id: UserId, band_id: str, new_leader_user_id: UserId
    ) -> ServiceResult[None]:
        """Promote another member to leader, then demote the caller to member.

        The two role updates are separate writes; if the second fails the
        band is left with two leaders.
        """
        try:
            band_key = parse_id(BandId, band_id, "band ID")
            self._require_leader(
                band_key, user_id, "Only the current leader can transfer leadership"
            )
            if new_leader_user_id == user_id:
                raise ValidationFailedError("You are already the leader of this band")
            if self._bands.get_membership(band_key, new_leader_user_id) is None:
                raise NotABandMemberError()
            self._bands.update_member_role(band_key, new_leader_user_id, MemberRole.LEADER)
            self._bands.update_member_role(band_key, user_id, MemberRole.MEMBER)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Leadership of band %s passed from %s to %s", band_id, user_id, new_leader_user_id)
        return ServiceResult(None)

    def restore_creator_leadership(self, band_id: str) -> ServiceResult[None]:
        """Re-add a band's creator as leader when they are missing from its members."""
        try:
            band = self._bands.get_band(parse_id(BandId, band_id, "band ID"), active_only=False)
            if band is None:
                raise BandNotFoundError()
            if self._bands.get_membership(band.id, band.created_by) is not None:
                raise ValidationFailedError("Creator is already a member")
            self._bands.add_member(band.id, band.created_by, MemberRole.LEADER)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(None)

    def disband_band(self, user_id: UserId, band_id: str) -> ServiceResult[None]:
        """Delete a band's members, then its requests, then the band itself."""
        try:
            band_key = parse_id(BandId, band_id, "band ID")
            self._require_leader(band_key, user_id, "Only band leaders can disband bands")
            self._bands.delete_members(band_key)
            try:
                self._requests.delete_requests_for_band(band_key)
            except DomainError as exc:
                logger.error("Error deleting requests of band %s: %s", band_key, exc)
            self._bands.delete_band(band_key)
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Band %s disbanded by user %s", band_id, user_id)
        return ServiceResult(None)

    def _get_active_band(self, band_id: BandId) -> Band:
        band = self._bands.get_band(band_id)
        if band is None:
            raise BandNotFoundError()
        return band

    def _require_leader(self, band_id: BandId, user_id: UserId, message: str) -> None:
        if not leads_band(self._bands, band_id, user_id):
            raise NotAuthorizedError(message)

    def _get_resolvable_request(self, user_id: UserId, request_id: str) -> BandRequest:
        """Load a pending request the caller is allowed to accept or reject.

        Join requests are answered by a band leader, invitations by the
        invited musician.
        """
        request = self._requests.get_request(parse_id(BandRequestId, request_id, "request ID"))
        if request is None:
            raise BandRequestNotFoundError()
        if not request.is_pending:
            raise RequestAlreadyResolvedError()
        if request.request_type == RequestType.BAND_TO_MUSICIAN:
            if request.requester_id != user_id:
                raise NotAuthorizedError("Only the invited musician can respond to this invitation")
        else:
            self._require_leader(
                request.band_id, user_id, "Only band leaders can respond to join requests"
            )
        return request

    def _attach_request_details(self, requests: list[BandRequest]) -> list[BandRequest]:
        if not requests:
            return []
        bands, requesters = {}, {}
        try:
            bands = index_by(self._bands.get_bands({r.band_id for r in requests}))
            requesters = index_by(
                self._profiles.get_profiles_for_users({r.requester_id for r in requests}),
                "user_id",
            )
        except DomainError as exc:
            logger.warning("Could not load band request details: %s", exc)
        return [
            replace(r, band=bands.get(r.band_id), requester=requesters.get(r.requester_id))
            for r in requests
        ]
