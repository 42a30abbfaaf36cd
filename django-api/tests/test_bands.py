"""Integration tests for bands, memberships and join/invite requests.

Run with: pytest tests/test_bands.py -v
"""

from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from marketplace import models
from marketplace.domain.errors import BackendError
from marketplace.stores.django_store import DjangoBandStore


def role_of(band, user) -> str | None:
    member = models.BandMember.objects.filter(band=band, user=user).first()
    return member.role if member else None


@pytest.mark.django_db
class TestBandCreate:
    """Tests for POST /api/bands"""

    def test_creator_becomes_leader(self, client_for, make_profile):
        profile = make_profile(display_name="Asha")

        response = client_for(profile.user).post(
            "/api/bands", {"name": "The Testers"}, format="json"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "The Testers"
        assert body["member_count"] == 1
        [leader] = body["members"]
        assert leader["role"] == "leader"
        assert leader["user"]["display_name"] == "Asha"

    def test_blank_name_rejected(self, client_for, make_user):
        response = client_for(make_user()).post("/api/bands", {"name": "  "}, format="json")

        assert response.status_code == 400
        assert not models.Band.objects.exists()

    def test_failed_leader_insert_leaves_no_band(self, client_for, make_user):
        with patch.object(DjangoBandStore, "add_member", side_effect=BackendError()):
            response = client_for(make_user()).post(
                "/api/bands", {"name": "The Testers"}, format="json"
            )

        assert response.status_code == 502
        assert response.json()["message"] == "The request could not be completed"
        assert not models.Band.objects.exists()


@pytest.mark.django_db
class TestBandQueries:
    """Tests for GET /api/bands, /api/bands/{id} and /api/me/bands"""

    def test_list_counts_members(self, api_client: APIClient, make_user, make_band):
        leader = make_user()
        make_band(leader, members=[make_user(), make_user()])

        response = api_client.get("/api/bands")

        assert response.status_code == 200
        assert response.json()[0]["member_count"] == 3

    def test_member_without_profile_is_unknown_user(self, api_client: APIClient, make_user, make_band):
        band = make_band(make_user())

        response = api_client.get(f"/api/bands/{band.id}")

        assert response.status_code == 200
        assert response.json()["members"][0]["user"]["display_name"] == "Unknown User"

    def test_inactive_band_not_found(self, api_client: APIClient, make_user, make_band):
        band = make_band(make_user())
        models.Band.objects.filter(id=band.id).update(is_active=False)

        response = api_client.get(f"/api/bands/{band.id}")

        assert response.status_code == 404

    def test_my_bands(self, client_for, make_user, make_band):
        user = make_user()
        band = make_band(make_user(), members=[user])
        make_band(make_user(), name="Other Band")

        response = client_for(user).get("/api/me/bands")

        assert [b["id"] for b in response.json()] == [str(band.id)]
        assert response.json()[0]["member_count"] == 2


@pytest.mark.django_db
class TestMembership:
    """Tests for leaving, removing and leadership transfer."""

    def test_transfer_leadership(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])

        response = client_for(leader).post(
            f"/api/bands/{band.id}/transfer-leadership",
            {"new_leader_user_id": member.pk},
            format="json",
        )

        assert response.status_code == 204
        assert role_of(band, member) == "leader"
        assert role_of(band, leader) == "member"

    def test_transfer_by_member_forbidden(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])

        response = client_for(member).post(
            f"/api/bands/{band.id}/transfer-leadership",
            {"new_leader_user_id": member.pk},
            format="json",
        )

        assert response.status_code == 403
        assert role_of(band, leader) == "leader"

    def test_transfer_to_outsider(self, client_for, make_user, make_band):
        leader = make_user()
        band = make_band(leader)

        response = client_for(leader).post(
            f"/api/bands/{band.id}/transfer-leadership",
            {"new_leader_user_id": make_user().pk},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_A_MEMBER"

    def test_member_leaves(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])

        response = client_for(member).post(f"/api/bands/{band.id}/leave")

        assert response.status_code == 204
        assert role_of(band, member) is None

    def test_sole_leader_cannot_leave(self, client_for, make_user, make_band):
        leader = make_user()
        band = make_band(leader, members=[make_user()])

        response = client_for(leader).post(f"/api/bands/{band.id}/leave")

        assert response.status_code == 400
        assert role_of(band, leader) == "leader"

    def test_leader_removes_member(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])

        response = client_for(leader).delete(f"/api/bands/{band.id}/members/{member.pk}")

        assert response.status_code == 204
        assert role_of(band, member) is None

    def test_disband(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])
        models.BandRequest.objects.create(
            band=band, requester=make_user(), request_type="musician_to_band"
        )

        response = client_for(leader).delete(f"/api/bands/{band.id}")

        assert response.status_code == 204
        assert not models.Band.objects.filter(id=band.id).exists()
        assert not models.BandMember.objects.exists()
        assert not models.BandRequest.objects.exists()

    def test_member_cannot_disband(self, client_for, make_user, make_band):
        leader, member = make_user(), make_user()
        band = make_band(leader, members=[member])

        response = client_for(member).delete(f"/api/bands/{band.id}")

        assert response.status_code == 403
        assert models.Band.objects.filter(id=band.id).exists()


@pytest.mark.django_db
class TestBandRequests:
    """Tests for join requests and invitations."""

    def test_join_request_accepted_by_leader(self, client_for, make_user, make_band):
        leader, musician = make_user(), make_user()
        band = make_band(leader)

        created = client_for(musician).post(
            f"/api/bands/{band.id}/join-requests", {"message": "Drummer here"}, format="json"
        )
        pending = client_for(leader).get("/api/me/led-band-requests")
        accepted = client_for(leader).post(
            f"/api/band-requests/{created.json()['id']}/accept"
        )

        assert created.status_code == 201
        assert [r["id"] for r in pending.json()] == [created.json()["id"]]
        assert pending.json()[0]["band"]["name"] == "The Testers"
        assert accepted.status_code == 204
        assert role_of(band, musician) == "member"
        assert models.BandRequest.objects.get().status == "accepted"

    def test_member_cannot_request_to_join(self, client_for, make_user, make_band):
        leader = make_user()
        band = make_band(leader)

        response = client_for(leader).post(f"/api/bands/{band.id}/join-requests", {}, format="json")

        assert response.status_code == 400
        assert response.json()["message"] == "You are already a member of this band"

    def test_invite_rejected_by_musician(self, client_for, make_user, make_band):
        leader, musician = make_user(), make_user()
        band = make_band(leader)

        invite = client_for(leader).post(
            f"/api/bands/{band.id}/invites", {"musician_user_id": musician.pk}, format="json"
        )
        inbox = client_for(musician).get("/api/me/band-requests")
        rejected = client_for(musician).post(f"/api/band-requests/{invite.json()['id']}/reject")
        again = client_for(musician).post(f"/api/band-requests/{invite.json()['id']}/accept")

        assert invite.status_code == 201
        assert inbox.json()[0]["request_type"] == "band_to_musician"
        assert rejected.status_code == 204
        assert again.status_code == 409
        assert role_of(band, musician) is None

    def test_second_join_request_conflicts(self, client_for, make_user, make_band):
        leader, musician = make_user(), make_user()
        band = make_band(leader)
        client = client_for(musician)
        client.post(f"/api/bands/{band.id}/join-requests", {}, format="json")

        response = client.post(f"/api/bands/{band.id}/join-requests", {}, format="json")

        assert response.status_code == 409
        assert response.json()["code"] == "REQUEST_ALREADY_PENDING"
        assert models.BandRequest.objects.count() == 1

    def test_invite_conflicts_with_pending_join_request(self, client_for, make_user, make_band):
        leader, musician = make_user(), make_user()
        band = make_band(leader)
        client_for(musician).post(f"/api/bands/{band.id}/join-requests", {}, format="json")

        response = client_for(leader).post(
            f"/api/bands/{band.id}/invites", {"musician_user_id": musician.pk}, format="json"
        )

        assert response.status_code == 409
        assert models.BandRequest.objects.count() == 1

    def test_join_request_missing_band(self, client_for, make_user):
        response = client_for(make_user()).post(
            "/api/bands/00000000-0000-0000-0000-000000000000/join-requests", {}, format="json"
        )

        assert response.status_code == 404
