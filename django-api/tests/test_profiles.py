"""Integration tests for profile setup, editing and the musician directory.

Run with: pytest tests/test_profiles.py -v
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from marketplace import models


@pytest.mark.django_db
class TestProfileSetup:
    """Tests for POST/GET /api/me/profile"""

    def test_create_musician_profile(self, client_for, make_user):
        user = make_user()

        response = client_for(user).post(
            "/api/me/profile",
            {
                "role": "musician",
                "display_name": "Asha",
                "genres": ["Jazz", ""],
                "price_min": "500.00",
                "is_band": False,
            },
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "musician"
        assert body["genres"] == ["Jazz"]
        assert body["price_min"] == "500.00"
        profile = models.Profile.objects.get(user=user)
        assert profile.is_band is False

    def test_second_profile_conflicts(self, client_for, make_profile):
        profile = make_profile()

        response = client_for(profile.user).post(
            "/api/me/profile", {"role": "organizer"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["code"] == "PROFILE_EXISTS"
        assert models.Profile.objects.count() == 1

    def test_unknown_role_rejected(self, client_for, make_user):
        response = client_for(make_user()).post(
            "/api/me/profile", {"role": "promoter"}, format="json"
        )

        assert response.status_code == 400

    def test_get_own_profile(self, client_for, make_profile):
        profile = make_profile(display_name="Asha")

        response = client_for(profile.user).get("/api/me/profile")

        assert response.status_code == 200
        assert response.json()["id"] == str(profile.id)

    def test_get_own_profile_before_setup(self, client_for, make_user):
        response = client_for(make_user()).get("/api/me/profile")

        assert response.status_code == 404

    def test_requires_authentication(self, api_client: APIClient):
        response = api_client.get("/api/me/profile")

        assert response.status_code == 403


@pytest.mark.django_db
class TestProfileEdit:
    """Tests for PATCH /api/me/profile"""

    def test_edit_profile(self, client_for, make_profile):
        profile = make_profile()

        response = client_for(profile.user).patch(
            "/api/me/profile",
            {"location": " Mumbai ", "youtube_url": "https://youtube.com/watch?v=abc"},
            format="json",
        )

        assert response.status_code == 200
        profile.refresh_from_db()
        assert profile.location == "Mumbai"
        assert profile.youtube_url == "https://youtube.com/watch?v=abc"

    def test_price_minimum_above_stored_maximum(self, client_for, make_profile):
        profile = make_profile(price_max=Decimal("1000.00"))

        response = client_for(profile.user).patch(
            "/api/me/profile", {"price_min": "2000.00"}, format="json"
        )

        assert response.status_code == 400
        profile.refresh_from_db()
        assert profile.price_min is None

    def test_organizer_is_band_stays_empty(self, client_for, make_profile):
        profile = make_profile(role="organizer")

        response = client_for(profile.user).patch(
            "/api/me/profile", {"is_band": True}, format="json"
        )

        assert response.status_code == 200
        profile.refresh_from_db()
        assert profile.is_band is None


@pytest.mark.django_db
class TestProfileDetail:
    """Tests for GET /api/profiles/{id}"""

    def test_public_profile(self, api_client: APIClient, make_profile):
        profile = make_profile(display_name="Asha", location="Pune")

        response = api_client.get(f"/api/profiles/{profile.id}")

        assert response.status_code == 200
        assert response.json()["location"] == "Pune"

    def test_missing_profile(self, api_client: APIClient):
        response = api_client.get("/api/profiles/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404


@pytest.mark.django_db
class TestMusicianDirectory:
    """Tests for GET /api/musicians"""

    def test_lists_only_musicians(self, api_client: APIClient, make_profile):
        make_profile(display_name="Asha")
        make_profile(role="organizer", display_name="Venue Co")

        response = api_client.get("/api/musicians")

        assert response.status_code == 200
        assert [p["display_name"] for p in response.json()] == ["Asha"]

    def test_search_and_genre(self, api_client: APIClient, make_profile):
        make_profile(display_name="Asha", location="Pune", genres=["Jazz"])
        make_profile(display_name="Ravi", location="Pune", genres=["Rock"])
        make_profile(display_name="Mira", location="Goa", genres=["Jazz"])

        response = api_client.get("/api/musicians", {"search": "pune", "genre": "Jazz"})

        assert [p["display_name"] for p in response.json()] == ["Asha"]

    def test_invalid_price_range(self, api_client: APIClient):
        response = api_client.get("/api/musicians", {"price_range": "free"})

        assert response.status_code == 400
