"""Integration tests for profile reviews.

Run with: pytest tests/test_reviews.py -v
"""

import pytest
from rest_framework.test import APIClient

from marketplace import models


@pytest.fixture
def finished_booking(make_profile, make_event):
    organizer = make_profile(role="organizer", display_name="Venue Co")
    musician = make_profile(display_name="Asha")
    event = make_event(organizer, days_ahead=-3)
    booking = models.Booking.objects.create(
        event=event, musician_profile=musician, status="completed"
    )
    return organizer, musician, booking


@pytest.mark.django_db
class TestSubmitReview:
    """Tests for POST /api/profiles/{id}/reviews"""

    def test_musician_reviews_organizer(self, client_for, finished_booking):
        organizer, musician, booking = finished_booking

        response = client_for(musician.user).post(
            f"/api/profiles/{organizer.id}/reviews",
            {"rating": 5, "comment": "Paid on time"},
            format="json",
        )

        assert response.status_code == 201
        review = models.Review.objects.get()
        assert review.booking_id == booking.id
        assert review.reviewer_profile_id == musician.id

    def test_organizer_reviews_musician(self, client_for, finished_booking):
        organizer, musician, _ = finished_booking

        response = client_for(organizer.user).post(
            f"/api/profiles/{musician.id}/reviews", {"rating": 4}, format="json"
        )

        assert response.status_code == 201

    def test_second_review_conflicts(self, client_for, finished_booking):
        organizer, musician, _ = finished_booking
        client = client_for(musician.user)
        client.post(f"/api/profiles/{organizer.id}/reviews", {"rating": 5}, format="json")

        response = client.post(f"/api/profiles/{organizer.id}/reviews", {"rating": 1}, format="json")

        assert response.status_code == 409
        assert models.Review.objects.count() == 1

    def test_pending_booking_not_reviewable(self, client_for, make_profile, make_event):
        organizer = make_profile(role="organizer")
        musician = make_profile()
        models.Booking.objects.create(event=make_event(organizer), musician_profile=musician)

        response = client_for(musician.user).post(
            f"/api/profiles/{organizer.id}/reviews", {"rating": 5}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["code"] == "REVIEW_NOT_ALLOWED"

    def test_rating_out_of_range(self, client_for, finished_booking):
        organizer, musician, _ = finished_booking

        response = client_for(musician.user).post(
            f"/api/profiles/{organizer.id}/reviews", {"rating": 9}, format="json"
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestListReviews:
    """Tests for GET /api/profiles/{id}/reviews"""

    def test_summary_with_reviewer_and_event(self, api_client: APIClient, finished_booking):
        organizer, musician, booking = finished_booking
        models.Review.objects.create(
            booking=booking,
            rating=4,
            reviewer_profile=organizer,
            reviewee_profile=musician,
        )

        response = api_client.get(f"/api/profiles/{musician.id}/reviews")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["average_rating"] == 4.0
        assert body["reviews"][0]["reviewer"]["display_name"] == "Venue Co"
        assert body["reviews"][0]["event"]["title"] == booking.event.title

    def test_profile_without_reviews(self, api_client: APIClient, make_profile):
        response = api_client.get(f"/api/profiles/{make_profile().id}/reviews")

        assert response.json() == {"reviews": [], "total": 0, "average_rating": 0.0}
