"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from marketplace import models


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def make_user(django_user_model):
    counter = iter(range(1, 10_000))

    def factory(username: str | None = None):
        return django_user_model.objects.create_user(
            username=username or f"user{next(counter)}", password="secret-pass"
        )

    return factory


@pytest.fixture
def make_profile(make_user):
    def factory(user=None, role: str = "musician", display_name: str | None = "Test Musician", **extra):
        return models.Profile.objects.create(
            user=user or make_user(), role=role, display_name=display_name, **extra
        )

    return factory


@pytest.fixture
def make_event():
    def factory(organizer_profile, title: str = "Friday Gig", days_ahead: int = 7, **extra):
        starts_at = timezone.now() + timedelta(days=days_ahead)
        extra.setdefault("ends_at", starts_at + timedelta(hours=3))
        return models.Event.objects.create(
            organizer_profile=organizer_profile, title=title, starts_at=starts_at, **extra
        )

    return factory


@pytest.fixture
def make_band():
    def factory(leader, name: str = "The Testers", members=()):
        band = models.Band.objects.create(name=name, description="", created_by=leader)
        models.BandMember.objects.create(band=band, user=leader, role="leader")
        for member in members:
            models.BandMember.objects.create(band=band, user=member, role="member")
        return band

    return factory


@pytest.fixture
def client_for():
    def factory(user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return factory
