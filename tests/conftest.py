"""Shared fixtures: staff users, sessions, fake media storages."""

import pytest

from content.media import FileType, MediaUploader
from content.models import StaffUser
from content.permissions import AuthSession

from tests.helpers import FakeStorage


@pytest.fixture
def staff_user(db):
    return StaffUser.objects.create_user("editor@example.org", "محرر الموقع", "pass-1234", is_staff=True)


@pytest.fixture
def plain_user(db):
    return StaffUser.objects.create_user("reader@example.org", "قارئ", "pass-1234")


@pytest.fixture
def session(staff_user):
    return AuthSession(staff_user)


@pytest.fixture
def staff_client(client, staff_user):
    client.force_login(staff_user)
    return client


@pytest.fixture
def fake_storages():
    return {
        FileType.IMAGE: FakeStorage("image"),
        FileType.DOCUMENT: FakeStorage("raw"),
        FileType.VIDEO: FakeStorage("video"),
    }


@pytest.fixture
def uploader(fake_storages):
    return MediaUploader(storages=fake_storages, language="en")
