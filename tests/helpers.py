"""Test doubles shared across modules."""

import asyncio

from django.core.files.uploadedfile import SimpleUploadedFile

from content.remote import ALL_EVENTS, ChangeFeed, DataService

CLOUD_BASE = "https://res.cloudinary.com/test-cloud"


class FakeStorage:
    """In-memory stand-in for a Cloudinary storage backend."""

    def __init__(self, resource_type, fail=False):
        self.resource_type = resource_type
        self.fail = fail
        self.saved = []

    def save(self, name, content):
        if self.fail:
            raise ConnectionError("cloud unreachable")
        self.saved.append(name)
        return name

    def url(self, name):
        return f"{CLOUD_BASE}/{self.resource_type}/upload/v1/{name}"


class ScriptedDataService(DataService):
    """Every select_all() parks on a future the test resolves by hand."""

    table = "news"

    def __init__(self):
        self.pending = []
        self.feed = ChangeFeed()

    async def select_all(self):
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    def subscribe(self, callback, events=ALL_EVENTS):
        return self.feed.subscribe(self.table, callback, events)


class FlakyDataService(DataService):
    """Serves `rows` until `broken` is set, then fails every read and write."""

    table = "news"

    def __init__(self, rows):
        self.rows = rows
        self.broken = False

    async def select_all(self):
        if self.broken:
            raise ConnectionError("data service unavailable")
        return list(self.rows)

    async def insert_one(self, fields):
        raise ConnectionError("data service unavailable")


def make_file(name="photo.jpg", content_type="image/jpeg", size=None):
    f = SimpleUploadedFile(name, b"binary-content", content_type=content_type)
    if size is not None:
        f.size = size
    return f
