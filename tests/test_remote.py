"""Tests for the table-scoped data service and the change feed."""

import uuid

import pytest
from asgiref.sync import async_to_sync

from content.exceptions import AuthenticationError, RecordNotFound, RemoteOperationError
from content.models import News, Project, Report
from content.remote import (
    DELETE,
    INSERT,
    UPDATE,
    ChangeEvent,
    ChangeFeed,
    DataService,
    OrmDataService,
    change_feed,
)
from content.resources import NEWS, PROJECTS, RESOURCES, get_resource


# =========================
# ChangeFeed
# =========================
class TestChangeFeed:
    def test_publish_reaches_matching_subscribers_only(self):
        feed = ChangeFeed()
        news_events, other_events = [], []
        feed.subscribe("news", news_events.append)
        feed.subscribe("events", other_events.append)

        feed.publish(ChangeEvent("news", INSERT, 1))

        assert news_events == [ChangeEvent("news", INSERT, 1)]
        assert other_events == []

    def test_event_type_filter(self):
        feed = ChangeFeed()
        seen = []
        feed.subscribe("news", seen.append, events={DELETE})

        feed.publish(ChangeEvent("news", UPDATE, 1))
        feed.publish(ChangeEvent("news", DELETE, 1))

        assert [e.event_type for e in seen] == [DELETE]

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValueError):
            ChangeFeed().subscribe("news", print, events={"TRUNCATE"})

    def test_unsubscribe_is_idempotent(self):
        feed = ChangeFeed()
        seen = []
        sub = feed.subscribe("news", seen.append)

        sub.unsubscribe()
        sub.unsubscribe()
        feed.publish(ChangeEvent("news", INSERT, 1))

        assert not sub.active
        assert seen == []
        assert feed.subscriber_count("news") == 0

    def test_context_manager_releases_subscription(self):
        feed = ChangeFeed()
        with feed.subscribe("news", lambda e: None):
            assert feed.subscriber_count("news") == 1
        assert feed.subscriber_count("news") == 0

    def test_failing_subscriber_does_not_block_others(self):
        feed = ChangeFeed()
        seen = []

        def broken(event):
            raise RuntimeError("listener crashed")

        feed.subscribe("news", broken)
        feed.subscribe("news", seen.append)
        feed.publish(ChangeEvent("news", INSERT, 1))

        assert len(seen) == 1


@pytest.mark.django_db
class TestSignals:
    def test_save_and_delete_are_announced(self, staff_user):
        seen = []
        with change_feed.subscribe("news", seen.append):
            news = News.objects.create(user=staff_user, title_ar="أ", title_en="a")
            news.category = "x"
            news.save()
            pk = news.pk
            news.delete()

        assert [(e.event_type, e.record_id) for e in seen] == [(INSERT, pk), (UPDATE, pk), (DELETE, pk)]

    def test_non_content_models_are_not_announced(self, staff_user):
        seen = []
        with change_feed.subscribe("content_staffuser", seen.append):
            staff_user.name = "renamed"
            staff_user.save()
        assert seen == []


# =========================
# DataService / OrmDataService
# =========================
class TestDataServiceInterface:
    def test_missing_operation_raises(self):
        class ReadOnlyService(DataService):
            table = "news"

            async def select_all(self):
                return []

        service = ReadOnlyService()
        assert async_to_sync(service.select_all)() == []
        with pytest.raises(NotImplementedError):
            async_to_sync(service.delete_by_id)(uuid.uuid4())

    def test_orm_service_implements_every_operation(self):
        for name in ("select_all", "select_page", "count", "select_one",
                     "insert_one", "update_by_id", "delete_by_id", "subscribe"):
            assert getattr(OrmDataService, name) is not getattr(DataService, name)


@pytest.mark.django_db
class TestOrmDataService:
    def test_published_only_filters_reads(self, staff_user):
        News.objects.create(user=staff_user, title_ar="أ", title_en="a", published=True)
        draft = News.objects.create(user=staff_user, title_ar="ب", title_en="b")
        service = OrmDataService(NEWS, published_only=True)

        rows = async_to_sync(service.select_all)()

        assert len(rows) == 1
        with pytest.raises(RecordNotFound):
            async_to_sync(service.select_one)(draft.pk)

    def test_insert_requires_user_id(self, db):
        with pytest.raises(AuthenticationError):
            async_to_sync(OrmDataService(NEWS).insert_one)({"title_ar": "أ", "title_en": "a"})

    def test_insert_assigns_id_and_timestamps(self, staff_user):
        row = async_to_sync(OrmDataService(NEWS).insert_one)(
            {"title_ar": "أ", "title_en": "a", "user_id": staff_user.pk, "created_at": "2000-01-01T00:00:00Z"}
        )

        assert isinstance(row["id"], uuid.UUID)
        assert row["created_at"].year != 2000
        assert row["additional_images"] == []

    def test_insert_unknown_column_rejected(self, staff_user):
        with pytest.raises(RemoteOperationError):
            async_to_sync(OrmDataService(NEWS).insert_one)(
                {"title_ar": "أ", "title_en": "a", "user_id": staff_user.pk, "views_count": 1}
            )

    def test_insert_applies_model_defaults(self, staff_user):
        row = async_to_sync(OrmDataService(PROJECTS).insert_one)(
            {"title_ar": "مشروع", "title_en": "Project", "user_id": staff_user.pk}
        )

        assert row["status"] == Project.Status.PLANNED
        assert row["budget"] == {"amount": 0, "currency": "USD"}
        assert row["beneficiaries_breakdown"]["total"] == 0

    def test_invalid_id_is_not_found(self, db):
        with pytest.raises(RecordNotFound):
            async_to_sync(OrmDataService(NEWS).select_one)("not-a-uuid")

    def test_count_and_page(self, staff_user):
        for i in range(5):
            News.objects.create(user=staff_user, title_ar=f"{i}", title_en=f"{i}")
        service = OrmDataService(NEWS)

        assert async_to_sync(service.count)() == 5
        assert len(async_to_sync(service.select_page)(4, 10)) == 1


# =========================
# Models / resources
# =========================
class TestResources:
    def test_registry_keys(self):
        assert set(RESOURCES) == {"news", "events", "reports", "projects", "success-stories"}

    def test_unknown_resource(self):
        with pytest.raises(KeyError):
            get_resource("partners")

    def test_tables(self):
        assert [s.table for s in RESOURCES.values()] == [
            "news", "events", "reports", "projects", "success_stories",
        ]

    def test_writable_payload_strips_server_fields(self):
        payload = NEWS.writable_payload({"id": 1, "user_id": 2, "created_at": 3, "updated_at": 4, "title_ar": "أ"})
        assert payload == {"title_ar": "أ"}

    def test_matches_is_case_insensitive_over_search_fields(self):
        row = {"title": "Clean Water", "description": "Wells in the south", "budget": "Water"}
        assert PROJECTS.matches(row, "water")
        assert PROJECTS.matches(row, " SOUTH ")
        assert not PROJECTS.matches({"title": "x", "budget": "Water"}, "water")
        assert PROJECTS.matches(row, "")

    def test_bilingual_pairs(self):
        assert ("title_ar", "title_en") in NEWS.bilingual_pairs
        assert ("objectives_ar", "objectives_en") in PROJECTS.bilingual_pairs

    def test_writable_fields_exclude_server_fields(self):
        fields = News.writable_fields()
        assert "title_ar" in fields
        assert not fields & {"id", "user_id", "created_at", "updated_at"}


class TestReportDownloadUrl:
    def test_cloudinary_url_gets_attachment_flag(self):
        report = Report(file_url="https://res.cloudinary.com/c/raw/upload/v1/nada_foundation/annual.pdf")
        assert report.file_download_url == (
            "https://res.cloudinary.com/c/raw/upload/fl_attachment:annual.pdf/v1/nada_foundation/annual.pdf"
        )

    def test_other_hosts_get_disposition_query(self):
        report = Report(file_url="https://files.example.org/annual.pdf")
        assert report.file_download_url.startswith("https://files.example.org/annual.pdf?response-content-disposition=")

    def test_empty(self):
        assert Report(file_url="").file_download_url == ""
