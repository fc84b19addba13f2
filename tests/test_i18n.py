"""Tests for language resolution, localisation and the auth session."""

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from content.context_processors import language_context
from content.exceptions import AuthenticationError
from content.i18n import SESSION_LANGUAGE_KEY, Language, coerce_language, localize, pick, resolve_language
from content.permissions import AuthSession, is_staff


class TestCoerceLanguage:
    @pytest.mark.parametrize("value, expected", [("en", Language.EN), ("EN-us", Language.EN), ("ar", Language.AR)])
    def test_known_codes(self, value, expected):
        assert coerce_language(value) == expected

    def test_unknown_falls_back_to_default(self):
        assert coerce_language("fr", Language.EN) == Language.EN

    def test_unknown_falls_back_to_site_language(self, settings):
        settings.LANGUAGE_CODE = "en"
        assert coerce_language(None) == Language.EN


class TestResolveLanguage:
    def request(self, path="/", session=None):
        request = RequestFactory().get(path)
        request.session = session or {}
        return request

    def test_query_wins_over_session(self):
        request = self.request("/?lang=en", {SESSION_LANGUAGE_KEY: "ar"})
        assert resolve_language(request) == Language.EN

    def test_session_used_without_query(self):
        assert resolve_language(self.request(session={SESSION_LANGUAGE_KEY: "en"})) == Language.EN

    def test_site_default(self):
        assert resolve_language(self.request()) == Language.AR

    def test_context_processor(self):
        context = language_context(self.request("/?lang=ar"))
        assert context["is_rtl"] is True
        assert context["text_direction"] == "rtl"
        assert context["alternate_language"] == "en"

        context = language_context(self.request("/?lang=en"))
        assert context["text_direction"] == "ltr"


class TestLocalize:
    def test_pairs_collapse_to_requested_language(self):
        row = {"id": 1, "title_ar": "عنوان", "title_en": "Title", "main_image_url": "u"}
        assert localize(row, "en") == {"id": 1, "title": "Title", "main_image_url": "u"}
        assert localize(row, "ar")["title"] == "عنوان"

    def test_unpaired_suffix_is_kept(self):
        row = {"name_ar": "س"}
        assert localize(row, "en") == {"name_ar": "س"}

    def test_pick(self):
        assert pick("en", "نعم", "yes") == "yes"
        assert pick(Language.AR, "نعم", "yes") == "نعم"


@pytest.mark.django_db
class TestAuthSession:
    def test_from_request_with_user(self, staff_user):
        request = RequestFactory().get("/")
        request.user = staff_user
        session = AuthSession.from_request(request)
        assert session.is_authenticated
        assert session.require_user_id() == staff_user.pk

    def test_anonymous_session_refuses_writes(self):
        request = RequestFactory().get("/")
        request.user = AnonymousUser()
        session = AuthSession.from_request(request)
        assert session.user_id is None
        with pytest.raises(AuthenticationError):
            session.require_user_id()

    def test_is_staff(self, staff_user, plain_user):
        assert is_staff(staff_user)
        assert not is_staff(plain_user)
        assert not is_staff(AnonymousUser())
