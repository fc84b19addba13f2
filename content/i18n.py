# content/i18n.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Mapping

from django.conf import settings
from django.db import models
from django.http import HttpRequest

SESSION_LANGUAGE_KEY = "site_language"


class Language(models.TextChoices):
    AR = "ar", "العربية"
    EN = "en", "English"


RTL_LANGUAGES = {Language.AR}


def coerce_language(value, default: Language | None = None) -> Language:
    """يحوّل أي قيمة ('ar', 'EN', Language) إلى Language، وإلا يعيد الافتراضي."""
    code = (str(value or "")).strip().lower()[:2]
    if code in Language.values:
        return Language(code)
    if default is not None:
        return default
    return coerce_language(getattr(settings, "LANGUAGE_CODE", "ar"), Language.AR)


def resolve_language(request: HttpRequest) -> Language:
    """الأولوية: ?lang= ثم الجلسة ثم LANGUAGE_CODE."""
    lang = request.GET.get("lang")
    if not lang and hasattr(request, "session"):
        lang = request.session.get(SESSION_LANGUAGE_KEY)
    return coerce_language(lang)


def pick(language, ar: str, en: str) -> str:
    """اختيار نص الرسالة بحسب اللغة."""
    return en if coerce_language(language) == Language.EN else ar


def localize(row: Mapping, language) -> dict:
    """
    يطوي أزواج الحقول (x_ar, x_en) إلى حقل واحد x بلغة الطلب.
    بقية الحقول (روابط، تواريخ، قيم ثابتة) تبقى كما هي.
    """
    lang = coerce_language(language)
    suffix = f"_{lang.value}"
    out: dict = {}
    for key, value in row.items():
        if key.endswith(("_ar", "_en")) and key[:-3] + ("_en" if key.endswith("_ar") else "_ar") in row:
            if key.endswith(suffix):
                out[key[:-3]] = value
            continue
        out[key] = value
    return out
