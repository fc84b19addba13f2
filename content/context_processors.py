# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Dict

from django.http import HttpRequest

from .i18n import RTL_LANGUAGES, Language, resolve_language


def language_context(request: HttpRequest) -> Dict[str, Any]:
    """
    يضيف للقوالب:
      - current_language: "ar" أو "en"
      - is_rtl / text_direction: اتجاه الصفحة
      - languages: قائمة اللغات المتاحة للمبدّل
      - alternate_language: اللغة الأخرى (لزر التبديل)
    """
    lang = resolve_language(request)
    return {
        "current_language": lang.value,
        "is_rtl": lang in RTL_LANGUAGES,
        "text_direction": "rtl" if lang in RTL_LANGUAGES else "ltr",
        "languages": Language.choices,
        "alternate_language": (Language.EN if lang == Language.AR else Language.AR).value,
    }
