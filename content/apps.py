# content/apps.py
# -*- coding: utf-8 -*-
from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "content"
    verbose_name = "محتوى الموقع"

    def ready(self):
        # تسجيل مستقبِلات قناة التغييرات (post_save / post_delete)
        from . import remote  # noqa: F401
        from .media import ensure_configured

        ensure_configured()
