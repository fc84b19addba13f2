# content/exceptions.py
# -*- coding: utf-8 -*-
"""
أنواع الأخطاء في طبقة المحتوى:

- ImproperlyConfigured (من Django): قيم الإقلاع ناقصة → خطأ قاتل.
- AuthenticationError: محاولة كتابة بدون جلسة مصادَق عليها.
- ValidationError (من Django): حقل/نوع ملف/حجم ملف غير صالح عند حدود النموذج.
- RemoteOperationError: رفض من طبقة البيانات أو من خدمة الرفع.
"""
from __future__ import annotations


class ContentError(Exception):
    """الأساس لأخطاء طبقة المحتوى القابلة للاسترداد."""

    default_message = "Content operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class AuthenticationError(ContentError):
    default_message = "User not authenticated"


class RemoteOperationError(ContentError):
    default_message = "Remote operation failed"


class RecordNotFound(RemoteOperationError):
    default_message = "Record not found"


class UploadError(RemoteOperationError):
    default_message = "Upload failed"
