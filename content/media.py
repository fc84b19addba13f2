# content/media.py
# -*- coding: utf-8 -*-
"""
مسار المرفقات: تحقق محلي (النوع + الحجم) ثم رفع إلى Cloudinary وإرجاع رابط دائم.

- فشل التحقق يُسقط ذلك الملف وحده، ولا يصل إلى خدمة الرفع.
- upload_many ترفع بالتوازي، والمستدعي ينتظر الكل قبل بناء الحمولة.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import models
from django.utils import timezone

from .exceptions import UploadError
from .i18n import Language, pick
from .storage import storage_for

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class FileType(models.TextChoices):
    IMAGE = "image", "صورة"
    DOCUMENT = "document", "مستند"
    VIDEO = "video", "فيديو"


MAX_FILE_SIZE = {
    FileType.IMAGE: 100 * MB,
    FileType.DOCUMENT: 100 * MB,
    FileType.VIDEO: 1024 * MB,
}

ALLOWED_FILE_TYPES = {
    FileType.IMAGE: ("image/jpeg", "image/png", "image/webp"),
    FileType.DOCUMENT: (
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
    FileType.VIDEO: (
        "video/mp4",
        "video/avi",
        "video/mov",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-ms-wmv",
        "video/webm",
        "video/mpeg",
        "video/ogv",
    ),
}

# حدود مجموعات الوسائط المنظمة (مشاريع / قصص نجاح)
MAX_IMAGES = 10
MAX_VIDEOS = 5
MAX_FILES = 5

REQUIRED_CLOUDINARY_KEYS = ("CLOUD_NAME", "API_KEY", "API_SECRET")


def upload_folder() -> str:
    return getattr(settings, "CONTENT_UPLOAD_FOLDER", "") or "nada_foundation"


def ensure_configured() -> None:
    """تُستدعى عند الإقلاع؛ غياب أي مفتاح Cloudinary خطأ قاتل."""
    conf = getattr(settings, "CLOUDINARY_STORAGE", None) or {}
    missing = [key for key in REQUIRED_CLOUDINARY_KEYS if not conf.get(key)]
    if missing:
        raise ImproperlyConfigured(
            "Missing Cloudinary environment variables: "
            + ", ".join(f"CLOUDINARY_{key}" for key in missing)
        )


# =========================
# التحقق
# =========================
def validate_upload(file, file_type, language=Language.AR) -> None:
    file_type = FileType(file_type)
    name = os.path.basename(getattr(file, "name", "") or "")
    content_type = (getattr(file, "content_type", "") or "").lower()
    allowed = ALLOWED_FILE_TYPES[file_type]
    if content_type not in allowed:
        raise ValidationError(
            pick(
                language,
                f"({name}) نوع الملف غير مسموح. الأنواع المسموحة: {', '.join(allowed)}",
                f"({name}) Invalid file type. Allowed types: {', '.join(allowed)}",
            ),
            code="invalid_type",
        )

    limit = MAX_FILE_SIZE[file_type]
    if (getattr(file, "size", 0) or 0) > limit:
        raise ValidationError(
            pick(
                language,
                f"({name}) حجم الملف يتجاوز {limit // MB}MB",
                f"({name}) File size exceeds {limit // MB}MB limit",
            ),
            code="too_large",
        )


def format_file_size(size_in_bytes: int) -> str:
    """حجم التقرير كنص: "2.50 MB"."""
    return f"{(size_in_bytes or 0) / MB:.2f} MB"


def media_record(url: str, caption_ar: str = "", caption_en: str = "") -> dict:
    """عنصر وسائط منظم للمشاريع وقصص النجاح."""
    return {
        "url": url,
        "uploaded_at": timezone.now().isoformat(),
        "caption_ar": caption_ar or "",
        "caption_en": caption_en or "",
    }


# =========================
# الرفع
# =========================
@dataclass(frozen=True)
class UploadOutcome:
    name: str
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.url is not None and self.error is None


class MediaUploader:
    """
    storages: خريطة اختيارية FileType → كائن تخزين (للاختبارات).
    الافتراضي: صنف Cloudinary المناسب من storage_for().
    """

    def __init__(self, storages: Mapping | None = None, language=Language.AR):
        self._storages = dict(storages or {})
        self.language = language

    def _storage(self, file_type: FileType):
        storage = self._storages.get(file_type)
        if storage is None:
            storage = self._storages[file_type] = storage_for(file_type)
        return storage

    def upload(self, file, file_type=FileType.IMAGE) -> str:
        file_type = FileType(file_type)
        validate_upload(file, file_type, self.language)

        storage = self._storage(file_type)
        name = os.path.basename(getattr(file, "name", "") or "upload")
        try:
            stored_name = storage.save(f"{upload_folder()}/{name}", file)
            url = storage.url(stored_name)
        except Exception as exc:
            logger.exception("Upload error for %s (%s)", name, file_type)
            raise UploadError(f"Upload error: {exc}") from exc

        if not url:
            raise UploadError("No URL received from Cloudinary")
        logger.info("Uploaded %s as %s", name, file_type)
        return url

    async def upload_many(self, files: Iterable[tuple]) -> list[UploadOutcome]:
        """
        files: [(file, file_type), ...]
        يعيد نتيجة لكل ملف بنفس الترتيب؛ لا يرمي.
        """
        files = list(files)

        async def _one(file, file_type) -> UploadOutcome:
            name = os.path.basename(getattr(file, "name", "") or "")
            try:
                validate_upload(file, file_type, self.language)
            except ValidationError as exc:
                return UploadOutcome(name, error=" ".join(exc.messages))
            try:
                url = await sync_to_async(self.upload, thread_sensitive=False)(file, file_type)
            except (UploadError, ValidationError) as exc:
                message = exc.message if isinstance(exc, UploadError) else " ".join(exc.messages)
                return UploadOutcome(name, error=message)
            return UploadOutcome(name, url=url)

        return list(await asyncio.gather(*(_one(f, t) for f, t in files)))
