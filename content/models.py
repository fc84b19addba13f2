# content/models.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
import uuid
from urllib.parse import quote

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models

# حقول يعيّنها الخادم فقط ولا تُقبل من العميل
SERVER_ASSIGNED_FIELDS = frozenset({"id", "user", "user_id", "created_at", "updated_at"})


# =========================
# مستخدم لوحة المحتوى
# =========================
class StaffUserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email, name, password=None, **extra_fields):
        if not email:
            raise ValueError("البريد الإلكتروني مطلوب")
        if not name:
            raise ValueError("اسم المستخدم مطلوب")
        user = self.model(email=self.normalize_email(email.strip()), name=name.strip(), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, name, password, **extra_fields)


class StaffUser(AbstractBaseUser, PermissionsMixin):
    email = models.EmailField("البريد الإلكتروني", unique=True)
    name = models.CharField("الاسم", max_length=150, db_index=True)

    is_active = models.BooleanField("نشط", default=True)
    is_staff = models.BooleanField("موظّف لوحة", default=False)
    date_joined = models.DateTimeField("تاريخ الانضمام", auto_now_add=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = StaffUserManager()

    class Meta:
        verbose_name = "مستخدم اللوحة"
        verbose_name_plural = "مستخدمو اللوحة"

    def __str__(self):
        return f"{self.name} <{self.email}>"


# =========================
# الأساس المشترك لسجلات المحتوى
# =========================
class ContentRecord(models.Model):
    """
    صف واحد من أحد جداول المحتوى (خبر/فعالية/تقرير/مشروع/قصة نجاح).
    - id: UUID يعيّنه الخادم ولا يتغير.
    - user: صاحب السجل، يُعيَّن من الجلسة عند الإنشاء ولا يُعدَّل.
    - كل نص ظاهر للمستخدم له نسختان: _ar و _en.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    published = models.BooleanField("منشور", default=False, db_index=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_records",
        editable=False,
        verbose_name="الكاتب",
    )
    created_at = models.DateTimeField("تاريخ الإنشاء", auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField("تاريخ التحديث", auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return getattr(self, "title_ar", "") or getattr(self, "title_en", "") or str(self.pk)

    @classmethod
    def bilingual_pairs(cls) -> list[tuple[str, str]]:
        """أزواج الحقول (_ar, _en) المعرّفة على الموديل."""
        names = {f.name for f in cls._meta.concrete_fields}
        pairs = []
        for f in cls._meta.concrete_fields:
            if f.name.endswith("_ar"):
                partner = f.name[:-3] + "_en"
                if partner in names:
                    pairs.append((f.name, partner))
        return pairs

    @classmethod
    def writable_fields(cls) -> set[str]:
        return {
            f.attname for f in cls._meta.concrete_fields
            if f.attname not in SERVER_ASSIGNED_FIELDS
        }

    def to_row(self) -> dict:
        """تمثيل الصف كقاموس (بأسماء الأعمدة: user_id وليس user)."""
        return {f.attname: f.value_from_object(self) for f in self._meta.concrete_fields}


class FlatMediaRecord(ContentRecord):
    """وسائط بسيطة: صورة رئيسية + قائمة روابط صور إضافية مرتبة."""

    main_image_url = models.URLField("الصورة الرئيسية", max_length=500, blank=True, null=True)
    additional_images = models.JSONField("صور إضافية", default=list, blank=True)

    class Meta:
        abstract = True


# =========================
# الأخبار
# =========================
class News(FlatMediaRecord):
    title_ar = models.CharField("العنوان (عربي)", max_length=255)
    title_en = models.CharField("العنوان (إنجليزي)", max_length=255)
    content_ar = models.TextField("المحتوى (عربي)", blank=True)
    content_en = models.TextField("المحتوى (إنجليزي)", blank=True)
    category = models.CharField("التصنيف", max_length=120, blank=True)

    class Meta:
        db_table = "news"
        ordering = ["-created_at"]
        verbose_name = "خبر"
        verbose_name_plural = "الأخبار"


# =========================
# الفعاليات
# =========================
class Event(FlatMediaRecord):
    title_ar = models.CharField("العنوان (عربي)", max_length=255)
    title_en = models.CharField("العنوان (إنجليزي)", max_length=255)
    description_ar = models.TextField("الوصف (عربي)", blank=True)
    description_en = models.TextField("الوصف (إنجليزي)", blank=True)
    location_ar = models.CharField("المكان (عربي)", max_length=255, blank=True)
    location_en = models.CharField("المكان (إنجليزي)", max_length=255, blank=True)
    event_date = models.DateTimeField("تاريخ الفعالية", null=True, blank=True, db_index=True)

    class Meta:
        db_table = "events"
        ordering = ["event_date"]
        verbose_name = "فعالية"
        verbose_name_plural = "الفعاليات"


# =========================
# التقارير
# =========================
class Report(FlatMediaRecord):
    title_ar = models.CharField("العنوان (عربي)", max_length=255)
    title_en = models.CharField("العنوان (إنجليزي)", max_length=255)
    description_ar = models.TextField("الوصف (عربي)", blank=True)
    description_en = models.TextField("الوصف (إنجليزي)", blank=True)
    file_url = models.URLField("ملف التقرير", max_length=500, blank=True)
    file_size = models.CharField("حجم الملف", max_length=32, blank=True)
    report_type = models.CharField("نوع التقرير", max_length=64, blank=True)

    class Meta:
        db_table = "reports"
        ordering = ["-created_at"]
        verbose_name = "تقرير"
        verbose_name_plural = "التقارير"

    @property
    def file_download_url(self) -> str:
        """
        • إذا كان الرابط من Cloudinary → أدخل fl_attachment:<filename> داخل جزء /upload/.
        • غير Cloudinary → أضف Content-Disposition عبر query كحل احتياطي.
        """
        url = self.file_url or ""
        if not url:
            return ""

        filename = os.path.basename(url.split("?", 1)[0]) or "report"

        if "res.cloudinary.com" in url and "/upload/" in url:
            safe_fn = quote(filename, safe="")
            return url.replace("/upload/", f"/upload/fl_attachment:{safe_fn}/", 1)

        sep = "&" if "?" in url else "?"
        dispo = quote(f"attachment; filename*=UTF-8''{filename}", safe="")
        return f"{url}{sep}response-content-disposition={dispo}"


# =========================
# المشاريع
# =========================
def _default_budget():
    return {"amount": 0, "currency": "USD"}


def _default_beneficiaries_breakdown():
    return {"total": 0, "women": 0, "men": 0, "children": 0, "elderly": 0, "disabled": 0}


class StructuredMediaRecord(ContentRecord):
    """
    وسائط غنية: كل عنصر {url, uploaded_at, caption_ar, caption_en}.
    الحقول main_* قاموس واحد، والقوائم مرتبة.
    """

    main_image = models.JSONField("الصورة الرئيسية", default=dict, blank=True)
    images = models.JSONField("الصور", default=list, blank=True)
    main_video = models.JSONField("الفيديو الرئيسي", default=dict, blank=True)
    videos = models.JSONField("الفيديوهات", default=list, blank=True)
    main_file = models.JSONField("الملف الرئيسي", default=dict, blank=True)
    files = models.JSONField("الملفات", default=list, blank=True)

    class Meta:
        abstract = True


class Project(StructuredMediaRecord):
    class Status(models.TextChoices):
        PLANNED = "Planned", "مخطط"
        ONGOING = "Ongoing", "جارٍ"
        COMPLETED = "Completed", "مكتمل"

    title_ar = models.CharField("العنوان (عربي)", max_length=255)
    title_en = models.CharField("العنوان (إنجليزي)", max_length=255)
    description_ar = models.TextField("الوصف (عربي)", blank=True)
    description_en = models.TextField("الوصف (إنجليزي)", blank=True)
    duration_ar = models.CharField("المدة (عربي)", max_length=120, blank=True)
    duration_en = models.CharField("المدة (إنجليزي)", max_length=120, blank=True)

    objectives_ar = models.JSONField("الأهداف (عربي)", default=list, blank=True)
    objectives_en = models.JSONField("الأهداف (إنجليزي)", default=list, blank=True)
    achievements_ar = models.JSONField("الإنجازات (عربي)", default=list, blank=True)
    achievements_en = models.JSONField("الإنجازات (إنجليزي)", default=list, blank=True)
    beneficiaries_ar = models.JSONField("المستفيدون (عربي)", default=list, blank=True)
    beneficiaries_en = models.JSONField("المستفيدون (إنجليزي)", default=list, blank=True)
    funding_source_ar = models.JSONField("مصادر التمويل (عربي)", default=list, blank=True)
    funding_source_en = models.JSONField("مصادر التمويل (إنجليزي)", default=list, blank=True)

    # [{name_ar, name_en, coordinates: {lat, lng}}]
    locations = models.JSONField("المواقع", default=list, blank=True)
    start_date = models.DateField("تاريخ البدء", null=True, blank=True)
    end_date = models.DateField("تاريخ الانتهاء", null=True, blank=True)
    budget = models.JSONField("الميزانية", default=_default_budget, blank=True)
    status = models.CharField(
        "الحالة",
        max_length=16,
        choices=Status.choices,
        default=Status.PLANNED,
        db_index=True,
    )
    # [{name_ar, name_en, start_date, end_date, status}]
    project_phases = models.JSONField("مراحل المشروع", default=list, blank=True)
    beneficiaries_breakdown = models.JSONField(
        "توزيع المستفيدين", default=_default_beneficiaries_breakdown, blank=True
    )

    class Meta:
        db_table = "projects"
        ordering = ["-created_at"]
        verbose_name = "مشروع"
        verbose_name_plural = "المشاريع"


# =========================
# قصص النجاح
# =========================
class SuccessStory(StructuredMediaRecord):
    title_ar = models.CharField("العنوان (عربي)", max_length=255)
    title_en = models.CharField("العنوان (إنجليزي)", max_length=255)
    content_ar = models.TextField("المحتوى (عربي)", blank=True)
    content_en = models.TextField("المحتوى (إنجليزي)", blank=True)
    author_name_ar = models.CharField("اسم الكاتب (عربي)", max_length=150, blank=True)
    author_name_en = models.CharField("اسم الكاتب (إنجليزي)", max_length=150, blank=True)
    impact_ar = models.TextField("الأثر (عربي)", blank=True)
    impact_en = models.TextField("الأثر (إنجليزي)", blank=True)

    success_details_ar = models.JSONField("تفاصيل النجاح (عربي)", default=list, blank=True)
    success_details_en = models.JSONField("تفاصيل النجاح (إنجليزي)", default=list, blank=True)
    key_takeaways_ar = models.JSONField("الدروس المستفادة (عربي)", default=list, blank=True)
    key_takeaways_en = models.JSONField("الدروس المستفادة (إنجليزي)", default=list, blank=True)

    start_date = models.DateField("تاريخ البدء", null=True, blank=True)
    end_date = models.DateField("تاريخ الانتهاء", null=True, blank=True)
    categories = models.JSONField("التصنيفات", default=list, blank=True)
    location = models.CharField("المكان", max_length=255, blank=True)
    audience_engagement = models.JSONField("تفاعل الجمهور", default=dict, blank=True)

    class Meta:
        db_table = "success_stories"
        ordering = ["-created_at"]
        verbose_name = "قصة نجاح"
        verbose_name_plural = "قصص النجاح"
