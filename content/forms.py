# content/forms.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional

from django import forms
from django.core.exceptions import ValidationError
from django.db import models

from .exceptions import AuthenticationError
from .hooks import MutationResult, ResourceHook
from .i18n import Language, coerce_language, pick
from .media import (
    MAX_FILES,
    MAX_IMAGES,
    MAX_VIDEOS,
    FileType,
    MediaUploader,
    format_file_size,
    media_record,
    validate_upload,
)
from .models import Event, News, Project, Report, SuccessStory
from .resources import EVENTS, NEWS, PROJECTS, REPORTS, SUCCESS_STORIES, ResourceSchema

__all__ = [
    "ContentForm",
    "NewsForm",
    "EventForm",
    "ReportForm",
    "ProjectForm",
    "SuccessStoryForm",
    "FORMS",
]


# ==============================
# رفع ملفات متعددة
# ==============================
class MultiFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleFileField(forms.FileField):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("widget", MultiFileInput())
        kwargs.setdefault("required", False)
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single = super().clean
        if isinstance(data, (list, tuple)):
            return [single(d, initial) for d in data if d]
        return [single(data, initial)] if data else []


def _is_empty(value) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value in (None, [], {}, ())


# ==============================
# الأساس المشترك
# ==============================
class ContentForm(forms.ModelForm):
    """
    نموذج محتوى ثنائي اللغة:
    - clean(): يرفض الملفات غير الصالحة، غياب الوسائط الرئيسية، والنشر بأزواج ناقصة.
    - submit(): يرفع الملفات بالتوازي ثم ينادي hook.create / hook.update.
    يجب استدعاء is_valid() (متزامن) قبل submit().
    """

    schema: ResourceSchema
    # اسم حقل الرفع → (نوع الملف، حقل الموديل، متعدد؟)
    upload_fields: dict[str, tuple[FileType, str, bool]] = {}
    main_media_required = True
    main_media_message = ("الصورة الرئيسية مطلوبة", "Main image is required")
    # حقول إلزامية على مستوى النموذج (وإن كانت اختيارية في الموديل)
    required_fields: tuple[str, ...] = ()
    required_message: Optional[tuple[str, str]] = None
    collection_caps: dict[str, tuple[int, str, str]] = {}

    def __init__(self, *args, language=Language.AR, **kwargs):
        self.language = coerce_language(language)
        super().__init__(*args, **kwargs)

    @classmethod
    def for_update(cls, instance, data=None, files=None, language=Language.AR):
        """
        تعديل جزئي: الحقول غير المرسلة تأخذ قيمتها الحالية،
        فيبقى changed_data مقتصرًا على ما تغيّر فعلاً.
        """
        merged = forms.model_to_dict(instance, fields=cls._meta.fields)
        if data is not None:
            merged.update(data.dict() if hasattr(data, "dict") else dict(data))
        return cls(merged, files, instance=instance, language=language)

    def msg(self, ar: str, en: str) -> str:
        return pick(self.language, ar, en)

    # الـ id يولّده الخادم؛ لا حاجة لفحص التفرد من النموذج
    def validate_unique(self):
        pass

    # ------------------------------
    # التحقق
    # ------------------------------
    def clean(self):
        cleaned = super().clean()
        self._clean_uploads(cleaned)
        self._clean_caps(cleaned)
        self._clean_required(cleaned)
        self._clean_main_media(cleaned)
        self._clean_published_pairs(cleaned)
        return cleaned

    def _uploaded(self, cleaned, field_name) -> list:
        value = cleaned.get(field_name)
        if not value:
            return []
        return list(value) if isinstance(value, (list, tuple)) else [value]

    def _clean_uploads(self, cleaned):
        for field_name, (file_type, _target, _many) in self.upload_fields.items():
            for f in self._uploaded(cleaned, field_name):
                try:
                    validate_upload(f, file_type, self.language)
                except ValidationError as exc:
                    self.add_error(field_name, exc)
                    break

    def _current(self, cleaned, model_field):
        if model_field in self.fields:
            return cleaned.get(model_field)
        return getattr(self.instance, model_field, None)

    def _clean_caps(self, cleaned):
        for field_name, (file_type, target, many) in self.upload_fields.items():
            if not many or target not in self.collection_caps:
                continue
            cap, ar, en = self.collection_caps[target]
            existing = self._current(cleaned, target) or []
            if len(existing) + len(self._uploaded(cleaned, field_name)) > cap:
                self.add_error(field_name, self.msg(ar.format(cap=cap), en.format(cap=cap)))

    def _clean_required(self, cleaned):
        missing = [name for name in self.required_fields if _is_empty(cleaned.get(name))]
        if not missing:
            return
        if self.required_message:
            self.add_error(None, self.msg(*self.required_message))
            return
        for name in missing:
            if name not in self.errors:
                self.add_error(name, self.msg("هذا الحقل مطلوب", "This field is required"))

    def _main_upload_field(self) -> Optional[str]:
        for field_name, (_t, target, many) in self.upload_fields.items():
            if target == self.schema.main_media_field and not many:
                return field_name
        return None

    def _clean_main_media(self, cleaned):
        if not self.main_media_required:
            return
        main_field = self.schema.main_media_field
        current = self._current(cleaned, main_field)
        if isinstance(current, dict):
            current = current.get("url")
        upload = self._main_upload_field()
        if current or (upload and self._uploaded(cleaned, upload)):
            return
        target = upload if upload in self.fields else (main_field if main_field in self.fields else None)
        self.add_error(target, self.msg(*self.main_media_message))

    def _clean_published_pairs(self, cleaned):
        if not cleaned.get("published"):
            return
        for ar_name, en_name in self.schema.bilingual_pairs:
            if ar_name not in self.fields or en_name not in self.fields:
                continue
            for name in (ar_name, en_name):
                if _is_empty(cleaned.get(name)) and name not in self.errors:
                    self.add_error(
                        name,
                        self.msg(
                            "يجب تعبئة النسختين العربية والإنجليزية قبل النشر",
                            "Both Arabic and English values are required before publishing",
                        ),
                    )

    def error_text(self) -> str:
        return "; ".join(str(m) for errors in self.errors.values() for m in errors)

    # ------------------------------
    # بناء الحمولة
    # ------------------------------
    def _model_fields(self) -> dict[str, models.Field]:
        model_fields = {f.name: f for f in self._meta.model._meta.concrete_fields}
        return {name: model_fields[name] for name in self.fields if name in model_fields}

    def build_payload(self, partial: bool = False) -> dict:
        fields = self._model_fields()
        names = [n for n in fields if n in self.changed_data] if partial else list(fields)
        payload = {}
        for name in names:
            value = self.cleaned_data.get(name)
            if value is None and not fields[name].null:
                # JSON/نص فارغ → القيمة الافتراضية للحقل بدل NULL
                value = fields[name].get_default()
            payload[name] = value
        return payload

    def wrap_upload(self, url: str, model_field: str):
        return url

    def extra_upload_fields(self, model_field: str, file) -> dict:
        return {}

    def _pending_uploads(self) -> list[tuple[str, object, FileType]]:
        pending = []
        for field_name, (file_type, _target, many) in self.upload_fields.items():
            files = self._uploaded(self.cleaned_data, field_name)
            for f in files if many else files[:1]:
                pending.append((field_name, f, file_type))
        return pending

    def apply_uploads(self, payload: dict, uploads, outcomes) -> dict:
        for (field_name, f, _type), outcome in zip(uploads, outcomes):
            _t, target, many = self.upload_fields[field_name]
            value = self.wrap_upload(outcome.url, target)
            if many:
                if target not in payload:
                    payload[target] = list(self._current(self.cleaned_data, target) or [])
                payload[target] = [*payload[target], value]
            else:
                payload[target] = value
            payload.update(self.extra_upload_fields(target, f))
        return payload

    async def submit(self, hook: ResourceHook, uploader: MediaUploader,
                     record_id=None) -> MutationResult:
        if self._errors is None:
            raise RuntimeError("is_valid() must be called before submit()")
        if self.errors:
            return MutationResult.fail(self.error_text())
        if record_id is None and not hook.session.is_authenticated:
            # لا رفع ولا كتابة بدون جلسة
            return MutationResult.fail(AuthenticationError().message)

        uploads = self._pending_uploads()
        outcomes = await uploader.upload_many([(f, t) for _n, f, t in uploads]) if uploads else []
        failed = [o.error for o in outcomes if not o.ok]
        if failed:
            return MutationResult.fail("; ".join(failed))

        payload = self.apply_uploads(self.build_payload(partial=record_id is not None),
                                     uploads, outcomes)
        if record_id is None:
            return await hook.create(payload)
        return await hook.update(record_id, payload)


# ==============================
# وسائط بسيطة (رابط + قائمة روابط)
# ==============================
FLAT_IMAGE_UPLOADS = {
    "main_image_file": (FileType.IMAGE, "main_image_url", False),
    "additional_image_files": (FileType.IMAGE, "additional_images", True),
}


class NewsForm(ContentForm):
    schema = NEWS
    upload_fields = FLAT_IMAGE_UPLOADS

    main_image_file = forms.FileField(label="الصورة الرئيسية", required=False)
    additional_image_files = MultipleFileField(label="صور إضافية")

    class Meta:
        model = News
        fields = [
            "title_ar",
            "title_en",
            "content_ar",
            "content_en",
            "category",
            "main_image_url",
            "additional_images",
            "published",
        ]


class EventForm(ContentForm):
    schema = EVENTS
    upload_fields = FLAT_IMAGE_UPLOADS
    required_fields = (
        "title_ar", "title_en", "description_ar", "description_en",
        "location_ar", "location_en", "event_date",
    )

    main_image_file = forms.FileField(label="الصورة الرئيسية", required=False)
    additional_image_files = MultipleFileField(label="صور إضافية")

    class Meta:
        model = Event
        fields = [
            "title_ar",
            "title_en",
            "description_ar",
            "description_en",
            "location_ar",
            "location_en",
            "event_date",
            "main_image_url",
            "additional_images",
            "published",
        ]


class ReportForm(ContentForm):
    schema = REPORTS
    upload_fields = {
        "report_file": (FileType.DOCUMENT, "file_url", False),
        **FLAT_IMAGE_UPLOADS,
    }
    # صورة الغلاف اختيارية؛ ملف التقرير هو الإلزامي
    main_media_required = False

    report_file = forms.FileField(label="ملف التقرير", required=False)
    main_image_file = forms.FileField(label="صورة الغلاف", required=False)
    additional_image_files = MultipleFileField(label="صور إضافية")

    class Meta:
        model = Report
        fields = [
            "title_ar",
            "title_en",
            "description_ar",
            "description_en",
            "report_type",
            "file_url",
            "main_image_url",
            "additional_images",
            "published",
        ]

    def _clean_required(self, cleaned):
        checks = [
            ("title_ar", "العنوان بالعربية مطلوب", "Arabic title is required"),
            ("title_en", "العنوان بالإنجليزية مطلوب", "English title is required"),
            ("description_ar", "الوصف بالعربية مطلوب", "Arabic description is required"),
            ("description_en", "الوصف بالإنجليزية مطلوب", "English description is required"),
            ("report_type", "نوع التقرير مطلوب", "Report type is required"),
        ]
        for name, ar, en in checks:
            if _is_empty(cleaned.get(name)) and name not in self.errors:
                self.add_error(name, self.msg(ar, en))

        if not self._current(cleaned, "file_url") and not self._uploaded(cleaned, "report_file"):
            target = "report_file" if "report_file" in self.fields else "file_url"
            self.add_error(target, self.msg("ملف التقرير مطلوب", "Report file is required"))

    def extra_upload_fields(self, model_field, file):
        if model_field == "file_url":
            return {"file_size": format_file_size(getattr(file, "size", 0))}
        return {}


# ==============================
# وسائط منظمة (مشاريع / قصص نجاح)
# ==============================
STRUCTURED_UPLOADS = {
    "main_image_file": (FileType.IMAGE, "main_image", False),
    "image_files": (FileType.IMAGE, "images", True),
    "main_video_file": (FileType.VIDEO, "main_video", False),
    "video_files": (FileType.VIDEO, "videos", True),
    "main_document_file": (FileType.DOCUMENT, "main_file", False),
    "document_files": (FileType.DOCUMENT, "files", True),
}

STRUCTURED_CAPS = {
    "images": (MAX_IMAGES, "يمكنك تحميل {cap} صور كحد أقصى", "You can upload a maximum of {cap} images"),
    "videos": (MAX_VIDEOS, "يمكنك تحميل {cap} فيديوهات كحد أقصى", "You can upload a maximum of {cap} videos"),
    "files": (MAX_FILES, "يمكنك تحميل {cap} ملفات كحد أقصى", "You can upload a maximum of {cap} files"),
}

STRUCTURED_MEDIA_FIELDS = ["main_image", "images", "main_video", "videos", "main_file", "files"]


class StructuredMediaForm(ContentForm):
    upload_fields = STRUCTURED_UPLOADS
    collection_caps = STRUCTURED_CAPS

    main_image_file = forms.FileField(label="الصورة الرئيسية", required=False)
    image_files = MultipleFileField(label="الصور")
    main_video_file = forms.FileField(label="الفيديو الرئيسي", required=False)
    video_files = MultipleFileField(label="الفيديوهات")
    main_document_file = forms.FileField(label="الملف الرئيسي", required=False)
    document_files = MultipleFileField(label="الملفات")

    def wrap_upload(self, url, model_field):
        return media_record(url)


class ProjectForm(StructuredMediaForm):
    schema = PROJECTS

    class Meta:
        model = Project
        fields = [
            "title_ar",
            "title_en",
            "description_ar",
            "description_en",
            "duration_ar",
            "duration_en",
            "objectives_ar",
            "objectives_en",
            "achievements_ar",
            "achievements_en",
            "beneficiaries_ar",
            "beneficiaries_en",
            "funding_source_ar",
            "funding_source_en",
            "locations",
            "start_date",
            "end_date",
            "budget",
            "status",
            "project_phases",
            "beneficiaries_breakdown",
            *STRUCTURED_MEDIA_FIELDS,
            "published",
        ]

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and end < start:
            self.add_error(
                "end_date",
                self.msg("تاريخ الانتهاء يسبق تاريخ البدء", "End date is before start date"),
            )
        budget = cleaned.get("budget")
        if budget not in (None, {}) and not isinstance(budget, dict):
            self.add_error("budget", self.msg("صيغة الميزانية غير صحيحة", "Invalid budget format"))
        return cleaned


class SuccessStoryForm(StructuredMediaForm):
    schema = SUCCESS_STORIES
    required_fields = (
        "title_ar", "title_en", "content_ar", "content_en",
        "author_name_ar", "author_name_en",
        "success_details_ar", "success_details_en",
        "key_takeaways_ar", "key_takeaways_en",
        "impact_ar", "impact_en",
        "start_date", "end_date", "categories", "location",
    )
    required_message = (
        "جميع الحقول المطلوبة والصورة الرئيسية مطلوبة",
        "All required fields and main image must be filled",
    )
    main_media_message = required_message

    class Meta:
        model = SuccessStory
        fields = [
            "title_ar",
            "title_en",
            "content_ar",
            "content_en",
            "author_name_ar",
            "author_name_en",
            "impact_ar",
            "impact_en",
            "success_details_ar",
            "success_details_en",
            "key_takeaways_ar",
            "key_takeaways_en",
            "start_date",
            "end_date",
            "categories",
            "location",
            "audience_engagement",
            *STRUCTURED_MEDIA_FIELDS,
            "published",
        ]


FORMS: dict[str, type[ContentForm]] = {
    form.schema.key: form
    for form in (NewsForm, EventForm, ReportForm, ProjectForm, SuccessStoryForm)
}
