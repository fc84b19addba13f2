# content/admin.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from django import forms
from django.contrib import admin
from django.contrib.auth import password_validation
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import UserChangeForm
from django.utils.html import format_html

from .forms import EventForm, NewsForm, ProjectForm, ReportForm, SuccessStoryForm
from .models import Event, News, Project, Report, StaffUser, SuccessStory


# =========================
# مستخدمو اللوحة (StaffUser)
# =========================
class StaffUserCreationForm(forms.ModelForm):
    """إنشاء مستخدم من لوحة Django: كلمة المرور تمر على AUTH_PASSWORD_VALIDATORS."""
    password1 = forms.CharField(label="كلمة المرور", widget=forms.PasswordInput, strip=False)
    password2 = forms.CharField(label="تأكيد كلمة المرور", widget=forms.PasswordInput, strip=False)

    class Meta:
        model = StaffUser
        fields = ("email", "name", "is_staff", "is_active")

    def clean(self):
        cleaned = super().clean()
        p1, p2 = cleaned.get("password1"), cleaned.get("password2")
        if p1 and p2 and p1 != p2:
            self.add_error("password2", "كلمتا المرور غير متطابقتين.")
        elif p1:
            try:
                password_validation.validate_password(p1, self.instance)
            except forms.ValidationError as exc:
                self.add_error("password1", exc)
        return cleaned

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])
        if commit:
            user.save()
        return user


class StaffUserChangeForm(UserChangeForm):
    # كلمة المرور تُعرض كملخص للقراءة فقط (ReadOnlyPasswordHashField)
    class Meta(UserChangeForm.Meta):
        model = StaffUser


@admin.register(StaffUser)
class StaffUserAdmin(UserAdmin):
    add_form = StaffUserCreationForm
    form = StaffUserChangeForm
    model = StaffUser

    list_display = ("name", "email", "is_active", "is_staff", "date_joined")
    list_filter = ("is_active", "is_staff", "is_superuser", "groups")
    search_fields = ("name", "email")
    ordering = ("name",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("المعلومات الشخصية", {"fields": ("name",)}),
        ("الصلاحيات", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("تواريخ النظام", {"fields": ("last_login", "date_joined")}),
    )
    readonly_fields = ("last_login", "date_joined")

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2", "is_staff", "is_active"),
            },
        ),
    )


# =========================
# الأساس المشترك لسجلات المحتوى
# =========================
class AdminFormMixin:
    """
    نموذج المحتوى داخل لوحة Django: نفس فحوص الوسائط الرئيسية والنشر ثنائي اللغة،
    بدون حقول الرفع (الروابط تُدخَل مباشرة).
    """

    upload_fields = {}
    main_image_file = None
    additional_image_files = None
    report_file = None
    image_files = None
    main_video_file = None
    video_files = None
    main_document_file = None
    document_files = None


class NewsAdminForm(AdminFormMixin, NewsForm):
    pass


class EventAdminForm(AdminFormMixin, EventForm):
    pass


class ReportAdminForm(AdminFormMixin, ReportForm):
    pass


class ProjectAdminForm(AdminFormMixin, ProjectForm):
    pass


class SuccessStoryAdminForm(AdminFormMixin, SuccessStoryForm):
    pass


class ContentRecordAdmin(admin.ModelAdmin):
    list_display = ("__str__", "published", "user", "created_at", "updated_at")
    list_filter = ("published", "created_at")
    search_fields = ("title_ar", "title_en")
    date_hierarchy = "created_at"
    list_select_related = ("user",)
    readonly_fields = ("user", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        # الكاتب من الجلسة عند الإنشاء فقط
        if not change and not obj.user_id:
            obj.user = request.user
        super().save_model(request, obj, form, change)

    @admin.display(description="معاينة الصورة")
    def preview_image(self, obj):
        url = getattr(obj, "main_image_url", None) or (getattr(obj, "main_image", None) or {}).get("url")
        if url:
            return format_html(
                '<img src="{}" width="60" height="60" style="object-fit:cover;border-radius:6px;" />',
                url,
            )
        return "—"


@admin.register(News)
class NewsAdmin(ContentRecordAdmin):
    form = NewsAdminForm
    list_display = ("__str__", "category", "published", "user", "created_at", "preview_image")
    list_filter = ("published", "category", "created_at")
    search_fields = ("title_ar", "title_en", "content_ar", "content_en", "category")


@admin.register(Event)
class EventAdmin(ContentRecordAdmin):
    form = EventAdminForm
    list_display = ("__str__", "event_date", "location_ar", "published", "created_at", "preview_image")
    list_filter = ("published", "event_date")
    search_fields = ("title_ar", "title_en", "location_ar", "location_en")
    date_hierarchy = "event_date"


@admin.register(Report)
class ReportAdmin(ContentRecordAdmin):
    form = ReportAdminForm
    list_display = ("__str__", "report_type", "file_size", "published", "created_at", "download_link")
    list_filter = ("published", "report_type", "created_at")
    search_fields = ("title_ar", "title_en", "description_ar", "description_en", "report_type")

    @admin.display(description="تنزيل")
    def download_link(self, obj):
        url = obj.file_download_url
        if url:
            return format_html('<a href="{}">⬇</a>', url)
        return "—"


@admin.register(Project)
class ProjectAdmin(ContentRecordAdmin):
    form = ProjectAdminForm
    list_display = ("__str__", "status", "start_date", "end_date", "published", "preview_image")
    list_filter = ("published", "status", "start_date")
    search_fields = ("title_ar", "title_en", "description_ar", "description_en")


@admin.register(SuccessStory)
class SuccessStoryAdmin(ContentRecordAdmin):
    form = SuccessStoryAdminForm
    list_display = ("__str__", "location", "start_date", "published", "created_at", "preview_image")
    list_filter = ("published", "start_date")
    search_fields = ("title_ar", "title_en", "author_name_ar", "author_name_en", "location")
