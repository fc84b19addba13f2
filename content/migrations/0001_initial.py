# content/migrations/0001_initial.py
import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import content.models


def _record_fields():
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("published", models.BooleanField(db_index=True, default=False, verbose_name="منشور")),
        ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="تاريخ الإنشاء")),
        ("updated_at", models.DateTimeField(auto_now=True, verbose_name="تاريخ التحديث")),
        ("title_ar", models.CharField(max_length=255, verbose_name="العنوان (عربي)")),
        ("title_en", models.CharField(max_length=255, verbose_name="العنوان (إنجليزي)")),
    ]


def _user_field():
    return (
        "user",
        models.ForeignKey(
            editable=False,
            on_delete=django.db.models.deletion.PROTECT,
            related_name="%(class)s_records",
            to=settings.AUTH_USER_MODEL,
            verbose_name="الكاتب",
        ),
    )


def _flat_media_fields():
    return [
        ("main_image_url", models.URLField(blank=True, max_length=500, null=True, verbose_name="الصورة الرئيسية")),
        ("additional_images", models.JSONField(blank=True, default=list, verbose_name="صور إضافية")),
    ]


def _structured_media_fields():
    return [
        ("main_image", models.JSONField(blank=True, default=dict, verbose_name="الصورة الرئيسية")),
        ("images", models.JSONField(blank=True, default=list, verbose_name="الصور")),
        ("main_video", models.JSONField(blank=True, default=dict, verbose_name="الفيديو الرئيسي")),
        ("videos", models.JSONField(blank=True, default=list, verbose_name="الفيديوهات")),
        ("main_file", models.JSONField(blank=True, default=dict, verbose_name="الملف الرئيسي")),
        ("files", models.JSONField(blank=True, default=list, verbose_name="الملفات")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="StaffUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="البريد الإلكتروني")),
                ("name", models.CharField(db_index=True, max_length=150, verbose_name="الاسم")),
                ("is_active", models.BooleanField(default=True, verbose_name="نشط")),
                ("is_staff", models.BooleanField(default=False, verbose_name="موظّف لوحة")),
                ("date_joined", models.DateTimeField(auto_now_add=True, verbose_name="تاريخ الانضمام")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "مستخدم اللوحة",
                "verbose_name_plural": "مستخدمو اللوحة",
            },
            managers=[
                ("objects", content.models.StaffUserManager()),
            ],
        ),
        migrations.CreateModel(
            name="News",
            fields=[
                *_record_fields(),
                *_flat_media_fields(),
                ("content_ar", models.TextField(blank=True, verbose_name="المحتوى (عربي)")),
                ("content_en", models.TextField(blank=True, verbose_name="المحتوى (إنجليزي)")),
                ("category", models.CharField(blank=True, max_length=120, verbose_name="التصنيف")),
                _user_field(),
            ],
            options={
                "verbose_name": "خبر",
                "verbose_name_plural": "الأخبار",
                "db_table": "news",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                *_record_fields(),
                *_flat_media_fields(),
                ("description_ar", models.TextField(blank=True, verbose_name="الوصف (عربي)")),
                ("description_en", models.TextField(blank=True, verbose_name="الوصف (إنجليزي)")),
                ("location_ar", models.CharField(blank=True, max_length=255, verbose_name="المكان (عربي)")),
                ("location_en", models.CharField(blank=True, max_length=255, verbose_name="المكان (إنجليزي)")),
                ("event_date", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="تاريخ الفعالية")),
                _user_field(),
            ],
            options={
                "verbose_name": "فعالية",
                "verbose_name_plural": "الفعاليات",
                "db_table": "events",
                "ordering": ["event_date"],
            },
        ),
        migrations.CreateModel(
            name="Report",
            fields=[
                *_record_fields(),
                *_flat_media_fields(),
                ("description_ar", models.TextField(blank=True, verbose_name="الوصف (عربي)")),
                ("description_en", models.TextField(blank=True, verbose_name="الوصف (إنجليزي)")),
                ("file_url", models.URLField(blank=True, max_length=500, verbose_name="ملف التقرير")),
                ("file_size", models.CharField(blank=True, max_length=32, verbose_name="حجم الملف")),
                ("report_type", models.CharField(blank=True, max_length=64, verbose_name="نوع التقرير")),
                _user_field(),
            ],
            options={
                "verbose_name": "تقرير",
                "verbose_name_plural": "التقارير",
                "db_table": "reports",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                *_record_fields(),
                *_structured_media_fields(),
                ("description_ar", models.TextField(blank=True, verbose_name="الوصف (عربي)")),
                ("description_en", models.TextField(blank=True, verbose_name="الوصف (إنجليزي)")),
                ("duration_ar", models.CharField(blank=True, max_length=120, verbose_name="المدة (عربي)")),
                ("duration_en", models.CharField(blank=True, max_length=120, verbose_name="المدة (إنجليزي)")),
                ("objectives_ar", models.JSONField(blank=True, default=list, verbose_name="الأهداف (عربي)")),
                ("objectives_en", models.JSONField(blank=True, default=list, verbose_name="الأهداف (إنجليزي)")),
                ("achievements_ar", models.JSONField(blank=True, default=list, verbose_name="الإنجازات (عربي)")),
                ("achievements_en", models.JSONField(blank=True, default=list, verbose_name="الإنجازات (إنجليزي)")),
                ("beneficiaries_ar", models.JSONField(blank=True, default=list, verbose_name="المستفيدون (عربي)")),
                ("beneficiaries_en", models.JSONField(blank=True, default=list, verbose_name="المستفيدون (إنجليزي)")),
                ("funding_source_ar", models.JSONField(blank=True, default=list, verbose_name="مصادر التمويل (عربي)")),
                ("funding_source_en", models.JSONField(blank=True, default=list, verbose_name="مصادر التمويل (إنجليزي)")),
                ("locations", models.JSONField(blank=True, default=list, verbose_name="المواقع")),
                ("start_date", models.DateField(blank=True, null=True, verbose_name="تاريخ البدء")),
                ("end_date", models.DateField(blank=True, null=True, verbose_name="تاريخ الانتهاء")),
                ("budget", models.JSONField(blank=True, default=content.models._default_budget, verbose_name="الميزانية")),
                (
                    "status",
                    models.CharField(
                        choices=[("Planned", "مخطط"), ("Ongoing", "جارٍ"), ("Completed", "مكتمل")],
                        db_index=True,
                        default="Planned",
                        max_length=16,
                        verbose_name="الحالة",
                    ),
                ),
                ("project_phases", models.JSONField(blank=True, default=list, verbose_name="مراحل المشروع")),
                (
                    "beneficiaries_breakdown",
                    models.JSONField(
                        blank=True,
                        default=content.models._default_beneficiaries_breakdown,
                        verbose_name="توزيع المستفيدين",
                    ),
                ),
                _user_field(),
            ],
            options={
                "verbose_name": "مشروع",
                "verbose_name_plural": "المشاريع",
                "db_table": "projects",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SuccessStory",
            fields=[
                *_record_fields(),
                *_structured_media_fields(),
                ("content_ar", models.TextField(blank=True, verbose_name="المحتوى (عربي)")),
                ("content_en", models.TextField(blank=True, verbose_name="المحتوى (إنجليزي)")),
                ("author_name_ar", models.CharField(blank=True, max_length=150, verbose_name="اسم الكاتب (عربي)")),
                ("author_name_en", models.CharField(blank=True, max_length=150, verbose_name="اسم الكاتب (إنجليزي)")),
                ("impact_ar", models.TextField(blank=True, verbose_name="الأثر (عربي)")),
                ("impact_en", models.TextField(blank=True, verbose_name="الأثر (إنجليزي)")),
                ("success_details_ar", models.JSONField(blank=True, default=list, verbose_name="تفاصيل النجاح (عربي)")),
                ("success_details_en", models.JSONField(blank=True, default=list, verbose_name="تفاصيل النجاح (إنجليزي)")),
                ("key_takeaways_ar", models.JSONField(blank=True, default=list, verbose_name="الدروس المستفادة (عربي)")),
                ("key_takeaways_en", models.JSONField(blank=True, default=list, verbose_name="الدروس المستفادة (إنجليزي)")),
                ("start_date", models.DateField(blank=True, null=True, verbose_name="تاريخ البدء")),
                ("end_date", models.DateField(blank=True, null=True, verbose_name="تاريخ الانتهاء")),
                ("categories", models.JSONField(blank=True, default=list, verbose_name="التصنيفات")),
                ("location", models.CharField(blank=True, max_length=255, verbose_name="المكان")),
                ("audience_engagement", models.JSONField(blank=True, default=dict, verbose_name="تفاعل الجمهور")),
                _user_field(),
            ],
            options={
                "verbose_name": "قصة نجاح",
                "verbose_name_plural": "قصص النجاح",
                "db_table": "success_stories",
                "ordering": ["-created_at"],
            },
        ),
    ]
