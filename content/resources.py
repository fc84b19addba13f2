# content/resources.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .models import (
    SERVER_ASSIGNED_FIELDS,
    ContentRecord,
    Event,
    News,
    Project,
    Report,
    SuccessStory,
)


@dataclass(frozen=True)
class ResourceSchema:
    """وصف نوع محتوى واحد: الموديل، مفتاح الترتيب، واسم العرض."""

    key: str
    model: type[ContentRecord]
    order_by: str
    label: str
    label_ar: str
    main_media_field: str
    # حقول البحث العام بعد التعريب (title بدل title_ar / title_en)
    search_fields: tuple[str, ...] = ("title",)

    @property
    def table(self) -> str:
        return self.model._meta.db_table

    @property
    def bilingual_pairs(self) -> list[tuple[str, str]]:
        return self.model.bilingual_pairs()

    def matches(self, row: Mapping, query: str) -> bool:
        needle = (query or "").strip().casefold()
        if not needle:
            return True
        return any(needle in str(row.get(name) or "").casefold() for name in self.search_fields)

    def writable_payload(self, record: Mapping) -> dict:
        """يحذف الحقول التي يعيّنها الخادم (id, user_id, created_at, updated_at)."""
        return {k: v for k, v in dict(record).items() if k not in SERVER_ASSIGNED_FIELDS}


NEWS = ResourceSchema(
    key="news",
    model=News,
    order_by="-created_at",
    label="news",
    label_ar="الأخبار",
    main_media_field="main_image_url",
    search_fields=("title", "content", "category"),
)
EVENTS = ResourceSchema(
    key="events",
    model=Event,
    order_by="event_date",
    label="events",
    label_ar="الفعاليات",
    main_media_field="main_image_url",
    search_fields=("title", "description", "location"),
)
REPORTS = ResourceSchema(
    key="reports",
    model=Report,
    order_by="-created_at",
    label="reports",
    label_ar="التقارير",
    main_media_field="main_image_url",
    search_fields=("title", "description", "report_type"),
)
PROJECTS = ResourceSchema(
    key="projects",
    model=Project,
    order_by="-created_at",
    label="projects",
    label_ar="المشاريع",
    main_media_field="main_image",
    search_fields=("title", "description"),
)
SUCCESS_STORIES = ResourceSchema(
    key="success-stories",
    model=SuccessStory,
    order_by="-created_at",
    label="success stories",
    label_ar="قصص النجاح",
    main_media_field="main_image",
    search_fields=("title", "content", "location"),
)

RESOURCES: dict[str, ResourceSchema] = {
    s.key: s for s in (NEWS, EVENTS, REPORTS, PROJECTS, SUCCESS_STORIES)
}


def get_resource(key: str) -> ResourceSchema:
    try:
        return RESOURCES[key]
    except KeyError:
        raise KeyError(f"Unknown resource: {key}") from None
