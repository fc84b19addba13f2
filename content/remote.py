# content/remote.py
# -*- coding: utf-8 -*-
"""
طبقة البيانات البعيدة: عمليات على مستوى الجدول + قناة إشعارات التغيير.

كل جدول محتوى يُخدَم عبر OrmDataService (استعلام مرتب، إدراج، تعديل، حذف)،
وكل حفظ/حذف على موديلات المحتوى يُبث عبر change_feed لمن اشترك في الجدول.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Protocol

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .exceptions import AuthenticationError, RecordNotFound, RemoteOperationError
from .models import SERVER_ASSIGNED_FIELDS, ContentRecord
from .resources import ResourceSchema

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"
ALL_EVENTS = frozenset({INSERT, UPDATE, DELETE})


# =========================
# قناة إشعارات التغيير
# =========================
@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: str
    record_id: Any


class Subscription:
    """اشتراك واحد في جدول؛ يُحرَّر بـ unsubscribe() أو بالخروج من with."""

    def __init__(self, feed: "ChangeFeed", table: str, callback: Callable[[ChangeEvent], None],
                 events: Iterable[str]):
        self.feed = feed
        self.table = table
        self.callback = callback
        self.events = frozenset(events)
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self.feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()


class ChangeFeed:
    # الإشارات قد تصل من خيط غير خيط المشترك
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, table: str, callback: Callable[[ChangeEvent], None],
                  events: Iterable[str] = ALL_EVENTS) -> Subscription:
        unknown = set(events) - ALL_EVENTS
        if unknown:
            raise ValueError(f"Unknown change event type(s): {', '.join(sorted(unknown))}")
        sub = Subscription(self, table, callback, events)
        with self._lock:
            self._subscribers[table].append(sub)
        logger.debug("Subscribed to %s changes (%s)", table, ",".join(sorted(sub.events)))
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscribers.get(sub.table, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._subscribers.pop(sub.table, None)

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, []))

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [
                s for s in self._subscribers.get(event.table, [])
                if event.event_type in s.events
            ]
        for sub in targets:
            try:
                sub.callback(event)
            except Exception:
                # مشترك معطوب لا يُفشل عملية الحفظ الأصلية
                logger.exception("Change-feed subscriber failed for %s", event.table)


change_feed = ChangeFeed()


@receiver(post_save, dispatch_uid="content_change_feed_save")
def announce_save(sender, instance, created, raw=False, **kwargs):
    if raw or not isinstance(instance, ContentRecord):
        return
    change_feed.publish(ChangeEvent(sender._meta.db_table, INSERT if created else UPDATE, instance.pk))


@receiver(post_delete, dispatch_uid="content_change_feed_delete")
def announce_delete(sender, instance, **kwargs):
    if not isinstance(instance, ContentRecord):
        return
    change_feed.publish(ChangeEvent(sender._meta.db_table, DELETE, instance.pk))


# =========================
# خدمة الجدول
# =========================
class DataService(Protocol):
    """
    واجهة جدول واحد في مخزن البيانات (كل العمليات غير متزامنة).
    الصنف الذي يرث منها صراحةً ولا يعرّف عملية ما يرفع NotImplementedError عند استدعائها.
    """

    table: str = ""

    async def select_all(self) -> list[dict]:
        raise NotImplementedError

    async def select_page(self, offset: int, limit: int) -> list[dict]:
        raise NotImplementedError

    async def count(self) -> int:
        raise NotImplementedError

    async def select_one(self, record_id) -> dict:
        raise NotImplementedError

    async def insert_one(self, fields: Mapping) -> dict:
        raise NotImplementedError

    async def update_by_id(self, record_id, fields: Mapping) -> dict:
        raise NotImplementedError

    async def delete_by_id(self, record_id) -> None:
        raise NotImplementedError

    def subscribe(self, callback: Callable[[ChangeEvent], None],
                  events: Iterable[str] = ALL_EVENTS) -> Subscription:
        raise NotImplementedError


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(str(m) for m in msgs)}" for field, msgs in exc.message_dict.items()
        )
    return " ".join(str(m) for m in exc.messages)


class OrmDataService(DataService):
    """
    جدول محتوى واحد عبر Django ORM.
    published_only=True يقصر القراءة على السجلات المنشورة (للواجهة العامة).
    """

    def __init__(self, schema: ResourceSchema, published_only: bool = False,
                 feed: ChangeFeed | None = None):
        self.schema = schema
        self.model = schema.model
        self.table = schema.table
        self.published_only = published_only
        self.feed = feed or change_feed

    # ----- أدوات داخلية (متزامنة) -----
    def _queryset(self):
        qs = self.model.objects.all()
        if self.published_only:
            qs = qs.filter(published=True)
        return qs.order_by(self.schema.order_by, "pk")

    def _get(self, record_id) -> ContentRecord:
        try:
            return self._queryset().get(pk=record_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise RecordNotFound(f"{self.schema.label} record {record_id} not found") from None

    def _lookup(self, record_id) -> ContentRecord:
        # الكتابة لا تتقيد بفلتر النشر
        try:
            return self.model.objects.get(pk=record_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise RecordNotFound(f"{self.schema.label} record {record_id} not found") from None

    def _check_columns(self, fields: Mapping, allowed: set[str]) -> None:
        unknown = set(fields) - allowed
        if unknown:
            raise RemoteOperationError(
                f"Unknown column(s) for {self.table}: {', '.join(sorted(unknown))}"
            )

    def _full_clean(self, obj: ContentRecord) -> None:
        try:
            obj.full_clean(validate_unique=False)
        except ValidationError as exc:
            raise RemoteOperationError(_validation_message(exc)) from exc

    def _select_all(self) -> list[dict]:
        return [obj.to_row() for obj in self._queryset()]

    def _select_page(self, offset: int, limit: int) -> list[dict]:
        return [obj.to_row() for obj in self._queryset()[offset:offset + limit]]

    def _count(self) -> int:
        return self._queryset().count()

    def _select_one(self, record_id) -> dict:
        return self._get(record_id).to_row()

    def _insert_one(self, fields: Mapping) -> dict:
        fields = dict(fields)
        if not fields.get("user_id"):
            raise AuthenticationError()
        for key in ("id", "created_at", "updated_at"):
            fields.pop(key, None)
        self._check_columns(fields, self.model.writable_fields() | {"user_id"})

        obj = self.model(**fields)
        self._full_clean(obj)
        with transaction.atomic():
            obj.save(force_insert=True)
        obj.refresh_from_db()
        logger.info("Inserted %s row %s", self.table, obj.pk)
        return obj.to_row()

    def _update_by_id(self, record_id, fields: Mapping) -> dict:
        fields = {k: v for k, v in dict(fields).items() if k not in SERVER_ASSIGNED_FIELDS}
        self._check_columns(fields, self.model.writable_fields())
        obj = self._lookup(record_id)
        if not fields:
            return obj.to_row()

        for key, value in fields.items():
            setattr(obj, key, value)
        self._full_clean(obj)
        with transaction.atomic():
            obj.save(update_fields=[*fields, "updated_at"])
        obj.refresh_from_db()
        logger.info("Updated %s row %s (%s)", self.table, obj.pk, ", ".join(sorted(fields)))
        return obj.to_row()

    def _delete_by_id(self, record_id) -> None:
        obj = self._lookup(record_id)
        with transaction.atomic():
            obj.delete()
        logger.info("Deleted %s row %s", self.table, record_id)

    # ----- الواجهة غير المتزامنة -----
    async def select_all(self) -> list[dict]:
        return await sync_to_async(self._select_all)()

    async def select_page(self, offset: int, limit: int) -> list[dict]:
        return await sync_to_async(self._select_page)(offset, limit)

    async def count(self) -> int:
        return await sync_to_async(self._count)()

    async def select_one(self, record_id) -> dict:
        return await sync_to_async(self._select_one)(record_id)

    async def insert_one(self, fields: Mapping) -> dict:
        return await sync_to_async(self._insert_one)(fields)

    async def update_by_id(self, record_id, fields: Mapping) -> dict:
        return await sync_to_async(self._update_by_id)(record_id, fields)

    async def delete_by_id(self, record_id) -> None:
        await sync_to_async(self._delete_by_id)(record_id)

    def subscribe(self, callback: Callable[[ChangeEvent], None],
                  events: Iterable[str] = ALL_EVENTS) -> Subscription:
        return self.feed.subscribe(self.table, callback, events)
