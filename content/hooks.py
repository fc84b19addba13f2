# content/hooks.py
# -*- coding: utf-8 -*-
"""
ResourceHook: مرآة محلية لجدول محتوى واحد.

- الحالة: items / loading / error.
- القراءة: refresh() تستبدل القائمة كاملة عند النجاح، وتُبقي القديمة عند الفشل.
- الكتابة: create / update / delete ثم refresh() بعد تأكيد الخادم.
- المزامنة: اشتراك في قناة التغييرات عند mount()، وكل حدث يعيد refresh().
- لا استثناء يعبر العمليات العامة؛ الأخطاء تُحوَّل إلى نص.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .exceptions import ContentError
from .i18n import Language, coerce_language, localize, pick
from .permissions import AuthSession
from .remote import ALL_EVENTS, ChangeEvent, DataService, OrmDataService, Subscription
from .resources import ResourceSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    """نتيجة موحّدة لكل عمليات الكتابة: نجاح مع بيانات أو فشل مع رسالة."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "MutationResult":
        return cls(True, data, None)

    @classmethod
    def fail(cls, error: str) -> "MutationResult":
        return cls(False, None, error)

    def as_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def _error_message(exc: BaseException, fallback: str) -> str:
    if isinstance(exc, ContentError):
        return exc.message
    return str(exc) or fallback


class ResourceHook:
    def __init__(
        self,
        schema: ResourceSchema,
        session: AuthSession | None = None,
        service: DataService | None = None,
        language: Language | str = Language.AR,
    ):
        self.schema = schema
        self.session = session or AuthSession.anonymous()
        self.service = service or OrmDataService(schema)
        self.language = coerce_language(language)

        self.items: list[dict] = []
        self.error: Optional[str] = None
        self.total_count: int = 0

        self._in_flight = 0
        self._listeners: list[Callable[["ResourceHook"], None]] = []
        self._subscription: Optional[Subscription] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[asyncio.Task] = set()
        self._closed = False

    def __repr__(self):
        return f"<ResourceHook {self.schema.key} items={len(self.items)} loading={self.loading}>"

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def mounted(self) -> bool:
        return self._subscription is not None and self._subscription.active

    # =========================
    # المستمعون (إعادة الرسم في الواجهة)
    # =========================
    def add_listener(self, callback: Callable[["ResourceHook"], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Listener failed for %s hook", self.schema.key)

    # =========================
    # القراءة
    # =========================
    async def refresh(self) -> None:
        self._in_flight += 1
        try:
            rows = await self.service.select_all()
        except Exception as exc:
            logger.exception("Error fetching %s", self.schema.label)
            if not self._closed:
                self.error = _error_message(exc, f"Failed to fetch {self.schema.label}")
                self._notify()
        else:
            if not self._closed:
                # استبدال كامل؛ لا دمج مع القائمة السابقة
                self.items = list(rows)
                self.error = None
                self._notify()
        finally:
            self._in_flight -= 1

    async def load_page(self, page: int = 1, limit: int = 10) -> None:
        """نافذة مرقّمة من القائمة + العدد الكلي (للوحة الإدارة)."""
        page = max(int(page or 1), 1)
        limit = max(int(limit or 10), 1)
        self._in_flight += 1
        try:
            total = await self.service.count()
            rows = await self.service.select_page((page - 1) * limit, limit)
        except Exception as exc:
            logger.exception("Error fetching %s page %s", self.schema.label, page)
            if not self._closed:
                self.error = _error_message(exc, "An error occurred while fetching data")
                self._notify()
        else:
            if not self._closed:
                self.total_count = total
                self.items = list(rows)
                self.error = None
                self._notify()
        finally:
            self._in_flight -= 1

    async def get(self, record_id) -> MutationResult:
        try:
            row = await self.service.select_one(record_id)
        except Exception as exc:
            logger.warning("Error fetching %s %s: %s", self.schema.label, record_id, exc)
            return MutationResult.fail(_error_message(exc, f"Failed to fetch {self.schema.label}"))
        return MutationResult.ok(row)

    def published_items(self, language: Language | str | None = None, query: str = "") -> list[dict]:
        """الصفوف المنشورة بلغة العرض، مع تصفية اختيارية بنص البحث."""
        lang = coerce_language(language, self.language)
        rows = [localize(row, lang) for row in self.items if row.get("published")]
        return [row for row in rows if self.schema.matches(row, query)]

    # =========================
    # الكتابة
    # =========================
    async def create(self, record: Mapping) -> MutationResult:
        try:
            user_id = self.session.require_user_id()
            payload = self.schema.writable_payload(record)
            payload["user_id"] = user_id
            row = await self.service.insert_one(payload)
        except Exception as exc:
            logger.warning("Error creating %s: %s", self.schema.label, exc)
            return MutationResult.fail(self._mutation_error(exc, "create"))
        await self.refresh()
        return MutationResult.ok(row)

    async def update(self, record_id, fields: Mapping) -> MutationResult:
        try:
            row = await self.service.update_by_id(record_id, self.schema.writable_payload(fields))
        except Exception as exc:
            logger.warning("Error updating %s %s: %s", self.schema.label, record_id, exc)
            return MutationResult.fail(self._mutation_error(exc, "update"))
        await self.refresh()
        return MutationResult.ok(row)

    async def delete(self, record_id) -> MutationResult:
        try:
            await self.service.delete_by_id(record_id)
        except Exception as exc:
            logger.warning("Error deleting %s %s: %s", self.schema.label, record_id, exc)
            return MutationResult.fail(self._mutation_error(exc, "delete"))
        await self.refresh()
        return MutationResult.ok()

    def _mutation_error(self, exc: BaseException, verb: str) -> str:
        fallback = pick(
            self.language,
            f"تعذّر تنفيذ العملية على {self.schema.label_ar}",
            f"Failed to {verb} {self.schema.label}",
        )
        return _error_message(exc, fallback)

    # =========================
    # دورة الحياة والاشتراك
    # =========================
    async def mount(self, events=ALL_EVENTS) -> "ResourceHook":
        """تحميل أولي + اشتراك في تغييرات الجدول. يجب أن يقابله close()."""
        if self._closed:
            raise RuntimeError("Cannot mount a closed hook")
        if self._subscription is None:
            self._loop = asyncio.get_running_loop()
            self._subscription = self.service.subscribe(self._on_change, events)
        await self.refresh()
        return self

    def _on_change(self, event: ChangeEvent) -> None:
        # قد تُستدعى من خيط ORM؛ التنفيذ الفعلي على حلقة الخطاف
        loop = self._loop
        if self._closed or loop is None or loop.is_closed():
            return
        logger.debug("%s change on %s (%s)", event.event_type, event.table, event.record_id)
        loop.call_soon_threadsafe(self._schedule_refresh)

    def _schedule_refresh(self) -> None:
        if self._closed:
            return
        task = asyncio.ensure_future(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """انتظار أي refresh أطلقته قناة التغييرات."""
        await asyncio.sleep(0)
        while True:
            pending = [t for t in self._pending if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._closed = True
        self._listeners.clear()
        pending = [t for t in self._pending if not t.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._loop = None

    @asynccontextmanager
    async def subscribed(self, events=ALL_EVENTS):
        """
        async with hook.subscribed():
            ...
        الاشتراك يُحرَّر عند الخروج حتى مع الاستثناءات.
        """
        await self.mount(events)
        try:
            yield self
        finally:
            await self.close()
