# content/permissions.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

from django.http import HttpRequest, HttpResponse, JsonResponse

from .exceptions import AuthenticationError
from .i18n import pick, resolve_language

__all__ = [
    "AuthSession",
    "is_staff",
    "staff_required",
]


# ==============================
# جلسة المصادقة (تُمرَّر صراحة إلى الخطافات والنماذج)
# ==============================
@dataclass(frozen=True)
class AuthSession:
    """
    لقطة من هوية المستخدم الحالي.
    user=None تعني عدم وجود جلسة؛ أي محاولة كتابة تفشل بـ AuthenticationError.
    """

    user: Optional[Any] = None

    @classmethod
    def anonymous(cls) -> "AuthSession":
        return cls(None)

    @classmethod
    def from_request(cls, request: HttpRequest) -> "AuthSession":
        user = getattr(request, "user", None)
        if user is not None and getattr(user, "is_authenticated", False):
            return cls(user)
        return cls(None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user is not None and getattr(self.user, "is_authenticated", False))

    @property
    def user_id(self):
        return getattr(self.user, "pk", None) if self.is_authenticated else None

    def require_user_id(self):
        if not self.is_authenticated or self.user_id is None:
            raise AuthenticationError()
        return self.user_id


# ==============================
# فحص الصلاحيات
# ==============================
def is_staff(user) -> bool:
    return bool(user and getattr(user, "is_authenticated", False) and
                (getattr(user, "is_staff", False) or getattr(user, "is_superuser", False)))


def staff_required(view_func):
    """
    ديكوريتر لواجهات لوحة المحتوى (JSON):
    - بدون جلسة → 401
    - مستخدم غير موظف → 403
    """

    @wraps(view_func)
    def _wrapped(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        user = request.user
        lang = resolve_language(request)
        if not getattr(user, "is_authenticated", False):
            return JsonResponse(
                {"success": False, "error": pick(lang, "الرجاء تسجيل الدخول أولاً", "Please sign in first")},
                status=401,
            )
        if not is_staff(user):
            return JsonResponse(
                {"success": False, "error": pick(lang, "لا تملك صلاحية الوصول", "You do not have access")},
                status=403,
            )
        return view_func(request, *args, **kwargs)

    return _wrapped
