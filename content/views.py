# content/views.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from django.contrib.auth import authenticate, login, logout
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from .forms import FORMS
from .hooks import MutationResult, ResourceHook
from .i18n import SESSION_LANGUAGE_KEY, Language, coerce_language, localize, pick, resolve_language
from .media import MediaUploader
from .permissions import AuthSession, staff_required
from .remote import OrmDataService
from .resources import EVENTS, NEWS, PROJECTS, ResourceSchema, get_resource

logger = logging.getLogger(__name__)

HOME_SECTION_SIZE = 3
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# =========================
# أدوات مساعدة
# =========================
def get_uploader(language) -> MediaUploader:
    return MediaUploader(language=language)


def _schema_or_404(entity: str) -> ResourceSchema:
    try:
        return get_resource(entity)
    except KeyError:
        raise Http404(f"Unknown content type: {entity}") from None


def _public_hook(schema: ResourceSchema, language: Language) -> ResourceHook:
    return ResourceHook(schema, service=OrmDataService(schema, published_only=True), language=language)


def _panel_hook(request: HttpRequest, schema: ResourceSchema, language: Language) -> ResourceHook:
    return ResourceHook(schema, session=AuthSession.from_request(request), language=language)


def _result_response(result: MutationResult, fail_status: int = 400) -> JsonResponse:
    return JsonResponse(result.as_dict(), status=200 if result.success else fail_status)


def _int_param(request: HttpRequest, name: str, default: int, upper: int | None = None) -> int:
    try:
        value = int(request.GET.get(name) or default)
    except (TypeError, ValueError):
        value = default
    value = max(value, 1)
    return min(value, upper) if upper else value


# =========================
# الواجهة العامة
# =========================
@require_http_methods(["GET"])
def home(request: HttpRequest) -> HttpResponse:
    """آخر الأخبار + الفعاليات + المشاريع المنشورة بلغة الطلب."""
    lang = resolve_language(request)
    sections = {}
    for schema in (NEWS, EVENTS, PROJECTS):
        hook = _public_hook(schema, lang)
        async_to_sync(hook.refresh)()
        if hook.error:
            return JsonResponse({"success": False, "error": hook.error}, status=500)
        sections[schema.key] = hook.published_items(lang)[:HOME_SECTION_SIZE]
    return JsonResponse({"success": True, "language": lang.value, "data": sections})


@require_http_methods(["GET"])
def public_list(request: HttpRequest, entity: str) -> HttpResponse:
    schema = _schema_or_404(entity)
    lang = resolve_language(request)
    query = (request.GET.get("q") or "").strip()
    hook = _public_hook(schema, lang)
    async_to_sync(hook.refresh)()
    if hook.error:
        return JsonResponse({"success": False, "error": hook.error}, status=500)
    return JsonResponse(
        {"success": True, "language": lang.value, "query": query, "data": hook.published_items(lang, query)}
    )


@require_http_methods(["GET"])
def public_detail(request: HttpRequest, entity: str, pk) -> HttpResponse:
    schema = _schema_or_404(entity)
    lang = resolve_language(request)
    result = async_to_sync(_public_hook(schema, lang).get)(pk)
    if not result.success:
        return JsonResponse({"success": False, "error": result.error}, status=404)
    return JsonResponse({"success": True, "language": lang.value, "data": localize(result.data, lang)})


@require_http_methods(["POST"])
def set_language(request: HttpRequest) -> HttpResponse:
    lang = coerce_language(request.POST.get("lang") or request.GET.get("lang"), Language.AR)
    request.session[SESSION_LANGUAGE_KEY] = lang.value
    return JsonResponse({"success": True, "language": lang.value})


# =========================
# الدخول / الخروج (لوحة المحتوى)
# =========================
@require_http_methods(["POST"])
def panel_login(request: HttpRequest) -> HttpResponse:
    lang = resolve_language(request)
    email = (request.POST.get("email") or "").strip()
    password = request.POST.get("password") or ""
    user = authenticate(request, username=email, password=password)
    if user is None:
        logger.info("Failed panel login for %s", email or "<empty>")
        return JsonResponse(
            {
                "success": False,
                "error": pick(lang, "البريد الإلكتروني أو كلمة المرور غير صحيحة", "Invalid email or password"),
            },
            status=400,
        )
    login(request, user)
    return JsonResponse({"success": True, "data": {"id": user.pk, "email": user.email, "name": user.name}})


@require_http_methods(["POST"])
def panel_logout(request: HttpRequest) -> HttpResponse:
    if request.user.is_authenticated:
        logout(request)
    return JsonResponse({"success": True})


# =========================
# لوحة المحتوى
# =========================
@staff_required
@require_http_methods(["GET", "POST"])
def panel_collection(request: HttpRequest, entity: str) -> HttpResponse:
    """GET: صفحة من السجلات + العدد الكلي. POST: إنشاء سجل (مع الرفع)."""
    schema = _schema_or_404(entity)
    lang = resolve_language(request)
    hook = _panel_hook(request, schema, lang)

    if request.method == "GET":
        page = _int_param(request, "page", 1)
        limit = _int_param(request, "limit", DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        async_to_sync(hook.load_page)(page, limit)
        if hook.error:
            return JsonResponse({"success": False, "error": hook.error}, status=500)
        return JsonResponse({
            "success": True,
            "data": hook.items,
            "total_count": hook.total_count,
            "page": page,
            "limit": limit,
        })

    form = FORMS[schema.key](request.POST, request.FILES, language=lang)
    if not form.is_valid():
        return JsonResponse(
            {"success": False, "error": form.error_text(), "errors": form.errors.get_json_data()},
            status=400,
        )
    result = async_to_sync(form.submit)(hook, get_uploader(lang))
    return _result_response(result)


@staff_required
@require_http_methods(["GET", "POST"])
def panel_record(request: HttpRequest, entity: str, pk) -> HttpResponse:
    """GET: سجل واحد (بدون فلتر النشر). POST: تعديل جزئي."""
    schema = _schema_or_404(entity)
    lang = resolve_language(request)
    hook = _panel_hook(request, schema, lang)

    if request.method == "GET":
        return _result_response(async_to_sync(hook.get)(pk), fail_status=404)

    instance = schema.model.objects.filter(pk=pk).first()
    if instance is None:
        return JsonResponse(
            {"success": False, "error": pick(lang, "السجل غير موجود", "Record not found")},
            status=404,
        )
    form = FORMS[schema.key].for_update(instance, request.POST, request.FILES, language=lang)
    if not form.is_valid():
        return JsonResponse(
            {"success": False, "error": form.error_text(), "errors": form.errors.get_json_data()},
            status=400,
        )
    result = async_to_sync(form.submit)(hook, get_uploader(lang), record_id=pk)
    return _result_response(result)


@staff_required
@require_http_methods(["POST"])
def panel_delete(request: HttpRequest, entity: str, pk) -> HttpResponse:
    schema = _schema_or_404(entity)
    lang = resolve_language(request)
    hook = _panel_hook(request, schema, lang)
    result = async_to_sync(hook.delete)(pk)
    return _result_response(result, fail_status=404)
