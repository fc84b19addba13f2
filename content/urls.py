# content/urls.py
from django.urls import path
from . import views

app_name = "content"

urlpatterns = [
    # =========================
    # الواجهة العامة
    # =========================
    path("", views.home, name="home"),
    path("language/", views.set_language, name="set_language"),
    path("api/<slug:entity>/", views.public_list, name="public_list"),
    path("api/<slug:entity>/<uuid:pk>/", views.public_detail, name="public_detail"),

    # =========================
    # الدخول والخروج
    # =========================
    path("panel/login/", views.panel_login, name="panel_login"),
    path("panel/logout/", views.panel_logout, name="panel_logout"),

    # =========================
    # لوحة المحتوى
    # =========================
    path("panel/api/<slug:entity>/", views.panel_collection, name="panel_collection"),
    path("panel/api/<slug:entity>/<uuid:pk>/", views.panel_record, name="panel_record"),
    path("panel/api/<slug:entity>/<uuid:pk>/delete/", views.panel_delete, name="panel_delete"),
]
