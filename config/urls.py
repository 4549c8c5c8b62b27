"""URL routing for the Eduvate LMS backend.

Admin lives under /admin/; every REST endpoint plus the OpenAPI schema
and docs are mounted by `api.urls`.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("api.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
