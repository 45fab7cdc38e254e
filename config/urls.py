# config/urls.py
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI
    path("api/schema/", SpectacularAPIView.as_view(urlconf="exam_core.api.urls"), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Primary API (browser client uses /api/*)
    path("api/", include("exam_core.api.urls")),

    # Versioned alias
    path("api/v1/", include(("exam_core.api.urls", "v1"), namespace="v1")),
]
