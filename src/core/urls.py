"""Root URL configuration for the Postgate API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("auth/", include("authentication.urls")),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("", include("posts.urls")),
]
