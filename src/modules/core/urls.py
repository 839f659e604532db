from django.urls import path

from modules.core import views

urlpatterns = [
    path("health", views.health_check, name="health_check"),
    path("api/v1/me", views.MeView.as_view(), name="me"),
]
